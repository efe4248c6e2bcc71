"""
Durable risk history.

A torn or corrupt file must never be read back as "no history", that would
reset the accumulated risk to zero. Writes go to a temporary file in the
same directory and are renamed over the target only once flushed to disk.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from pydantic import ValidationError

from .models import RiskSnapshot
from .tracker import PaymentRiskTracker


class RiskStateCorrupted(ValueError):
    pass


class RiskStateStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[RiskSnapshot]:
        """
        Returns None when nothing was ever saved.
        Raises RiskStateCorrupted when the file exists but can't be trusted.
        """
        if not self.path.exists():
            return None
        try:
            data = self.path.read_text(encoding="utf-8")
            return RiskSnapshot.model_validate_json(data)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.error(f"risk store: unreadable state at {self.path}: {e}")
            raise RiskStateCorrupted(str(e)) from e

    def save(self, snapshot: RiskSnapshot):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        self._fsync_dir()
        logger.debug(f"risk store: saved {len(snapshot.records)} records")

    def _fsync_dir(self):
        # makes the rename itself durable
        fd = os.open(str(self.path.parent), os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def load_into(self, tracker: PaymentRiskTracker) -> bool:
        snapshot = self.load()
        if snapshot is None:
            return False
        try:
            tracker.restore(snapshot)
        except ValueError as e:
            raise RiskStateCorrupted(str(e)) from e
        logger.info(f"risk store: restored {len(snapshot.records)} records")
        return True
