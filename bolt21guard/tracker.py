"""
Cumulative payment risk tracking.

Two independent views over the same payment log decide whether a payment
needs step-up authentication:

- a short rolling window (5 minutes by default), pruned on every call
- a daily aggregate keyed by UTC calendar day, reset only when the day
  changes

A single window can be waited out by spacing sub-threshold payments just
over the window apart; the daily ceiling cannot. Either ceiling alone is
enough to require step-up.

One tracker belongs to one wallet session. It is not safe to interleave
evaluate/record from concurrent tasks, run payments through an
ExecutionQueue (see dispatch.py).
"""

import time
from datetime import date, datetime, timezone
from typing import Any, Callable, List, Optional

from loguru import logger

from .amount import MAX_SATS, parse_amount_result
from .models import PaymentRecord, RiskDecision, RiskSnapshot
from .paranoia import (
    assert_valid_day,
    assert_valid_sats,
    assert_valid_timestamp_seconds,
)
from .settings import settings

SNAPSHOT_VERSION = 1


def utc_day(timestamp: float) -> date:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()


class PaymentRiskTracker:
    def __init__(
        self,
        window_seconds: Optional[float] = None,
        short_threshold: Optional[int] = None,
        daily_threshold: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.window_seconds = (
            window_seconds if window_seconds is not None else settings.window_seconds
        )
        self.short_threshold = (
            short_threshold
            if short_threshold is not None
            else settings.short_threshold_sats
        )
        self.daily_threshold = (
            daily_threshold
            if daily_threshold is not None
            else settings.daily_threshold_sats
        )
        self.clock = clock

        # short window, insertion order is chronological order
        self._records: List[PaymentRecord] = []
        # daily aggregate
        self._day: Optional[date] = None
        self._daily_total: int = 0

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def _prune(self, now: float):
        """
        Drop short-window records older than the window and roll the daily
        aggregate over when the UTC day changed.
        """
        self._records = [
            r for r in self._records if now - r.observed_at <= self.window_seconds
        ]
        today = utc_day(now)
        # only roll forward, a clock that jumped back keeps the current total
        if self._day is None or today > self._day:
            if self._daily_total:
                logger.debug(f"risk tracker: new day {today}, daily total reset")
            self._day = today
            self._daily_total = 0

    def short_window_total(self) -> int:
        return sum(r.amount_sats for r in self._records)

    def evaluate(self, candidate_amount: Any, now: Optional[float] = None) -> RiskDecision:
        """
        Decide whether a payment of `candidate_amount` sats needs step-up.
        Does not record anything. An unusable amount is treated as the
        maximum, so it always requires step-up.
        """
        now = self._now(now)
        self._prune(now)
        candidate = parse_amount_result(candidate_amount, default_value=MAX_SATS).amount

        short_total = self.short_window_total()
        daily_total = self._daily_total

        trigger = None
        if short_total + candidate >= self.short_threshold:
            trigger = "short_window"
        elif daily_total + candidate >= self.daily_threshold:
            trigger = "daily"

        if trigger:
            logger.info(
                f"risk tracker: step-up required ({trigger}), candidate={candidate}"
                f" short={short_total} daily={daily_total}"
            )
        return RiskDecision(
            requires_step_up=trigger is not None,
            short_window_total=short_total,
            daily_total=daily_total,
            trigger=trigger,
        )

    def record(self, amount: int, now: Optional[float] = None) -> PaymentRecord:
        """
        Add a payment that is going ahead. Only call this for payments that
        actually proceed, evaluated-but-abandoned ones would inflate totals.
        """
        now = self._now(now)

        # hardening #
        assert_valid_sats(amount)
        assert_valid_timestamp_seconds(now)
        # ## #

        self._prune(now)
        entry = PaymentRecord(amount_sats=amount, observed_at=now)
        self._records.append(entry)
        self._daily_total += amount
        logger.debug(
            f"risk tracker: recorded {amount} sats, short={self.short_window_total()}"
            f" daily={self._daily_total}"
        )
        return entry

    def reset(self):
        self._records = []
        self._day = None
        self._daily_total = 0

    def snapshot(self) -> RiskSnapshot:
        return RiskSnapshot(
            version=SNAPSHOT_VERSION,
            records=list(self._records),
            day=self._day.isoformat() if self._day else None,
            daily_total=self._daily_total,
        )

    def restore(self, snapshot: RiskSnapshot):
        if snapshot.version != SNAPSHOT_VERSION:
            raise ValueError(f"unsupported risk snapshot version {snapshot.version}")

        # hardening #
        assert_valid_sats(snapshot.daily_total)
        for r in snapshot.records:
            assert_valid_sats(r.amount_sats)
            assert_valid_timestamp_seconds(r.observed_at)
        if snapshot.day is not None:
            assert_valid_day(snapshot.day)
        # ## #

        self._records = list(snapshot.records)
        self._day = date.fromisoformat(snapshot.day) if snapshot.day else None
        self._daily_total = snapshot.daily_total
