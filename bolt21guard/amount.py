"""
Overflow-safe parsing of amounts coming from untrusted sources
(node API bodies, clipboard, QR payloads).

Values are never surfaced negative and never above the total supply:
garbage falls back to the default, oversized values saturate at the maximum.
"""

import re
from typing import Any, Optional

from loguru import logger

from .models import AmountResult

# 21M BTC in sats
MAX_SATS = 21_000_000 * 100_000_000

# ascii digits only, `\d` would also match full-width and arabic-indic digits
UNSIGNED_DECIMAL = re.compile(r"^\+?[0-9]+$")
USER_DECIMAL = re.compile(r"^[0-9]+$")


def _clamp(v: int, low: int, high: int) -> int:
    return max(low, min(v, high))


def parse_amount_result(
    value: Any, default_value: int = 0, max_value: int = MAX_SATS
) -> AmountResult:
    """
    Parse `value` into an amount in [0, max_value].

    The result tells whether the default was used, so callers can tell an
    explicit zero from a malformed value.
    """
    max_value = _clamp(int(max_value), 0, MAX_SATS)
    default_value = _clamp(int(default_value), 0, max_value)
    defaulted = AmountResult(amount=default_value, defaulted=True)

    if value is None or isinstance(value, bool):
        return defaulted

    if isinstance(value, int):
        if value < 0:
            return defaulted
        if value > max_value:
            return AmountResult(amount=max_value, clamped=True)
        return AmountResult(amount=value)

    try:
        text = str(value).strip()
    except Exception:
        return defaulted

    if not text or not UNSIGNED_DECIMAL.match(text):
        logger.debug(f"amount: unusable value of length {len(text)}, using default")
        return defaulted

    digits = text.lstrip("+").lstrip("0") or "0"
    # anything with more digits than the maximum is over it, skip the
    # conversion so huge payloads never reach int()
    if len(digits) > len(str(max_value)):
        logger.warning("amount: value above maximum, clamped")
        return AmountResult(amount=max_value, clamped=True)

    parsed = int(digits)
    if parsed > max_value:
        logger.warning("amount: value above maximum, clamped")
        return AmountResult(amount=max_value, clamped=True)
    return AmountResult(amount=parsed)


def parse_amount(value: Any, default_value: int = 0, max_value: int = MAX_SATS) -> int:
    return parse_amount_result(value, default_value, max_value).amount


# Amount typed by the user on the send screen: zero or out of range is an error
def parse_user_amount(text: Optional[str], max_value: int = MAX_SATS) -> Optional[int]:
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not USER_DECIMAL.match(trimmed):
        return None
    digits = trimmed.lstrip("0")
    if not digits:
        return None
    if len(digits) > len(str(max_value)):
        return None
    parsed = int(digits)
    if parsed > max_value:
        return None
    return parsed
