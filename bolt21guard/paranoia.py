# Run-time hardening to detect unexpected inputs on the trusted paths
import math
import re

from loguru import logger

from .amount import MAX_SATS
from .settings import settings

ENABLE_HARDENING = settings.enable_hardening

DAY_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def panic(reason: str):
    if not ENABLE_HARDENING:
        return
    logger.error(f"hardening:  {reason}")
    raise ValueError(f"hardening:  {reason}")


# Throw if string contains any non-printable characters
def assert_printable(v: str):
    if not ENABLE_HARDENING:
        return
    if not isinstance(v, str):
        panic("not a string")
    if not v.isprintable():
        panic("string contains non-printable characters")


# Check if number is valid int (bools are not amounts)
def assert_valid_int(v: int):
    if not ENABLE_HARDENING:
        return
    if isinstance(v, bool) or not isinstance(v, int):
        panic("number is not a valid int")


# Check if number is a valid non-negative int
def assert_valid_positive_int(v: int):
    if not ENABLE_HARDENING:
        return
    assert_valid_int(v)
    if v < 0:
        panic("number is not positive")


# Check if number is a valid sats amount
def assert_valid_sats(v: int):
    if not ENABLE_HARDENING:
        return
    assert_valid_positive_int(v)
    if v > MAX_SATS:
        panic("sats amount is above the total supply")


# Check if valid timestamp in seconds (float timestamps from time.time() are fine)
def assert_valid_timestamp_seconds(v: float):
    if not ENABLE_HARDENING:
        return
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        panic("timestamp is not a number")
    if not math.isfinite(v):
        panic("timestamp is not finite")
    if v < 0:
        panic("timestamp is negative")
    if v > 2**34:
        panic("timestamp is too high")


# Check if string is a calendar day (YYYY-MM-DD)
def assert_valid_day(v: str):
    if not ENABLE_HARDENING:
        return
    assert_printable(v)
    if not DAY_PATTERN.match(v):
        panic("string is not a valid day")


# Check if string is within sane parameters
def assert_sane_string(v: str, max_length: int = settings.max_input_length):
    if not ENABLE_HARDENING:
        return
    assert_printable(v)
    if len(v) > max_length:
        panic("string is too long")


# Check if string is a non-empty string
def assert_non_empty_string(v: str):
    if not ENABLE_HARDENING:
        return
    assert_printable(v)
    if len(v.strip()) == 0:
        panic("string is empty")
