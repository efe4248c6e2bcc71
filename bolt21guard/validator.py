"""
Validation of untrusted strings: payment destinations, memos and
scanned codes.

Homograph defense is an ASCII allowlist rather than a table of confusable
characters. A confusables table is never complete, printable ASCII is, and
every destination format we accept (bech32, base58, BOLT11/BOLT12) is
ASCII-only. Do not relax this to allow specific non-Latin scripts.
"""

import re
from typing import Any, Optional

from loguru import logger

from .models import ErrorKind, PaymentType, ValidationOutcome
from .settings import settings

DEFAULT_MEMO = "Bolt21"
MAX_MEMO_LENGTH = 100

# Characters that hide or reorder what the user sees
DANGEROUS_UNICODE = re.compile(
    "["
    "\u00a0"  # no-break space
    "\u00ad"  # soft hyphen
    "\u061c"  # arabic letter mark
    "\u180e"  # mongolian vowel separator
    "\u200b-\u200f"  # zero-width space/non-joiner/joiner, lrm, rlm
    "\u202a-\u202e"  # bidi embeddings, pop, overrides
    "\u2060-\u2064"  # word joiner, invisible operators
    "\u2066-\u2069"  # bidi isolates
    "\u3000"  # ideographic space
    "\ufeff"  # byte-order mark
    "\ufff9-\ufffb"  # interlinear annotation anchors
    "]"
)

# Raw control characters, tab/newline/carriage return are kept for memos
CONTROL_CHARACTERS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

MEMO_UNSAFE = re.compile('[<>"\x00-\x1f]')

BOLT12_PREFIXES = ("lno",)
BOLT11_PREFIXES = ("lnbc", "lntb", "lnbcrt")
ON_CHAIN_PREFIXES = ("bitcoin:", "bc1", "1", "3")


def contains_dangerous_unicode(text: str) -> bool:
    return DANGEROUS_UNICODE.search(text) is not None


def sanitize(text: str) -> str:
    return CONTROL_CHARACTERS.sub("", text).strip()


def validate(raw: Any, max_length: Optional[int] = None) -> ValidationOutcome:
    """
    Check an untrusted string before it is used as a destination or memo.

    Checks run in order and the first failure wins: dangerous unicode,
    non-ASCII, length. Only accepted input is sanitized.
    """
    if max_length is None:
        max_length = settings.max_input_length
    if raw is None:
        raw = ""
    if not isinstance(raw, str):
        logger.warning("validator: input is not a string")
        return ValidationOutcome.reject(ErrorKind.NON_ASCII)

    if contains_dangerous_unicode(raw):
        logger.warning(f"validator: dangerous unicode in input of length {len(raw)}")
        return ValidationOutcome.reject(ErrorKind.DANGEROUS_UNICODE)

    # everything in 0x00-0x7f is either printable or removed by sanitize()
    if not raw.isascii():
        logger.warning(f"validator: non-ascii input of length {len(raw)}")
        return ValidationOutcome.reject(ErrorKind.NON_ASCII)

    if len(raw) > max_length:
        logger.warning(f"validator: input too long ({len(raw)} > {max_length})")
        return ValidationOutcome.reject(ErrorKind.TOO_LONG)

    return ValidationOutcome.accept(sanitize(raw))


def classify(text: Any) -> PaymentType:
    if not isinstance(text, str):
        return PaymentType.UNKNOWN
    lower = text.strip().lower()
    if lower.startswith(BOLT12_PREFIXES):
        return PaymentType.BOLT12_OFFER
    if lower.startswith(BOLT11_PREFIXES):
        return PaymentType.BOLT11_INVOICE
    if lower.startswith(ON_CHAIN_PREFIXES):
        return PaymentType.ON_CHAIN_ADDRESS
    return PaymentType.UNKNOWN


# Scanner glue only wants a usable string or nothing
def validate_qr_code(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    outcome = validate(raw)
    if not outcome.accepted or not outcome.sanitized:
        return None
    return outcome.sanitized


def sanitize_memo(memo: Optional[str], max_length: int = MAX_MEMO_LENGTH) -> str:
    if memo is None:
        return DEFAULT_MEMO
    return MEMO_UNSAFE.sub("", memo)[:max_length]
