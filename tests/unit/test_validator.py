import pytest
from pydantic import ValidationError

from bolt21guard.models import ErrorKind, PaymentType, ValidationOutcome
from bolt21guard.remediation import describe
from bolt21guard.settings import settings
from bolt21guard.validator import (
    classify,
    contains_dangerous_unicode,
    sanitize,
    sanitize_memo,
    validate,
    validate_qr_code,
)

VALID_ADDRESS = "bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq"

HIDDEN_CHARACTERS = [
    "\u200b",  # zero-width space
    "\u200c",  # zero-width non-joiner
    "\u200d",  # zero-width joiner
    "\u200e",  # left-to-right mark
    "\u200f",  # right-to-left mark
    "\u202a",
    "\u202b",
    "\u202c",
    "\u202d",
    "\u202e",
    "\u2060",  # word joiner
    "\u2061",
    "\u2063",
    "\u2064",
    "\u2066",
    "\u2069",
    "\ufeff",  # bom
    "\ufff9",
    "\ufffb",
    "\u00a0",
    "\u3000",
]


@pytest.mark.parametrize("char", HIDDEN_CHARACTERS)
def test_hidden_characters_rejected(char):
    for text in (char, "abc" + char + "def", char + VALID_ADDRESS, VALID_ADDRESS + char):
        outcome = validate(text)
        assert not outcome.accepted
        assert outcome.reason == ErrorKind.DANGEROUS_UNICODE
        assert outcome.sanitized is None


def test_rtl_override_in_address():
    outcome = validate("bc1q\u202eattacker")
    assert outcome.reason == ErrorKind.DANGEROUS_UNICODE


def test_rtl_display_reversal():
    assert validate("\u202emoc.rekcatta\u202c").reason == ErrorKind.DANGEROUS_UNICODE


def test_valid_address_unchanged():
    outcome = validate(VALID_ADDRESS)
    assert outcome.accepted
    assert outcome.sanitized == VALID_ADDRESS
    assert outcome.reason is None


@pytest.mark.parametrize(
    "text",
    [
        "1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2",
        "3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy",
        "lnbc1pvjluezsp5zyg3zyg3zyg",
        "lno1qgsyxjtl6luzd9t3pr62xr7eemp6awnejusgf6gw45q75vcfqqqqqqq",
        "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
        "bitcoin:1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2?amount=1&label=coffee shop",
    ],
)
def test_printable_ascii_accepted(text):
    outcome = validate(text)
    assert outcome.accepted
    assert outcome.sanitized == text


def test_cyrillic_lookalike_rejected():
    # the "c" is U+0441
    outcome = validate("lnb\u04411pvjluez")
    assert outcome.reason == ErrorKind.NON_ASCII


@pytest.mark.parametrize("char", ["\u0430", "\u0410", "\u0412", "\u03b1", "\u03bf", "\u03c1", "\u00e9"])
def test_other_scripts_rejected(char):
    assert validate("bc1q" + char).reason == ErrorKind.NON_ASCII


def test_dangerous_unicode_checked_first():
    assert validate("\u0430\u202e").reason == ErrorKind.DANGEROUS_UNICODE
    assert validate("a" * 5000 + "\u200b").reason == ErrorKind.DANGEROUS_UNICODE


def test_non_ascii_checked_before_length():
    assert validate("\u0430" * 5000).reason == ErrorKind.NON_ASCII


def test_length_limit():
    limit = settings.max_input_length
    assert validate("a" * limit).accepted
    assert validate("a" * (limit + 1)).reason == ErrorKind.TOO_LONG
    assert validate("a" * 100, max_length=10).reason == ErrorKind.TOO_LONG


def test_control_characters_stripped():
    assert validate("bc1q\x00\x01abcd").sanitized == "bc1qabcd"
    assert validate("abc\x01\x02\x03def").sanitized == "abcdef"
    assert validate("\x07bell").sanitized == "bell"
    assert validate("abc\x7fdef").sanitized == "abcdef"
    assert validate("abc\x0b\x0c\x1fdef").sanitized == "abcdef"


def test_tab_newline_carriage_return_kept():
    assert validate("abc\ndef").sanitized == "abc\ndef"
    assert validate("abc\tdef").sanitized == "abc\tdef"
    assert validate("abc\rdef").sanitized == "abc\rdef"


def test_whitespace_trimmed():
    assert validate("  abc  ").sanitized == "abc"
    assert validate("\t\nabc\n\t").sanitized == "abc"


def test_empty_and_none():
    assert validate("").sanitized == ""
    assert validate(None).sanitized == ""


def test_non_string_rejected():
    assert validate(12345).reason == ErrorKind.NON_ASCII
    assert validate(b"bc1q").reason == ErrorKind.NON_ASCII


def test_outcome_never_both():
    with pytest.raises(ValidationError):
        ValidationOutcome(accepted=True, sanitized="x", reason=ErrorKind.TOO_LONG)
    with pytest.raises(ValidationError):
        ValidationOutcome(accepted=False, sanitized="x", reason=ErrorKind.TOO_LONG)
    with pytest.raises(ValidationError):
        ValidationOutcome(accepted=False)


def test_helpers():
    assert contains_dangerous_unicode("abc\u2060")
    assert not contains_dangerous_unicode("abc def")
    assert sanitize("  a\x00b  ") == "ab"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("lno1qgsyxjtl6luzd9t3pr62xr7eemp6awnejusgf6gw45q75vcfqqqqqqq", PaymentType.BOLT12_OFFER),
        ("LNO1QGSYXJTL6", PaymentType.BOLT12_OFFER),
        ("  lno1qgsyxjtl6  ", PaymentType.BOLT12_OFFER),
        ("lnbc1pvjluezsp5zyg3zyg3zyg", PaymentType.BOLT11_INVOICE),
        ("lntb1pvjluezsp5zyg3zyg3zyg", PaymentType.BOLT11_INVOICE),
        ("lnbcrt1pvjluezsp5zyg3zyg3zyg", PaymentType.BOLT11_INVOICE),
        ("LNBC1PVJLUEZSP5", PaymentType.BOLT11_INVOICE),
        (VALID_ADDRESS, PaymentType.ON_CHAIN_ADDRESS),
        ("1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2", PaymentType.ON_CHAIN_ADDRESS),
        ("3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy", PaymentType.ON_CHAIN_ADDRESS),
        ("bitcoin:" + VALID_ADDRESS, PaymentType.ON_CHAIN_ADDRESS),
        ("BITCOIN:1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2?amount=1", PaymentType.ON_CHAIN_ADDRESS),
        ("", PaymentType.UNKNOWN),
        ("   ", PaymentType.UNKNOWN),
        ("invalid", PaymentType.UNKNOWN),
        ("http://example.com", PaymentType.UNKNOWN),
        ("lightning:lnbc1pvjluez", PaymentType.UNKNOWN),
    ],
)
def test_classify(text, expected):
    assert classify(text) == expected


def test_classify_never_raises():
    assert classify(None) == PaymentType.UNKNOWN
    assert classify(42) == PaymentType.UNKNOWN


def test_qr_code():
    assert validate_qr_code(None) is None
    assert validate_qr_code("") is None
    assert validate_qr_code("   ") is None
    assert validate_qr_code("a" * 5000) is None
    assert validate_qr_code("lnb\u04411pvjluez") is None
    assert validate_qr_code("bc1q\u202eattacker") is None
    assert validate_qr_code("bc1q\u200babcd") is None
    assert validate_qr_code("bc1q\x00\x01abcd") == "bc1qabcd"
    assert validate_qr_code("  bc1qabcd  ") == "bc1qabcd"
    normal = "lnbc1" + "a" * 300
    assert validate_qr_code(normal) == normal


def test_memo():
    assert sanitize_memo(None) == "Bolt21"
    assert sanitize_memo("Test payment") == "Test payment"
    assert sanitize_memo("<script>") == "script"
    assert sanitize_memo('say "hi"\x00\n') == "say hi"
    assert len(sanitize_memo("A" * 200)) == 100
    assert len(sanitize_memo("A" * 200, max_length=20)) == 20


def test_every_rejection_has_its_own_message():
    messages = {describe(kind)["message"] for kind in ErrorKind}
    assert len(messages) == len(ErrorKind)
    assert describe(ErrorKind.NON_ASCII)["code"] == "NON_ASCII"
