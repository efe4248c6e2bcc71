# User-facing text for every rejection reason, so each one gets its own fix
from typing import Dict, Union

from .models import ErrorKind, UrlRejection

reason_messages: Dict[Union[ErrorKind, UrlRejection], Dict[str, str]] = {
    ErrorKind.DANGEROUS_UNICODE: {
        "code": "DANGEROUS_UNICODE",
        "message": "The text contains hidden or direction-changing characters. "
        "Copy it again from a source you trust.",
    },
    ErrorKind.NON_ASCII: {
        "code": "NON_ASCII",
        "message": "The text contains non-Latin characters that may imitate "
        "a real address. Type or scan it again.",
    },
    ErrorKind.TOO_LONG: {
        "code": "TOO_LONG",
        "message": "The text is too long to be a payment request.",
    },
    UrlRejection.BAD_FORMAT: {
        "code": "BAD_FORMAT",
        "message": "This is not a valid URL.",
    },
    UrlRejection.WRONG_SCHEME: {
        "code": "WRONG_SCHEME",
        "message": "Only https:// URLs are allowed.",
    },
    UrlRejection.PRIVATE_NETWORK_BLOCKED: {
        "code": "PRIVATE_NETWORK_BLOCKED",
        "message": "Local and private network addresses are not allowed.",
    },
    UrlRejection.INVALID_DOMAIN: {
        "code": "INVALID_DOMAIN",
        "message": "Enter a full domain name, for example node.example.com.",
    },
}


def describe(reason: Union[ErrorKind, UrlRejection]) -> Dict[str, str]:
    return dict(reason_messages[reason])
