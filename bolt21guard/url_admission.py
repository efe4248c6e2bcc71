"""
Admission control for user-configured remote node endpoints.

The host is matched as a literal string, the way the transport will see
it. No DNS resolution and no canonical IP parsing happens here, so octal,
hex or single-integer encodings of private addresses are not caught.
"""

from typing import Any

import httpx
from loguru import logger

from .models import UrlRejection, UrlVerdict

ALLOWED_SCHEME = "https"

# Matched with both contains and startswith against the lower-cased host
BLOCKED_HOST_PATTERNS = [
    "localhost",
    "127.",
    "0.0.0.0",
    "10.",
    "172.16.",
    "172.17.",
    "172.18.",
    "172.19.",
    "172.20.",
    "172.21.",
    "172.22.",
    "172.23.",
    "172.24.",
    "172.25.",
    "172.26.",
    "172.27.",
    "172.28.",
    "172.29.",
    "172.30.",
    "172.31.",
    "192.168.",
    "169.254.",  # link-local, cloud metadata endpoints live here
    "::1",
    "[::1]",
    "fc00:",
    "fd00:",
]

# fc00::/7 unique-local and the unspecified address, for IPv6 literals only
BLOCKED_IPV6_PREFIXES = ("fc", "fd")
BLOCKED_IPV6_HOSTS = ("::",)


def is_blocked_host(host: str) -> bool:
    host = host.lower()
    for pattern in BLOCKED_HOST_PATTERNS:
        if pattern in host or host.startswith(pattern):
            return True
    if ":" in host:
        if host in BLOCKED_IPV6_HOSTS or host.startswith(BLOCKED_IPV6_PREFIXES):
            return True
    return False


def admit(url: Any) -> UrlVerdict:
    if not isinstance(url, str):
        return UrlVerdict.reject(UrlRejection.BAD_FORMAT)

    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        logger.debug(f"url admission: unparseable url: {e}")
        return UrlVerdict.reject(UrlRejection.BAD_FORMAT)

    if parsed.scheme != ALLOWED_SCHEME:
        logger.debug(f"url admission: scheme '{parsed.scheme}' not allowed")
        return UrlVerdict.reject(UrlRejection.WRONG_SCHEME)

    host = parsed.host.lower()
    if is_blocked_host(host):
        logger.warning(f"url admission: private network host blocked: {host}")
        return UrlVerdict.reject(UrlRejection.PRIVATE_NETWORK_BLOCKED)

    # needs a tld: no bare hostnames, no trailing dot
    if "." not in host or host.endswith("."):
        logger.debug(f"url admission: invalid domain: {host}")
        return UrlVerdict.reject(UrlRejection.INVALID_DOMAIN)

    logger.info(f"url admission: accepted {host}")
    return UrlVerdict.accept(url)
