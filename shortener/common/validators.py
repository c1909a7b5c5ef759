"""Validation utilities for URL shortener."""

import re
from typing import Tuple

MAX_URL_LENGTH = 2048

# Anything outside the RFC 3986 reserved/unreserved sets plus '%'
_ILLEGAL_CHARS = re.compile(r"[^a-z0-9:/?#\[\]@!$&'()*+,;=.\-_~%]", re.IGNORECASE)
_BAD_ESCAPE = re.compile(r"%[^0-9a-f]|%[0-9a-f](?:[^0-9a-f]|$)|%$", re.IGNORECASE)
_URI_PARTS = re.compile(r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$")
_SCHEME = re.compile(r"^[a-z][a-z0-9+\-.]*$", re.IGNORECASE)


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate that a value is a well-formed absolute URI.

    Any scheme is accepted (``http``, ``https``, ``ftp``, ``mailto`` ...).

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if _ILLEGAL_CHARS.search(url):
        return False, "URL contains illegal characters"

    if _BAD_ESCAPE.search(url):
        return False, "URL contains an incomplete percent escape"

    scheme, authority, path = _URI_PARTS.match(url).group(1, 2, 3)

    if not scheme:
        return False, "URL must include a scheme"

    if not _SCHEME.match(scheme):
        return False, f"Invalid URL scheme: {scheme}"

    if authority:
        if path and not path.startswith("/"):
            return False, "URL path must begin with '/' when a domain is present"
    elif path.startswith("//"):
        return False, "URL path must not begin with '//' without a domain"

    return True, ""
