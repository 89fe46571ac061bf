"""Validation utilities for URL records."""

import re
from typing import Any, Tuple
from uuid import UUID

from pydantic import HttpUrl, TypeAdapter, ValidationError


MAX_URL_LENGTH = 2048
CANONICAL_UUID_LENGTH = 36

HTTP_URL = TypeAdapter(HttpUrl)

# Hostname labels after IDNA, or a bracketed IPv6 literal
HOST_RE = re.compile(r'^(\[[0-9a-fA-F:.]+\]|[A-Za-z0-9_-]+(\.[A-Za-z0-9_-]+)*\.?)$')


def is_valid_url(url: Any) -> Tuple[bool, str]:
    """Validate an absolute http(s) URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    # HttpUrl strips surrounding whitespace; the stored value must not carry it
    if url != url.strip():
        return False, "Invalid URL format"

    try:
        parsed = HTTP_URL.validate_python(url)
    except ValidationError as e:
        return False, e.errors()[0]["msg"]

    if not parsed.host or not HOST_RE.match(parsed.host):
        return False, "URL must have a valid domain"

    return True, ""


def check_long_url(value: Any) -> Any:
    """Raise ValueError unless value is a valid long URL."""
    valid, error = is_valid_url(value)
    if not valid:
        raise ValueError(error)
    return value


def check_url_id(value: Any) -> Any:
    """Require the hyphenated form before UUID parsing.

    pydantic also accepts the simple, braced and urn forms.
    """
    if isinstance(value, UUID):
        return value
    if not value:
        raise ValueError("URL ID is required")
    if not isinstance(value, str) or len(value) != CANONICAL_UUID_LENGTH:
        raise ValueError("Invalid URL ID")
    return value
