"""Common utilities for the URL record service."""

from .validators import check_long_url, check_url_id, is_valid_url
from .logging_config import setup_logging

__all__ = [
    "check_long_url",
    "check_url_id",
    "is_valid_url",
    "setup_logging",
]
