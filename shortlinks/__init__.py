"""Core business logic for the URL record service."""

from .shortcode import ShortCodeGenerator
from .service import UrlRecordService

__all__ = ["ShortCodeGenerator", "UrlRecordService"]
