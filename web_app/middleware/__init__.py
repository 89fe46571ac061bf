"""Middleware for the URL record web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
