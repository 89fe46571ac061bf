"""HTTP surface for the URL record service."""

from .app_factory import create_app

__all__ = ["create_app"]
