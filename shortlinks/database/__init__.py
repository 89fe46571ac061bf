"""Store layer for URL records."""

from .base import UrlStoreBase
from .memory import InMemoryUrlStore
from .postgres import PostgresUrlStore
from .models import UrlRecord

__all__ = ["UrlStoreBase", "InMemoryUrlStore", "PostgresUrlStore", "UrlRecord"]
