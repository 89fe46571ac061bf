"""Abstract base class for URL record store implementations."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from .models import UrlRecord


class UrlStoreBase(ABC):
    """Abstract base class for URL record store operations.

    Implementations translate their driver failures into
    :class:`~shortlinks.errors.StoreError`.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Store connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def insert(self, short_code: str, long_url: str) -> UrlRecord:
        """Insert a new record, assigning its id and timestamps.

        Args:
            short_code: The short code to use
            long_url: The original long URL

        Returns:
            The created record

        Raises:
            ShortCodeConflictError: If short_code is already taken
        """
        pass

    @abstractmethod
    async def select_by_ids(self, ids: Iterable[UUID]) -> List[UrlRecord]:
        """Get every record whose id is in ids.

        Args:
            ids: Record ids

        Returns:
            Matching records; unmatched ids are absent
        """
        pass

    @abstractmethod
    async def select_by_short_code(self, short_code: str) -> List[UrlRecord]:
        """Get the records with a short code.

        Returns at most two rows, which is enough to detect a broken
        uniqueness constraint.

        Args:
            short_code: The short code to lookup

        Returns:
            Matching records
        """
        pass

    @abstractmethod
    async def update_long_url(self, url_id: UUID, long_url: str) -> Optional[UrlRecord]:
        """Replace the long URL of a record.

        Args:
            url_id: Record id
            long_url: New long URL

        Returns:
            The updated record, or None if not found
        """
        pass

    @abstractmethod
    async def delete(self, url_id: UUID) -> Optional[UrlRecord]:
        """Delete a record.

        Args:
            url_id: Record id

        Returns:
            The deleted record, or None if not found
        """
        pass

    @abstractmethod
    async def exists(self, url_id: UUID) -> bool:
        """Check if a record id exists.

        Args:
            url_id: Record id

        Returns:
            True if exists, False otherwise
        """
        pass

    async def short_code_exists(self, short_code: str) -> bool:
        """Check if a short code is already taken."""
        return bool(await self.select_by_short_code(short_code))

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if store is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
