"""In-memory store for tests and local runs."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from ..errors import ShortCodeConflictError
from .base import UrlStoreBase
from .models import UrlRecord


class InMemoryUrlStore(UrlStoreBase):
    """Dict-backed store honoring the same contract as the SQL store.

    Each operation completes without awaiting, so it is atomic with respect
    to other coroutines on the loop.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__("memory://")
        self.logger = logger or logging.getLogger(__name__)
        self._records: Dict[UUID, UrlRecord] = {}
        self._by_code: Dict[str, UUID] = {}

    async def insert(self, short_code: str, long_url: str) -> UrlRecord:
        if short_code in self._by_code:
            raise ShortCodeConflictError(f"Short code already exists: {short_code}")

        record = UrlRecord(
            id=uuid.uuid4(),
            short_code=short_code,
            long_url=long_url,
            created_at=datetime.now(timezone.utc),
        )
        self._records[record.id] = record
        self._by_code[short_code] = record.id
        return _copy(record)

    async def select_by_ids(self, ids: Iterable[UUID]) -> List[UrlRecord]:
        return [_copy(self._records[i]) for i in dict.fromkeys(ids) if i in self._records]

    async def select_by_short_code(self, short_code: str) -> List[UrlRecord]:
        url_id = self._by_code.get(short_code)
        if url_id is None:
            return []
        return [_copy(self._records[url_id])]

    async def update_long_url(self, url_id: UUID, long_url: str) -> Optional[UrlRecord]:
        record = self._records.get(url_id)
        if record is None:
            return None
        record.long_url = long_url
        record.updated_at = datetime.now(timezone.utc)
        return _copy(record)

    async def delete(self, url_id: UUID) -> Optional[UrlRecord]:
        record = self._records.pop(url_id, None)
        if record is None:
            return None
        del self._by_code[record.short_code]
        return record

    async def exists(self, url_id: UUID) -> bool:
        return url_id in self._records

    async def close(self) -> None:
        self.logger.debug("In-memory store closed")

    async def health_check(self) -> bool:
        return True


def _copy(record: UrlRecord) -> UrlRecord:
    return UrlRecord(**vars(record))
