"""Business logic service for URL records."""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Iterable, List, Optional, TypeVar
from uuid import UUID

from .shortcode import ShortCodeGenerator
from .database.base import UrlStoreBase
from .database.cache import RedisCache
from .database.models import UrlRecord
from .errors import InternalError, NotFound, ShortCodeConflictError, StoreError

T = TypeVar("T")


class UrlRecordService:
    """Service layer for URL record CRUD and short code allocation."""

    def __init__(
        self,
        store: UrlStoreBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
        fallback_code_length: Optional[int] = None,
        max_insert_retries: int = 3,
        store_timeout_seconds: Optional[float] = 10.0,
    ):
        """Initialize URL record service.

        Args:
            store: Store instance
            cache: Optional cache instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Codes drawn per length before giving up on it
            fallback_code_length: Longer length used once the default length
                is exhausted (defaults to default length + 2)
            max_insert_retries: Creates retried after a short code conflict
                at insert time
            store_timeout_seconds: Bound on each store call (None disables)
        """
        self.store = store
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max(1, max_collision_retries)
        self.fallback_code_length = fallback_code_length or self.generator.default_length + 2
        if self.fallback_code_length <= self.generator.default_length:
            raise ValueError("fallback_code_length must be greater than the default code length")
        self.max_insert_retries = max(0, max_insert_retries)
        self.store_timeout_seconds = store_timeout_seconds

    async def _call(self, operation: Awaitable[T]) -> T:
        """Run a store operation under the configured timeout."""
        try:
            return await asyncio.wait_for(operation, self.store_timeout_seconds)
        except asyncio.TimeoutError as e:
            self.logger.error(f"Store operation timed out after {self.store_timeout_seconds}s")
            raise StoreError("Database operation timed out") from e

    async def generate_unique_short_code(self) -> str:
        """Generate a short code not present in the store.

        Draws up to ``max_collision_retries`` codes of the default length,
        then as many of ``fallback_code_length``.

        Returns:
            Unique short code

        Raises:
            StoreError: If every attempt collided
        """
        for length in (self.generator.default_length, self.fallback_code_length):
            for attempt in range(self.max_collision_retries):
                code = self.generator.generate_random(length)

                if not await self._call(self.store.short_code_exists(code)):
                    if attempt:
                        self.logger.debug(
                            f"Generated code after {attempt + 1} attempts at length {length}: {code}"
                        )
                    return code

                self.logger.warning(f"Short code collision: {code}")

            self.logger.warning(
                f"Exhausted {self.max_collision_retries} attempts at length {length}"
            )

        raise StoreError("Unable to generate unique short code after multiple attempts")

    async def create(self, long_url: str) -> UrlRecord:
        """Create a new URL record with a freshly generated short code.

        Args:
            long_url: The original long URL

        Returns:
            Created record with its id and short code

        Raises:
            StoreError: If persistence fails or no free code was found
        """
        for attempt in range(self.max_insert_retries + 1):
            short_code = await self.generate_unique_short_code()
            try:
                record = await self._call(self.store.insert(short_code, long_url))
            except ShortCodeConflictError:
                # Another create took the code between check and insert
                self.logger.warning(
                    f"Short code {short_code} taken at insert (attempt {attempt + 1})"
                )
                continue

            if self.cache:
                await self.cache.set_record(record)

            self.logger.info(f"Created short URL: {record.short_code} -> {record.long_url}")
            return record

        raise StoreError("Failed to create short URL after repeated short code conflicts")

    async def get_by_ids(self, ids: Iterable[UUID]) -> List[UrlRecord]:
        """Get the records whose id is in ids.

        Args:
            ids: Record ids; unmatched ids are skipped

        Returns:
            Matching records
        """
        ids = list(dict.fromkeys(ids))
        if not ids:
            return []
        return await self._call(self.store.select_by_ids(ids))

    async def get_by_short_code(self, short_code: str) -> UrlRecord:
        """Get the record for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The matching record

        Raises:
            NotFound: If no record has this code
            InternalError: If more than one record has this code
        """
        if self.cache:
            cached = await self.cache.get_record(short_code)
            if cached:
                self.logger.debug(f"Cache hit for {short_code}")
                return cached

        records = await self._call(self.store.select_by_short_code(short_code))

        if not records:
            self.logger.info(f"Short code not found: {short_code}")
            raise NotFound()

        if len(records) > 1:
            self.logger.error(f"Uniqueness violated: {len(records)} records share {short_code}")
            raise InternalError()

        # Only create fills the cache, so a lookup racing an edit cannot
        # write the pre-edit record back
        return records[0]

    async def edit(self, url_id: UUID, long_url: str) -> UrlRecord:
        """Replace the long URL of a record.

        Args:
            url_id: Record id
            long_url: New long URL

        Returns:
            Updated record

        Raises:
            NotFound: If no record has this id
        """
        record = await self._call(self.store.update_long_url(url_id, long_url))
        if record is None:
            raise NotFound()

        if self.cache:
            await self.cache.delete(record.short_code)

        self.logger.info(f"Edited URL {url_id}: {record.short_code} -> {long_url}")
        return record

    async def delete(self, url_id: UUID) -> None:
        """Delete a record.

        Args:
            url_id: Record id

        Raises:
            NotFound: If no record has this id
        """
        if not await self._call(self.store.exists(url_id)):
            raise NotFound()

        record = await self._call(self.store.delete(url_id))
        if record is None:
            # Deleted by a concurrent request after the existence check
            raise NotFound()

        if self.cache:
            await self.cache.delete(record.short_code)

        self.logger.info(f"Deleted URL {url_id} ({record.short_code})")

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        try:
            db_healthy = await self._call(self.store.health_check())
        except StoreError:
            db_healthy = False

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    def describe_limits(self) -> Dict[str, Any]:
        """Short code allocation settings, for startup logging."""
        return {
            "code_length": self.generator.default_length,
            "fallback_code_length": self.fallback_code_length,
            "max_collision_retries": self.max_collision_retries,
            "max_insert_retries": self.max_insert_retries,
            "store_timeout_seconds": self.store_timeout_seconds,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
