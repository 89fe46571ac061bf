"""Test doubles for the store, cache and generator."""

import asyncio

from shortlinks.database.memory import InMemoryUrlStore
from shortlinks.errors import ShortCodeConflictError, StoreError
from shortlinks.shortcode import ShortCodeGenerator


class ScriptedGenerator(ShortCodeGenerator):
    """Returns queued codes first, then falls back to random ones."""

    def __init__(self, codes, default_length=6):
        super().__init__(default_length=default_length)
        self.codes = list(codes)
        self.lengths = []

    def generate_random(self, length=None):
        self.lengths.append(length or self.default_length)
        if self.codes:
            return self.codes.pop(0)
        return super().generate_random(length)


class RacingStore(InMemoryUrlStore):
    """Rejects the first inserts as if a concurrent create took the code."""

    def __init__(self, conflicts):
        super().__init__()
        self.conflicts = conflicts
        self.insert_calls = 0

    async def insert(self, short_code, long_url):
        self.insert_calls += 1
        if self.conflicts:
            self.conflicts -= 1
            raise ShortCodeConflictError()
        return await super().insert(short_code, long_url)


class DuplicateCodeStore(InMemoryUrlStore):
    """Simulates a broken uniqueness constraint."""

    async def select_by_short_code(self, short_code):
        records = await super().select_by_short_code(short_code)
        return records * 2


class SlowStore(InMemoryUrlStore):
    async def select_by_ids(self, ids):
        await asyncio.sleep(1)
        return []


class BrokenStore(InMemoryUrlStore):
    async def select_by_ids(self, ids):
        raise StoreError("connection refused")

    async def health_check(self):
        return False


class FakeCache:
    """In-process stand-in for RedisCache."""

    enabled = True

    def __init__(self):
        self.entries = {}
        self.closed = False

    async def get_record(self, short_code):
        return self.entries.get(short_code)

    async def set_record(self, record, ttl=None):
        self.entries[record.short_code] = record
        return True

    async def delete(self, short_code):
        return self.entries.pop(short_code, None) is not None

    async def ping(self):
        return True

    async def close(self):
        self.closed = True


class PausingStore(InMemoryUrlStore):
    """Holds the next short code read open until released."""

    def __init__(self):
        super().__init__()
        self.pause_next_read = False
        self.reading = asyncio.Event()
        self.release = asyncio.Event()

    async def select_by_short_code(self, short_code):
        records = await super().select_by_short_code(short_code)
        if self.pause_next_read:
            self.pause_next_read = False
            self.reading.set()
            await self.release.wait()
        return records


class FakeRedisClient:
    """The subset of redis.asyncio.Redis used by RedisCache."""

    def __init__(self, error=None):
        self.values = {}
        self.ttls = {}
        self.error = error
        self.closed = False

    def _check(self):
        if self.error:
            raise self.error

    async def get(self, key):
        self._check()
        return self.values.get(key)

    async def setex(self, key, ttl, value):
        self._check()
        self.values[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key):
        self._check()
        return 1 if self.values.pop(key, None) is not None else 0

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        self.closed = True
