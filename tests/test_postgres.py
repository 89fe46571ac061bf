"""Tests for the PostgreSQL store without a running server."""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import asyncpg
import pytest

from shortlinks.database.postgres import PostgresUrlStore
from shortlinks.errors import ShortCodeConflictError, StoreError


class FakeConnection:
    """Answers every query with a canned result or error."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.queries = []

    async def _answer(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.result

    fetch = _answer
    fetchrow = _answer
    fetchval = _answer
    execute = _answer


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        yield self.conn

    async def close(self):
        self.closed = True


class FakePoolStore(PostgresUrlStore):
    def __init__(self, conn):
        super().__init__("postgresql://u:p@localhost:5432/test")
        self.pool = FakePool(conn)

    async def _get_pool(self):
        return self.pool


def _row(short_code="aB3_x9", long_url="https://example.com"):
    return {
        "id": uuid.uuid4(),
        "short_code": short_code,
        "long_url": long_url,
        "created_at": datetime.now(timezone.utc),
        "updated_at": None,
    }


def _unique_violation(constraint):
    error = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    error.constraint_name = constraint
    return error


@pytest.mark.asyncio
class TestPostgresUrlStore:
    """Test row mapping and error translation."""

    async def test_insert_maps_row(self):
        row = _row()
        store = FakePoolStore(FakeConnection(result=row))

        record = await store.insert("aB3_x9", "https://example.com")

        assert record.id == row["id"]
        assert record.short_code == "aB3_x9"
        query, args = store.pool.conn.queries[0]
        assert "INSERT INTO urls" in query
        assert args[1:] == ("aB3_x9", "https://example.com")

    async def test_short_code_conflict(self):
        conn = FakeConnection(error=_unique_violation(PostgresUrlStore.SHORT_CODE_CONSTRAINT))
        store = FakePoolStore(conn)

        with pytest.raises(ShortCodeConflictError):
            await store.insert("aB3_x9", "https://example.com")

    async def test_other_unique_violation_is_store_error(self):
        store = FakePoolStore(FakeConnection(error=_unique_violation("urls_pkey")))

        with pytest.raises(StoreError) as exc_info:
            await store.insert("aB3_x9", "https://example.com")
        assert not isinstance(exc_info.value, ShortCodeConflictError)

    async def test_driver_error_is_store_error(self):
        store = FakePoolStore(FakeConnection(error=ConnectionRefusedError("refused")))

        with pytest.raises(StoreError, match="refused"):
            await store.select_by_ids([uuid.uuid4()])

    async def test_missing_rows(self):
        store = FakePoolStore(FakeConnection(result=None))

        assert await store.update_long_url(uuid.uuid4(), "https://example.org") is None
        assert await store.delete(uuid.uuid4()) is None
        assert await store.exists(uuid.uuid4()) is False

    async def test_select_by_short_code_limits_rows(self):
        store = FakePoolStore(FakeConnection(result=[_row(), _row()]))

        records = await store.select_by_short_code("aB3_x9")

        assert len(records) == 2
        assert "LIMIT 2" in store.pool.conn.queries[0][0]
        assert await store.short_code_exists("aB3_x9")

    async def test_health_check(self):
        assert await FakePoolStore(FakeConnection(result=1)).health_check() is True
        assert await FakePoolStore(FakeConnection(error=OSError("down"))).health_check() is False
