"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.database.memory import InMemoryUrlStore
from shortlinks.service import UrlRecordService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def test_store(logger) -> AsyncGenerator[InMemoryUrlStore, None]:
    """Create test store instance."""
    store = InMemoryUrlStore(logger=logger)

    yield store

    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(test_store, short_code_generator, logger) -> UrlRecordService:
    """Create service instance."""
    return UrlRecordService(
        store=test_store,
        cache=None,  # No cache for tests
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def app(service):
    """Create test FastAPI app."""
    config = Config(store_backend="memory", _env_file=None)
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
