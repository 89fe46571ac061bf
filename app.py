#!/usr/bin/env python3
"""
Main entry point for the URL record service.

Concurrency: requests are served concurrently via async I/O
(FastAPI + asyncpg connection pool + redis.asyncio). Set WORKERS > 1 for
multi-process scaling across CPU cores (each worker has its own DB pool).

Usage:
    python app.py

Environment variables:
    STORE_BACKEND - 'postgres' (default) or 'memory'
    DATABASE_URL - PostgreSQL connection URL
    CREATE_TABLES - Set to 1 to create the urls table on startup
    REDIS_URL - Redis connection URL (optional)
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlinks.database.base import UrlStoreBase
from shortlinks.database.cache import RedisCache
from shortlinks.database.memory import InMemoryUrlStore
from shortlinks.database.postgres import PostgresUrlStore
from shortlinks.service import UrlRecordService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


def build_store(config: Config, logger: logging.Logger) -> UrlStoreBase:
    """Create the record store selected by STORE_BACKEND."""
    if config.store_backend == "memory":
        logger.warning("Using in-memory store; records are lost on restart")
        return InMemoryUrlStore(logger=logger)

    logger.info("Using PostgreSQL store")
    return PostgresUrlStore(
        db_config=config.database_url,
        pool_max_size=config.db_pool_max_size,
        connection_timeout_seconds=config.store_timeout_seconds,
        create_tables=config.create_tables,
        logger=logger,
    )


def build_service(config: Config, store: UrlStoreBase, cache, logger: logging.Logger) -> UrlRecordService:
    """Wire the service from configuration."""
    return UrlRecordService(
        store=store,
        cache=cache,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        max_collision_retries=config.max_collision_retries,
        fallback_code_length=config.fallback_code_length,
        max_insert_retries=config.max_insert_retries,
        store_timeout_seconds=config.store_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL record service...")

    store = build_store(config, logger)

    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")
        cache = None

    service = build_service(config, store, cache, logger)
    app.state.service = service

    logger.info(f"Short code settings: {service.describe_limits()}")
    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL record service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Shortlinks URL record service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    # Service is created by the lifespan
    app = create_app(service_instance=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
