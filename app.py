#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Usage:
    python app.py

Runs a single server process.

Environment variables:
    DATABASE_URL - PostgreSQL connection URL
    STORE_BACKEND - 'postgres' (default) or 'memory'
    CREATE_TABLES - Set to 'true' to create the table on startup
    USE_DICTIONARY_HASH - Set to 'true' for the dictionary hashing strategy
    REDIS_URL - Redis connection URL for the dictionary state (optional)
    SERVER_PROTOCOL, SERVER_HOST - Used to build public links
    PORT - Port to listen on
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortener.common.logging_config import setup_logging
from shortener.dictionary import InMemoryDictionaryState, RedisDictionaryState
from shortener.hashing import HashGenerator
from shortener.service import ShortURLService
from shortener.store import InMemoryURLStore, PostgresURLStore
from shortener.views import PublicViewFormatter
from web_app import create_app


async def build_service(config: Config, logger: logging.Logger) -> ShortURLService:
    """Create the store, hash generator and service described by the config."""
    if config.store_backend == "memory":
        logger.warning("Using in-memory store, records are lost on restart")
        store = InMemoryURLStore(logger=logger)
    else:
        logger.info(f"Using PostgreSQL store at {config.database_url}")
        store = PostgresURLStore(
            db_config=config.database_url,
            logger=logger,
        )
        if config.create_tables:
            await store.ensure_tables()

    if config.use_dictionary_hash and config.redis_url:
        logger.info(f"Using Redis dictionary state at {config.redis_url}")
        dictionary_state = RedisDictionaryState(redis_url=config.redis_url, logger=logger)
        await dictionary_state.connect()
    else:
        if config.use_dictionary_hash:
            logger.warning("Dictionary hash state is in memory and resets on restart")
        dictionary_state = InMemoryDictionaryState()

    generator = HashGenerator(
        use_dictionary=config.use_dictionary_hash,
        dictionary_state=dictionary_state,
    )

    return ShortURLService(
        store=store,
        formatter=PublicViewFormatter(config.base_url),
        hash_generator=generator,
        logger=logger,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")
    service = await build_service(config, logger)
    app.state.service = service
    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
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

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump()}")

    # Service is created in the lifespan
    app = create_app(service_instance=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=False,
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
