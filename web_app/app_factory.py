"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortener.errors import ShortenerError

from .api import api_router, health_router
from .middleware.logging import LoggingMiddleware

logger = logging.getLogger("shortener.web")


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    """Render service errors with the status code they carry."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors."""
    return JSONResponse(status_code=400, content={"error": "Bad Request. Malformed body"})


def create_app(service_instance, config) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance (may be set later in the lifespan)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Shorten URLs into deterministic hashes",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Health goes first so /api/... is never taken for a hash
    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(api_router, tags=["URLs"])

    return app
