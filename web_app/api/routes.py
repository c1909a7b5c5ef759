"""API routes implementation."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from shortener.errors import (
    AuthorizationError,
    MissingParameterError,
    NotFoundError,
    PersistenceError,
)

from .schemas import ErrorResponse, HealthResponse, PublicURLResponse, ShortenRequest

router = APIRouter()
health_router = APIRouter()


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        store="healthy" if health["store"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/{hash}",
    response_model=PublicURLResponse,
    responses={
        302: {"description": "Redirect to the original URL"},
        404: {"model": ErrorResponse, "description": "Hash not found"},
    },
    summary="Resolve short URL",
    description=(
        "Resolve a hash and register a visit. Answers with the URL as plain text "
        "for 'Accept: text/plain', the public view for 'Accept: application/json' "
        "and a redirect otherwise."
    ),
)
async def resolve_url(request: Request, hash: str):
    """Resolve a hash to its URL."""
    service = request.app.state.service

    source = await service.resolve(hash)
    if not source or not source.active:
        raise NotFoundError()

    # Best effort: the stored record is still served if counting fails
    updated = await service.register_visit(source) or source

    accepts = request.headers.get("accept")
    if accepts == "text/plain":
        return PlainTextResponse(updated.url)
    if accepts == "application/json":
        return service.public_view(updated)
    return RedirectResponse(updated.url, status_code=302)


@router.post(
    "/",
    response_model=PublicURLResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid URL"},
        500: {"model": ErrorResponse, "description": "Persistence failure"},
    },
    summary="Create short URL",
    description="Shorten a URL. Posting a known URL returns the existing short URL.",
)
async def shorten_url(request: Request, body: Optional[ShortenRequest] = None):
    """Create or fetch the short URL for a URL."""
    service = request.app.state.service

    if body is None or not body.url:
        raise MissingParameterError("url")

    return await service.create_or_fetch(body.url)


@router.delete(
    "/{hash}/remove/{remove_token}",
    response_class=PlainTextResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid remove token"},
        404: {"model": ErrorResponse, "description": "Hash not found"},
        500: {"model": ErrorResponse, "description": "Unable to remove"},
    },
    summary="Remove short URL",
    description="Logically remove a short URL. Posting the URL again brings it back.",
)
async def remove_url(request: Request, hash: str, remove_token: str):
    """Disable a short URL when the remove token matches."""
    service = request.app.state.service

    source = await service.resolve(hash)
    if not source or not source.active:
        raise NotFoundError()

    if not secrets.compare_digest(source.remove_token, remove_token):
        raise AuthorizationError()

    if not await service.disable(source):
        raise PersistenceError("Unable to delete url. maybe try later")

    return PlainTextResponse("ok. Deleted")
