"""Core business logic for URL shortener."""

from .hashing import HashGenerator, content_hash, generate_remove_token
from .service import ShortURLService
from .views import PublicViewFormatter

__all__ = [
    "HashGenerator",
    "ShortURLService",
    "PublicViewFormatter",
    "content_hash",
    "generate_remove_token",
]
