"""Record store layer for URL shortener."""

from .base import URLRecordStoreBase
from .memory import InMemoryURLStore
from .models import InsertResult, InsertStatus, UrlRecord
from .postgres import PostgresURLStore

__all__ = [
    "URLRecordStoreBase",
    "InMemoryURLStore",
    "PostgresURLStore",
    "UrlRecord",
    "InsertResult",
    "InsertStatus",
]
