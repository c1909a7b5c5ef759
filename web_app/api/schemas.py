"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    # Optional here so a missing url answers 400 rather than 422
    url: Optional[str] = Field(None, description="The URL to shorten")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class PublicURLResponse(BaseModel):
    """Public view of a shortened URL."""

    url: str = Field(..., description="The original URL")
    shorten: str = Field(..., description="The complete short URL")
    hash: str = Field(..., description="The hash of the short URL")
    removeUrl: str = Field(..., description="Link that removes the short URL")
    visits: str = Field(..., description="Visit count description")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "http://example.com/page",
                    "shorten": "http://localhost:9200/3k1PZ2V9ZGq0e6W-8mZ0nA",
                    "hash": "3k1PZ2V9ZGq0e6W-8mZ0nA",
                    "removeUrl": "http://localhost:9200/3k1PZ2V9ZGq0e6W-8mZ0nA/remove/0f1c6a52-5b0e-4b8e-9a55-8f4a2d4b2e11",
                    "visits": "1 visits recorded",
                }
            ]
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Record store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
