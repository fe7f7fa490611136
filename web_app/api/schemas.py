"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CreateLinkRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The absolute http(s) URL to shorten", min_length=1, max_length=2048)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class LinkResponse(BaseModel):
    """A shortened link."""

    id: int = Field(..., description="Internal record id (used for detail and delete)")
    code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    owner_id: Optional[str] = Field(None, description="Creator user id")
    created_by: Optional[str] = Field(None, description="Creator display name")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "code": "4fTq0Za",
                    "short_url": "https://short.link/4fTq0Za",
                    "original_url": "https://example.com/very/long/path",
                    "created_at": "2024-01-01T12:00:00Z",
                    "owner_id": "u1",
                    "created_by": "alice",
                }
            ]
        }
    }


class ResolveResponse(BaseModel):
    """Redirect target of a short code."""

    code: str
    original_url: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error code")
    detail: Optional[str] = Field(None, description="Detailed error information")
    retryable: bool = Field(False, description="Whether retrying the same request may succeed")
    existing_id: Optional[int] = Field(None, description="Id of the conflicting record")
    existing_code: Optional[str] = Field(None, description="Code of the conflicting record")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_links: int
    code_length: int
    cache_enabled: bool
