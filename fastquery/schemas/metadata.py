"""
Base metadata schemas for API responses.

Provides timestamp and version metadata for API responses.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class BaseMetadata(BaseModel):
    """
    Base metadata model defining common fields.

    Includes timestamp (UTC) and API version.
    """

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp of when the response was created",
    )
    version: str = Field(default="1.0", description="API version")


class ResponseMetadata(BaseMetadata):
    """
    Standard response metadata that can be extended for specific needs.
    """

    pass
