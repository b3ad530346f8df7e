"""
Holiday proxy request and response models.

Provides Pydantic schemas for:
- The inbound holiday query
- Holiday and country payloads as documented in the OpenAPI schema
- The flat error body every failure is rendered with

Upstream payloads are forwarded as received. These schemas describe them
for documentation and for the client; the proxy never re-serializes a
successful upstream body through them.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HolidayQuery(BaseModel):
    """Country and year of a holiday lookup, built per request."""

    model_config = ConfigDict(frozen=True)

    country_code: str = Field(..., description="Country code, e.g. US")
    year: str = Field(..., description="Calendar year, e.g. 2023")

    @field_validator("country_code", "year")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Presence check only; format is the upstream's business."""
        if not v:
            raise ValueError("must not be empty")
        return v


class Holiday(BaseModel):
    """A single holiday as returned by the upstream API."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Holiday name")
    date: str = Field(..., description="ISO calendar date")
    type: Optional[str] = Field(None, description="Category label, e.g. National")


class HolidayResponse(BaseModel):
    """Successful holiday payload; extra upstream fields pass through."""

    model_config = ConfigDict(extra="allow")

    status: Optional[int] = Field(None, description="Upstream status code")
    holidays: List[Holiday] = Field(default_factory=list)


class Country(BaseModel):
    """A country selectable in the client."""

    model_config = ConfigDict(extra="allow")

    code: str = Field(..., description="Country code")
    name: str = Field(..., description="Country name")


class CountryResponse(BaseModel):
    """Successful country payload; extra upstream fields pass through."""

    model_config = ConfigDict(extra="allow")

    status: Optional[int] = Field(None, description="Upstream status code")
    countries: List[Country] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response schema shared by every failure."""

    error: str = Field(..., min_length=1)


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str
    service: str
    version: str
    environment: str
    api_key_configured: bool
