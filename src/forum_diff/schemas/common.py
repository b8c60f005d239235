"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ResourceIdentifier(BaseModel):
    """Type and id pair pointing at another resource."""

    type: str
    id: str


class ToOneRelationship(BaseModel):
    """Relationship to at most one other resource."""

    data: ResourceIdentifier | None = None


class PageLinks(BaseModel):
    """Pagination links returned by list endpoints."""

    first: str
    prev: str | None = None
    next: str | None = None


class PageMeta(BaseModel):
    """Pagination counters returned by list endpoints."""

    total: int = Field(..., description="Number of records across all pages.")
    offset: int
    limit: int
