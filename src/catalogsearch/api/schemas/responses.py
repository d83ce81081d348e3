"""Response schemas for API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from catalogsearch.api.schemas.base import APIBaseSchema, PaginatedResponse


class ProductResponse(APIBaseSchema):
    """Product as stored in the catalog."""

    id: UUID
    title: str
    description: str
    image: str
    categories: list[str] = Field(default_factory=list)
    size: str | None = None
    color: str | None = None
    price: float
    created_at: datetime
    updated_at: datetime


class ProductWriteResponse(APIBaseSchema):
    """
    Response for a product write.

    ``indexed`` reports whether the change reached the search index.
    The write itself has been committed either way.
    """

    id: UUID
    message: str
    indexed: bool
    index_error: str | None = None
    product: ProductResponse | None = None


class ProductListResponse(PaginatedResponse):
    """Page of catalog products."""

    results: list[ProductResponse]


class SearchProductResult(APIBaseSchema):
    """Product search result with relevance score."""

    id: UUID
    score: float
    product: ProductResponse


class SearchProductsResponse(PaginatedResponse):
    """Response for product search."""

    query: str
    processing_time_ms: int
    results: list[SearchProductResult]


class ReconciliationResponse(APIBaseSchema):
    """Summary of a reconciliation pass."""

    attempted: int
    succeeded: int
    skipped: int
    failed: int
    batches: int
    complete: bool
    failed_ids: list[UUID]
    duration_ms: float


class HealthResponse(APIBaseSchema):
    """Health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    services: dict[str, Literal["up", "down", "unknown"]]
