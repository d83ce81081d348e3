"""API schema definitions."""

from catalogsearch.api.schemas.base import (
    APIBaseSchema,
    PaginatedResponse,
)
from catalogsearch.api.schemas.requests import ProductCreateRequest, ProductUpdateRequest
from catalogsearch.api.schemas.responses import (
    HealthResponse,
    ProductListResponse,
    ProductResponse,
    ProductWriteResponse,
    ReconciliationResponse,
    SearchProductResult,
    SearchProductsResponse,
)

__all__ = [
    # Base
    "APIBaseSchema",
    "PaginatedResponse",
    # Requests
    "ProductCreateRequest",
    "ProductUpdateRequest",
    # Responses
    "HealthResponse",
    "ProductListResponse",
    "ProductResponse",
    "ProductWriteResponse",
    "ReconciliationResponse",
    "SearchProductResult",
    "SearchProductsResponse",
]
