"""Search service for querying indexed products."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from catalogsearch.api.schemas import (
    ProductResponse,
    SearchProductResult,
    SearchProductsResponse,
)
from catalogsearch.search.searcher import SearchFilters

if TYPE_CHECKING:
    from catalogsearch.search.searcher import QueryRouter

logger = logging.getLogger(__name__)


class SearchService:
    """
    Service for searching products.

    Wraps the query router and turns index snapshots into API responses
    without a round trip to the catalog.
    """

    def __init__(self, router: "QueryRouter") -> None:
        """
        Initialize the search service.

        Args:
            router: Query router over the shared index client
        """
        self._router = router

    async def search_products(
        self,
        query: str | None,
        *,
        category: str | None = None,
        size: str | None = None,
        color: str | None = None,
        price_min: float | None = None,
        price_max: float | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> SearchProductsResponse:
        """
        Search for products with optional filters.

        Raises:
            MissingQueryError: If the query is blank.
            IndexUnavailableError: If the index cannot be searched.
        """
        filters = SearchFilters(
            category=category,
            size=size,
            color=color,
            price_min=price_min,
            price_max=price_max,
        )

        search_page = await self._router.query(
            query,
            filters=filters,
            page=page,
            page_size=page_size,
        )

        results = []
        for hit in search_page.hits:
            product = self._hit_to_product_response(hit.document)
            if product:
                results.append(SearchProductResult(id=hit.id, score=hit.score, product=product))

        return SearchProductsResponse(
            query=search_page.query,
            processing_time_ms=search_page.processing_time_ms,
            total=search_page.total,
            page=page,
            page_size=page_size,
            has_more=search_page.has_more,
            results=results,
        )

    def _hit_to_product_response(self, data: dict[str, Any]) -> ProductResponse | None:
        """Convert a stored index document to ProductResponse."""
        try:
            return ProductResponse.model_validate(data)
        except ValueError as e:
            logger.warning(f"Failed to convert product hit {data.get('id')}: {e}")
            return None
