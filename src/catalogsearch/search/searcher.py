"""Query routing for product search."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from catalogsearch.core.exceptions import MissingQueryError
from catalogsearch.search.client import IndexClient, SearchResults
from catalogsearch.search.schema import PRODUCT_SCHEMA, IndexSchema

logger = logging.getLogger(__name__)


@dataclass
class SearchFilters:
    """Exact-match filters for search queries."""

    category: str | None = None
    size: str | None = None
    color: str | None = None
    price_min: float | None = None
    price_max: float | None = None


@dataclass
class SearchHit:
    """A single search result hit."""

    id: UUID
    score: float
    document: dict[str, Any]


@dataclass
class SearchPage:
    """One page of ranked search results."""

    hits: list[SearchHit]
    total: int
    query: str
    processing_time_ms: int
    page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        """Whether there are more results available."""
        return self.page * self.page_size < self.total

    @property
    def ids(self) -> list[UUID]:
        return [hit.id for hit in self.hits]


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class QueryRouter:
    """
    Serves free-text product searches from the index.

    Results come from the document snapshot stored in the index rather
    than from the catalog, so a hit can lag the catalog by up to the
    propagation delay.
    """

    def __init__(self, index: IndexClient, schema: IndexSchema = PRODUCT_SCHEMA) -> None:
        """
        Initialize the router.

        Args:
            index: Shared index adapter
            schema: Schema naming the fields queries are matched against
        """
        self._index = index
        self._schema = schema

    async def query(
        self,
        text: str | None,
        *,
        filters: SearchFilters | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> SearchPage:
        """
        Search products across title, description and categories.

        Args:
            text: Free-text query
            filters: Optional exact-match filters
            page: Page number (1-indexed)
            page_size: Results per page

        Returns:
            Hits in relevance order with their stored snapshots

        Raises:
            MissingQueryError: If the query is blank; the index is not called.
            IndexUnavailableError: If the search call fails.
        """
        if text is None or not text.strip():
            raise MissingQueryError()
        text = text.strip()

        results = await self._index.search(
            text,
            self._schema.query_fields,
            filter=self.build_filter_expression(filters),
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return self._parse_results(results, text, page, page_size)

    @staticmethod
    def build_filter_expression(filters: SearchFilters | None) -> list[str] | None:
        """Build Meilisearch filter expressions from filters."""
        if not filters:
            return None

        expressions = []
        if filters.category:
            expressions.append(f"categories = {_quote(filters.category)}")
        if filters.size:
            expressions.append(f"size = {_quote(filters.size)}")
        if filters.color:
            expressions.append(f"color = {_quote(filters.color)}")
        if filters.price_min is not None:
            expressions.append(f"price >= {filters.price_min}")
        if filters.price_max is not None:
            expressions.append(f"price <= {filters.price_max}")

        return expressions if expressions else None

    def _parse_results(
        self,
        results: SearchResults,
        query: str,
        page: int,
        page_size: int,
    ) -> SearchPage:
        """Parse Meilisearch results into a SearchPage."""
        hits = []
        for hit in results.hits:
            try:
                hit_id = UUID(hit["id"])
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Invalid hit in search results: {e}")
                continue
            score = float(hit.get("_rankingScore") or 0.0)
            document = {k: v for k, v in hit.items() if not k.startswith("_")}
            hits.append(SearchHit(id=hit_id, score=score, document=document))

        return SearchPage(
            hits=hits,
            total=results.estimated_total_hits or len(hits),
            query=query,
            processing_time_ms=results.processing_time_ms,
            page=page,
            page_size=page_size,
        )
