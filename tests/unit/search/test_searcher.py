"""Tests for the query router."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from catalogsearch.core.exceptions import IndexUnavailableError, MissingQueryError
from catalogsearch.core.models import SyncEvent
from catalogsearch.search.client import SearchResults
from catalogsearch.search.schema import PRODUCT_SCHEMA
from catalogsearch.search.searcher import QueryRouter, SearchFilters, SearchPage

# ============================================================================
# Filter Expression Tests
# ============================================================================


class TestBuildFilterExpression:
    """Tests for filter expression building."""

    def test_none(self):
        assert QueryRouter.build_filter_expression(None) is None

    def test_empty(self):
        assert QueryRouter.build_filter_expression(SearchFilters()) is None

    def test_all_filters(self):
        filters = SearchFilters(
            category="apparel", size="M", color="red", price_min=10, price_max=50
        )
        assert QueryRouter.build_filter_expression(filters) == [
            'categories = "apparel"',
            'size = "M"',
            'color = "red"',
            "price >= 10",
            "price <= 50",
        ]

    def test_zero_price_bound_kept(self):
        assert QueryRouter.build_filter_expression(SearchFilters(price_min=0)) == ["price >= 0"]

    def test_quotes_escaped(self):
        filters = SearchFilters(category='kids "new"', color="back\\slash")
        assert QueryRouter.build_filter_expression(filters) == [
            'categories = "kids \\"new\\""',
            'color = "back\\\\slash"',
        ]


# ============================================================================
# Query Tests
# ============================================================================


class TestQuery:
    """Tests for QueryRouter.query."""

    @pytest.mark.parametrize("text", [None, "", "   ", "\t\n"])
    async def test_blank_query_never_reaches_index(self, text, fake_index):
        router = QueryRouter(fake_index)
        with pytest.raises(MissingQueryError):
            await router.query(text)
        assert fake_index.calls == []

    async def test_query_arguments(self):
        index = MagicMock()
        index.search = AsyncMock(return_value=SearchResults(hits=[], estimated_total_hits=0))
        router = QueryRouter(index)

        await router.query(
            "  hoodie ", filters=SearchFilters(color="red"), page=3, page_size=10
        )

        index.search.assert_awaited_once_with(
            "hoodie",
            PRODUCT_SCHEMA.query_fields,
            filter=['color = "red"'],
            offset=20,
            limit=10,
        )

    async def test_results_parsed(self):
        good_id = uuid4()
        index = MagicMock()
        index.search = AsyncMock(
            return_value=SearchResults(
                hits=[
                    {"id": str(good_id), "title": "Red Hoodie", "_rankingScore": 0.87},
                    {"id": "not-a-uuid", "title": "Broken"},
                    {"title": "No id"},
                ],
                estimated_total_hits=45,
                processing_time_ms=4,
            )
        )
        router = QueryRouter(index)

        page = await router.query("hoodie", page=1, page_size=20)

        assert isinstance(page, SearchPage)
        assert page.ids == [good_id]
        assert page.hits[0].score == pytest.approx(0.87)
        assert page.hits[0].document == {"id": str(good_id), "title": "Red Hoodie"}
        assert page.total == 45
        assert page.has_more is True
        assert page.processing_time_ms == 4
        assert page.query == "hoodie"

    async def test_missing_score_defaults_to_zero(self):
        index = MagicMock()
        index.search = AsyncMock(
            return_value=SearchResults(hits=[{"id": str(uuid4())}], estimated_total_hits=None)
        )

        page = await QueryRouter(index).query("hoodie")

        assert page.hits[0].score == 0.0
        assert page.total == 1
        assert page.has_more is False

    async def test_index_failure_propagates(self, fake_index):
        fake_index.available = False
        with pytest.raises(IndexUnavailableError):
            await QueryRouter(fake_index).query("hoodie")

    async def test_finds_propagated_product(
        self, coordinator, query_router: QueryRouter, sample_product_record
    ):
        """Every title term should find a propagated product."""
        await coordinator.propagate(SyncEvent.created(sample_product_record))

        for term in ("trail", "running", "shoe"):
            page = await query_router.query(term)
            assert page.ids == [sample_product_record.id]

    async def test_matches_categories(
        self, coordinator, query_router: QueryRouter, sample_product_record
    ):
        await coordinator.propagate(SyncEvent.created(sample_product_record))
        page = await query_router.query("footwear")
        assert page.ids == [sample_product_record.id]
