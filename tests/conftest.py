"""Shared test fixtures for all tests."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from catalogsearch.config import CatalogSearchSettings
from catalogsearch.core.models import ProductData, ProductRecord


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def red_hoodie_data() -> ProductData:
    """The product used throughout the end-to-end scenarios."""
    return ProductData(
        title="Red Hoodie",
        description="Warm cotton",
        image="hoodie.png",
        categories=["apparel"],
        size="M",
        color="red",
        price=40,
    )


@pytest.fixture
def sample_product_data() -> ProductData:
    """Create fully populated product input."""
    return ProductData(
        title="Trail Running Shoe",
        description="Lightweight shoe with a grippy outsole for muddy trails",
        image="https://example.com/images/trail-shoe.jpg",
        categories=["footwear", "running"],
        size="42",
        color="blue",
        price=129.99,
    )


@pytest.fixture
def sample_product_data_minimal() -> ProductData:
    """Create product input with only required fields."""
    return ProductData(
        title="Plain Mug",
        description="Ceramic mug",
        image="mug.png",
        price=8,
    )


@pytest.fixture
def sample_product_record() -> ProductRecord:
    """Create a product as the catalog would return it."""
    return ProductRecord(
        id=uuid4(),
        title="Trail Running Shoe",
        description="Lightweight shoe with a grippy outsole for muddy trails",
        image="https://example.com/images/trail-shoe.jpg",
        categories=["footwear", "running"],
        size="42",
        color="blue",
        price=129.99,
        created_at=datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
        updated_at=datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
    )


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def mock_settings(tmp_path) -> CatalogSearchSettings:
    """Create settings pointing at throwaway local services."""
    return CatalogSearchSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        redis_url=None,
        meilisearch_url="http://localhost:7700",
        meilisearch_key="test-master-key",
        index_name="products_test",
        reconcile_on_startup=False,
        debug=True,
    )
