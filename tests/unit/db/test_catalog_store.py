"""Tests for the catalog store and product repository."""

from __future__ import annotations

from uuid import uuid4

import pytest

from catalogsearch.catalog.store import CatalogStore
from catalogsearch.core.exceptions import NotFoundError, StoreError
from catalogsearch.core.models import ProductData, ProductPatch, ProductRecord
from catalogsearch.core.types import SortField, SortOrder
from catalogsearch.db.base import create_engine, create_session_factory


def _product(title: str, *, price: float = 10, categories: list[str] | None = None) -> ProductData:
    return ProductData(
        title=title,
        description=f"About {title}",
        image=f"{title}.png",
        categories=categories or [],
        price=price,
    )


# ============================================================================
# CRUD Tests
# ============================================================================


class TestCreateAndRead:
    """Tests for create and read."""

    async def test_create_assigns_id_and_timestamps(
        self, store: CatalogStore, sample_product_data: ProductData
    ):
        record = await store.create(sample_product_data)

        assert isinstance(record, ProductRecord)
        assert record.id is not None
        assert record.created_at is not None
        assert record.updated_at is not None
        assert record.title == sample_product_data.title
        assert record.categories == ["footwear", "running"]

    async def test_ids_unique(self, store: CatalogStore, sample_product_data: ProductData):
        first = await store.create(sample_product_data)
        second = await store.create(sample_product_data)
        assert first.id != second.id

    async def test_read_round_trip(self, store: CatalogStore, sample_product_data: ProductData):
        created = await store.create(sample_product_data)
        assert await store.read(created.id) == created

    async def test_read_missing(self, store: CatalogStore):
        with pytest.raises(NotFoundError) as exc_info:
            await store.read(uuid4())
        assert exc_info.value.message == "Product doesn't exist"


class TestUpdate:
    """Tests for partial updates."""

    async def test_only_given_fields_change(
        self, store: CatalogStore, sample_product_data: ProductData
    ):
        created = await store.create(sample_product_data)

        updated = await store.update(created.id, ProductPatch(price=99.5, color=None))

        assert updated.price == 99.5
        assert updated.color is None
        assert updated.title == created.title
        assert updated.categories == created.categories
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at
        assert await store.read(created.id) == updated

    async def test_empty_patch_returns_current(
        self, store: CatalogStore, sample_product_data: ProductData
    ):
        created = await store.create(sample_product_data)
        assert await store.update(created.id, ProductPatch()) == created

    async def test_update_missing(self, store: CatalogStore):
        with pytest.raises(NotFoundError):
            await store.update(uuid4(), ProductPatch(price=1))

    async def test_empty_patch_on_missing(self, store: CatalogStore):
        with pytest.raises(NotFoundError):
            await store.update(uuid4(), ProductPatch())


class TestDelete:
    """Tests for delete."""

    async def test_delete(self, store: CatalogStore, sample_product_data: ProductData):
        created = await store.create(sample_product_data)

        await store.delete(created.id)

        with pytest.raises(NotFoundError):
            await store.read(created.id)
        assert await store.count() == 0

    async def test_delete_twice(self, store: CatalogStore, sample_product_data: ProductData):
        created = await store.create(sample_product_data)
        await store.delete(created.id)
        with pytest.raises(NotFoundError):
            await store.delete(created.id)


# ============================================================================
# Scan Tests
# ============================================================================


class TestScan:
    """Tests for keyset scans."""

    async def test_list_from_in_id_order(self, store: CatalogStore):
        created = [await store.create(_product(f"p{i}")) for i in range(5)]
        expected = sorted(r.id for r in created)

        first = await store.list_from(None, limit=3)
        rest = await store.list_from(first[-1].id, limit=3)

        assert [r.id for r in first + rest] == expected

    async def test_list_all_batches(self, store: CatalogStore):
        created = [await store.create(_product(f"p{i}")) for i in range(5)]

        batches = [batch async for batch in store.list_all(batch_size=2)]

        assert [len(b) for b in batches] == [2, 2, 1]
        assert [r.id for b in batches for r in b] == sorted(r.id for r in created)

    async def test_list_all_exact_multiple(self, store: CatalogStore):
        for i in range(4):
            await store.create(_product(f"p{i}"))

        batches = [batch async for batch in store.list_all(batch_size=2)]

        assert [len(b) for b in batches] == [2, 2]

    async def test_list_all_empty(self, store: CatalogStore):
        assert [batch async for batch in store.list_all()] == []


# ============================================================================
# Listing Tests
# ============================================================================


class TestListing:
    """Tests for catalog listing queries."""

    async def test_category_filter(self, store: CatalogStore):
        await store.create(_product("Hoodie", categories=["apparel"]))
        await store.create(_product("Tee", categories=["sale", "apparel"]))
        await store.create(_product("Boot", categories=["footwear"]))
        await store.create(_product("Onesie", categories=["apparel-kids"]))

        items, total = await store.list_products(category="apparel")

        assert total == 2
        assert {r.title for r in items} == {"Hoodie", "Tee"}

    async def test_sort_by_price(self, store: CatalogStore):
        for title, price in [("a", 30), ("b", 10), ("c", 20)]:
            await store.create(_product(title, price=price))

        items, _ = await store.list_products(sort=SortField.PRICE, order=SortOrder.DESC)

        assert [r.price for r in items] == [30, 20, 10]

    async def test_sort_by_title(self, store: CatalogStore):
        for title in ["Cap", "Apron", "Belt"]:
            await store.create(_product(title))

        items, _ = await store.list_products(sort=SortField.TITLE)

        assert [r.title for r in items] == ["Apron", "Belt", "Cap"]

    async def test_pagination(self, store: CatalogStore):
        for i in range(5):
            await store.create(_product(f"p{i}", price=i))

        items, total = await store.list_products(sort=SortField.PRICE, offset=2, limit=2)

        assert total == 5
        assert [r.price for r in items] == [2, 3]

    async def test_list_newest_limit(self, store: CatalogStore):
        created = [await store.create(_product(f"p{i}")) for i in range(7)]

        newest = await store.list_newest(limit=5)

        assert len(newest) == 5
        assert {r.id for r in newest} <= {r.id for r in created}

    async def test_count(self, store: CatalogStore):
        for i in range(3):
            await store.create(_product(f"p{i}"))
        assert await store.count() == 3


class TestStoreErrors:
    """Tests for database failures."""

    async def test_database_errors_wrapped(self, tmp_path):
        """A catalog without its tables surfaces StoreError, not SQLAlchemy errors."""
        engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        store = CatalogStore(create_session_factory(engine))
        try:
            with pytest.raises(StoreError):
                await store.read(uuid4())
            with pytest.raises(StoreError):
                await store.create(_product("x"))
        finally:
            await engine.dispose()
