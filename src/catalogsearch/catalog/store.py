"""Authoritative product catalog store."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from catalogsearch.core.exceptions import NotFoundError, StoreError
from catalogsearch.core.models import ProductData, ProductPatch, ProductRecord
from catalogsearch.core.types import SortField, SortOrder
from catalogsearch.db.models.product import ProductModel
from catalogsearch.db.repositories.product import ProductRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


def _not_found(product_id: UUID) -> NotFoundError:
    return NotFoundError("Product doesn't exist", resource_id=str(product_id))


class CatalogStore:
    """
    Product store backed by SQLAlchemy.

    Every write runs in its own transaction and is committed before the
    method returns, so a caller that goes on to update the search index
    only ever propagates durable state. Concurrent writes to the same
    product are last-writer-wins.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize the store.

        Args:
            session_factory: Factory producing sessions bound to the catalog database
        """
        self._session_factory = session_factory

    async def create(self, data: ProductData) -> ProductRecord:
        """Insert a new product and return it with its generated id and timestamps."""
        try:
            async with self._session_factory() as session, session.begin():
                repo = ProductRepository(session)
                product = await repo.create(ProductModel(**data.model_dump()))
                record = ProductRecord.model_validate(product)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create product: {e}") from e

        logger.debug(f"Created product {record.id}")
        return record

    async def read(self, product_id: UUID) -> ProductRecord:
        """Fetch a product by id."""
        try:
            async with self._session_factory() as session:
                product = await ProductRepository(session).get(product_id)
                if product is None:
                    raise _not_found(product_id)
                return ProductRecord.model_validate(product)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read product {product_id}: {e}") from e

    async def update(self, product_id: UUID, patch: ProductPatch) -> ProductRecord:
        """Apply a partial update and return the full product as committed."""
        try:
            async with self._session_factory() as session, session.begin():
                product = await ProductRepository(session).update_fields(
                    product_id, patch.changes()
                )
                if product is None:
                    raise _not_found(product_id)
                record = ProductRecord.model_validate(product)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update product {product_id}: {e}") from e

        logger.debug(f"Updated product {product_id}")
        return record

    async def delete(self, product_id: UUID) -> None:
        """Delete a product."""
        try:
            async with self._session_factory() as session, session.begin():
                deleted = await ProductRepository(session).delete(product_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete product {product_id}: {e}") from e

        if not deleted:
            raise _not_found(product_id)
        logger.debug(f"Deleted product {product_id}")

    async def list_from(self, cursor: UUID | None, *, limit: int = 500) -> list[ProductRecord]:
        """Return up to ``limit`` products with ids greater than ``cursor``, in id order."""
        try:
            async with self._session_factory() as session:
                products = await ProductRepository(session).list_after(cursor, limit=limit)
                return [ProductRecord.model_validate(p) for p in products]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to scan products after {cursor}: {e}") from e

    async def list_all(self, *, batch_size: int = 500) -> AsyncIterator[list[ProductRecord]]:
        """Scan the whole catalog in id order, one batch at a time."""
        cursor: UUID | None = None
        while True:
            batch = await self.list_from(cursor, limit=batch_size)
            if not batch:
                return
            yield batch
            if len(batch) < batch_size:
                return
            cursor = batch[-1].id

    async def list_products(
        self,
        *,
        category: str | None = None,
        sort: SortField = SortField.CREATED_AT,
        order: SortOrder = SortOrder.ASC,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[ProductRecord], int]:
        """List products for the catalog listing page, with the total match count."""
        try:
            async with self._session_factory() as session:
                repo = ProductRepository(session)
                total = await repo.count_products(category=category)
                products = await repo.list_products(
                    category=category, sort=sort, order=order, offset=offset, limit=limit
                )
                return [ProductRecord.model_validate(p) for p in products], total
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list products: {e}") from e

    async def list_newest(self, *, limit: int = 5) -> list[ProductRecord]:
        """List the most recently created products."""
        try:
            async with self._session_factory() as session:
                products = await ProductRepository(session).list_newest(limit=limit)
                return [ProductRecord.model_validate(p) for p in products]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list newest products: {e}") from e

    async def count(self) -> int:
        """Count all products."""
        try:
            async with self._session_factory() as session:
                return await ProductRepository(session).count()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count products: {e}") from e
