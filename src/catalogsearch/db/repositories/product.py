"""Product repository with catalog listing queries."""

from collections.abc import Sequence

from sqlalchemy import String, cast, func, select
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import Select

from catalogsearch.core.types import SortField, SortOrder
from catalogsearch.db.models.product import ProductModel
from catalogsearch.db.repositories.base import BaseRepository


class ProductRepository(BaseRepository[ProductModel]):
    """Repository for Product entities with listing queries."""

    model = ProductModel

    def _filter_by_category(self, stmt: Select, category: str | None) -> Select:
        if not category:
            return stmt
        if self._session.get_bind().dialect.name == "postgresql":
            return stmt.where(cast(ProductModel.categories, JSONB).contains([category]))
        # Other dialects store JSON as text; match the quoted label
        escaped = category.replace("\\", "\\\\").replace('"', '\\"')
        return stmt.where(cast(ProductModel.categories, String).contains(f'"{escaped}"'))

    async def list_products(
        self,
        *,
        category: str | None = None,
        sort: SortField = SortField.CREATED_AT,
        order: SortOrder = SortOrder.ASC,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[ProductModel]:
        """List products with optional category filter and sorting."""
        column = getattr(ProductModel, sort.value)
        ordering = column.desc() if order == SortOrder.DESC else column.asc()
        # Tie-break on id so pages are stable
        stmt = select(ProductModel).order_by(ordering, ProductModel.id).offset(offset).limit(limit)
        stmt = self._filter_by_category(stmt, category)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def count_products(self, *, category: str | None = None) -> int:
        """Count products, optionally restricted to one category."""
        stmt = self._filter_by_category(select(func.count()).select_from(ProductModel), category)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def list_newest(self, *, limit: int = 5) -> Sequence[ProductModel]:
        """List the most recently created products."""
        stmt = (
            select(ProductModel)
            .order_by(ProductModel.created_at.desc(), ProductModel.id)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()
