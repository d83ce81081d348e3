"""Base repository with generic CRUD operations."""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalogsearch.db.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Generic async repository with CRUD operations."""

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> T | None:
        """Get a single entity by ID."""
        return await self._session.get(self.model, id)

    async def list_after(self, cursor: UUID | None, *, limit: int = 100) -> Sequence[T]:
        """
        List entities in primary key order, starting after ``cursor``.

        Keyset pagination: stable under concurrent inserts and deletes,
        unlike offset paging.
        """
        stmt = select(self.model).order_by(self.model.id).limit(limit)
        if cursor is not None:
            stmt = stmt.where(self.model.id > cursor)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def count(self) -> int:
        """Count all entities."""
        stmt = select(func.count()).select_from(self.model)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, entity: T) -> T:
        """Create a new entity."""
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity

    async def update_fields(self, id: UUID, changes: dict[str, Any]) -> T | None:
        """
        Apply column changes to an entity in a single UPDATE statement.

        Returns the refreshed entity, or None if no row has this ID.
        """
        if changes:
            stmt = update(self.model).where(self.model.id == id).values(**changes)
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                return None
        entity = await self.get(id)
        if entity is not None:
            await self._session.refresh(entity)
        return entity

    async def delete(self, id: UUID) -> bool:
        """Delete an entity by ID."""
        stmt = delete(self.model).where(self.model.id == id)
        result = await self._session.execute(stmt)
        return result.rowcount > 0

