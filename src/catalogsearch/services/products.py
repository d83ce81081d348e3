"""Product service for the catalog write path and product reads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from catalogsearch.cache.keys import CacheKeys
from catalogsearch.core.exceptions import CacheError, IndexUnavailableError
from catalogsearch.core.identifiers import parse_product_id
from catalogsearch.core.models import ProductData, ProductPatch, ProductRecord, SyncEvent
from catalogsearch.core.types import SortField, SortOrder

if TYPE_CHECKING:
    from catalogsearch.cache.client import AsyncRedisClient
    from catalogsearch.catalog.store import CatalogStore
    from catalogsearch.search.sync import SyncCoordinator

logger = logging.getLogger(__name__)

# Generation read failed; the fresh read is not cached
_GENERATION_UNKNOWN = object()


@dataclass
class WriteOutcome:
    """
    Result of a committed catalog write.

    ``indexed`` is a secondary status: a write whose propagation failed
    is still a successful write, and the index catches up on the next
    reconciliation.
    """

    product_id: UUID
    product: ProductRecord | None
    indexed: bool
    index_error: str | None = None


@dataclass
class ProductPage:
    """One page of catalog products."""

    items: list[ProductRecord]
    total: int
    page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total


class ProductService:
    """
    Service for product CRUD.

    Orchestrates the write flow:
    1. Validate the identifier
    2. Commit the mutation to the catalog store
    3. Drop the cached copy
    4. Propagate the change to the search index
    """

    NEW_PRODUCTS_LIMIT = 5

    def __init__(
        self,
        store: "CatalogStore",
        coordinator: "SyncCoordinator",
        cache: "AsyncRedisClient | None" = None,
        cache_ttl: int = 300,
    ) -> None:
        """
        Initialize the product service.

        Args:
            store: Authoritative catalog store
            coordinator: Propagates committed writes to the index
            cache: Optional Redis client for single-product reads
            cache_ttl: TTL in seconds for cached products
        """
        self._store = store
        self._coordinator = coordinator
        self._cache = cache
        self._cache_ttl = cache_ttl

    async def get_product(self, raw_id: str) -> ProductRecord:
        """
        Get a single product.

        Raises:
            ValidationError: If the id is malformed.
            NotFoundError: If no such product exists.
        """
        product_id = parse_product_id(raw_id)

        cached = await self._cache_get(product_id)
        if cached is not None:
            logger.debug(f"Cache hit for product {product_id}")
            return ProductRecord.model_validate(cached)

        generation = await self._cache_generation(product_id)
        product = await self._store.read(product_id)
        await self._cache_set(product, generation)
        return product

    async def list_products(
        self,
        *,
        page: int = 1,
        page_size: int = 20,
        newest: bool = False,
        category: str | None = None,
        sort: SortField = SortField.CREATED_AT,
        order: SortOrder = SortOrder.ASC,
    ) -> ProductPage:
        """List catalog products, or only the newest few when ``newest`` is set."""
        if newest:
            items = await self._store.list_newest(limit=self.NEW_PRODUCTS_LIMIT)
            return ProductPage(
                items=items, total=len(items), page=1, page_size=self.NEW_PRODUCTS_LIMIT
            )

        items, total = await self._store.list_products(
            category=category,
            sort=sort,
            order=order,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return ProductPage(items=list(items), total=total, page=page, page_size=page_size)

    async def create_product(self, data: ProductData) -> WriteOutcome:
        """Create a product and index it."""
        product = await self._store.create(data)
        indexed, error = await self._propagate(SyncEvent.created(product))
        return WriteOutcome(product.id, product, indexed, error)

    async def update_product(self, raw_id: str, patch: ProductPatch) -> WriteOutcome:
        """
        Update a product and replace its index document.

        Raises:
            ValidationError: If the id is malformed.
            NotFoundError: If no such product exists.
        """
        product_id = parse_product_id(raw_id)
        product = await self._store.update(product_id, patch)
        await self._cache_invalidate(product_id)
        indexed, error = await self._propagate(SyncEvent.updated(product))
        return WriteOutcome(product_id, product, indexed, error)

    async def delete_product(self, raw_id: str) -> WriteOutcome:
        """
        Delete a product and remove its index document.

        Raises:
            ValidationError: If the id is malformed.
            NotFoundError: If no such product exists.
        """
        product_id = parse_product_id(raw_id)
        await self._store.delete(product_id)
        await self._cache_invalidate(product_id)
        indexed, error = await self._propagate(SyncEvent.deleted(product_id))
        return WriteOutcome(product_id, None, indexed, error)

    async def _propagate(self, event: SyncEvent) -> tuple[bool, str | None]:
        # The catalog write is already committed; report, don't raise
        try:
            await self._coordinator.propagate(event)
        except IndexUnavailableError as e:
            logger.warning(f"Product {event.id} committed but not indexed: {e.message}")
            return False, e.message
        return True, None

    async def _cache_get(self, product_id: UUID) -> dict | None:
        if self._cache is None:
            return None
        try:
            return await self._cache.get(CacheKeys.product(product_id))
        except CacheError as e:
            logger.warning(f"Cache read failed, falling back to store: {e}")
            return None

    async def _cache_generation(self, product_id: UUID) -> object:
        if self._cache is None:
            return _GENERATION_UNKNOWN
        try:
            return await self._cache.get_generation(CacheKeys.product_generation(product_id))
        except CacheError as e:
            logger.warning(f"Cache generation read failed for product {product_id}: {e}")
            return _GENERATION_UNKNOWN

    async def _cache_set(self, product: ProductRecord, generation: object) -> None:
        """Cache a store read unless the product was written since ``generation`` was taken."""
        if self._cache is None or generation is _GENERATION_UNKNOWN:
            return
        try:
            stored = await self._cache.set_if_generation(
                CacheKeys.product(product.id),
                product.model_dump(mode="json"),
                generation_key=CacheKeys.product_generation(product.id),
                generation=generation,
                ttl=self._cache_ttl,
            )
        except CacheError as e:
            logger.warning(f"Cache write failed for product {product.id}: {e}")
            return
        if not stored:
            logger.debug(f"Product {product.id} changed during read, not caching")

    async def _cache_invalidate(self, product_id: UUID) -> None:
        if self._cache is None:
            return
        try:
            # Generation bump must precede the delete
            await self._cache.bump_generation(
                CacheKeys.product_generation(product_id), ttl=self._cache_ttl
            )
            await self._cache.delete(CacheKeys.product(product_id))
        except CacheError as e:
            logger.warning(f"Cache invalidation failed for product {product_id}: {e}")
