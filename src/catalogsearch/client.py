"""Main library client for standalone usage."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogsearch.catalog.store import CatalogStore
from catalogsearch.config import CatalogSearchSettings
from catalogsearch.core.models import ProductData, ProductPatch, ProductRecord
from catalogsearch.db.session import DatabaseManager
from catalogsearch.search.client import IndexClient
from catalogsearch.search.reconcile import ReconciliationJob, ReconciliationReport
from catalogsearch.search.searcher import QueryRouter, SearchFilters, SearchPage
from catalogsearch.search.sync import SyncCoordinator
from catalogsearch.services.products import ProductService, WriteOutcome

if TYPE_CHECKING:
    from catalogsearch.cache.client import AsyncRedisClient

logger = logging.getLogger(__name__)


class CatalogSearchClient:
    """
    Main client for the catalogsearch library.

    Provides the catalog write path, product search and reconciliation
    without requiring the web server.

    Usage:
        async with CatalogSearchClient() as client:
            outcome = await client.create_product(
                ProductData(title="Red Hoodie", description="Warm", image="h.png", price=40)
            )
            page = await client.search("hoodie")
            report = await client.reconcile()

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: CatalogSearchSettings | None = None,
        *,
        use_cache: bool = True,
        create_tables: bool = False,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings. If not provided, loaded from environment.
            use_cache: Whether to use Redis caching if available.
            create_tables: Create missing catalog tables on entry instead of
                relying on migrations.
        """
        self._settings = settings or CatalogSearchSettings()
        self._use_cache = use_cache
        self._create_tables = create_tables
        self._database: DatabaseManager | None = None
        self._index: IndexClient | None = None
        self._cache: AsyncRedisClient | None = None
        self._products: ProductService | None = None
        self._router: QueryRouter | None = None
        self._job: ReconciliationJob | None = None

    async def __aenter__(self) -> CatalogSearchClient:
        """Initialize resources on context entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Clean up resources on context exit."""
        await self.close()

    async def _initialize(self) -> None:
        """Initialize client resources."""
        settings = self._settings

        self._database = DatabaseManager(settings.database_url, echo=settings.debug)
        if self._create_tables:
            await self._database.create_all()
        store = CatalogStore(self._database.session_factory)

        self._index = IndexClient(
            settings.meilisearch_url,
            settings.meilisearch_key,
            index_name=settings.index_name,
            timeout=settings.index_timeout,
            task_timeout_ms=settings.index_task_timeout_ms,
        )
        await self._index.open()
        coordinator = SyncCoordinator(self._index)

        # Initialize cache if available
        if self._use_cache and settings.redis_url:
            try:
                from catalogsearch.cache.client import AsyncRedisClient

                self._cache = AsyncRedisClient(str(settings.redis_url))
                await self._cache.connect()
                logger.info("Redis cache initialized")
            except Exception as e:
                logger.warning(f"Failed to initialize cache: {e}")
                self._cache = None

        self._products = ProductService(
            store, coordinator, cache=self._cache, cache_ttl=settings.cache_ttl
        )
        self._router = QueryRouter(self._index)
        self._job = ReconciliationJob(
            store,
            coordinator,
            batch_size=settings.reconcile_batch_size,
            concurrency=settings.reconcile_concurrency,
        )

    async def close(self) -> None:
        """Close all resources."""
        if self._index:
            await self._index.close()
            self._index = None

        if self._cache:
            await self._cache.close()
            self._cache = None

        if self._database:
            await self._database.close()
            self._database = None

        self._products = None
        self._router = None
        self._job = None

    def _ensure_initialized(self) -> None:
        """Ensure client is initialized."""
        if self._products is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with CatalogSearchClient() as client:'"
            )

    async def get_product(self, product_id: str) -> ProductRecord:
        """Read one product from the catalog."""
        self._ensure_initialized()
        return await self._products.get_product(product_id)

    async def create_product(self, data: ProductData) -> WriteOutcome:
        """Create a product and index it."""
        self._ensure_initialized()
        return await self._products.create_product(data)

    async def update_product(self, product_id: str, patch: ProductPatch) -> WriteOutcome:
        """Update a product and replace its index document."""
        self._ensure_initialized()
        return await self._products.update_product(product_id, patch)

    async def delete_product(self, product_id: str) -> WriteOutcome:
        """Delete a product and remove its index document."""
        self._ensure_initialized()
        return await self._products.delete_product(product_id)

    async def search(
        self,
        query: str,
        *,
        filters: SearchFilters | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> SearchPage:
        """
        Full-text product search.

        Args:
            query: Free-text query
            filters: Optional exact-match filters
            page: Page number (1-indexed)
            page_size: Results per page

        Returns:
            Ranked hits with their indexed snapshots
        """
        self._ensure_initialized()
        return await self._router.query(query, filters=filters, page=page, page_size=page_size)

    async def reconcile(self) -> ReconciliationReport:
        """Upsert every catalog product into the index."""
        self._ensure_initialized()
        return await self._job.reconcile()


# Convenience function for one-off maintenance
async def reconcile_index(
    *,
    settings: CatalogSearchSettings | None = None,
) -> ReconciliationReport:
    """
    Run one reconciliation pass (convenience function).

    For repeated calls, use CatalogSearchClient to reuse connections.
    """
    async with CatalogSearchClient(settings, use_cache=False) as client:
        return await client.reconcile()
