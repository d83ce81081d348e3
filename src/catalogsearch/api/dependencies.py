"""FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

if TYPE_CHECKING:
    from catalogsearch.cache.client import AsyncRedisClient
    from catalogsearch.catalog.store import CatalogStore
    from catalogsearch.search.reconcile import ReconciliationJob
    from catalogsearch.search.searcher import QueryRouter
    from catalogsearch.search.sync import SyncCoordinator
    from catalogsearch.services.products import ProductService
    from catalogsearch.services.search import SearchService


async def get_catalog_store(request: Request) -> CatalogStore:
    """Get the catalog store from app state."""
    return request.app.state.catalog_store


async def get_cache_client(request: Request) -> AsyncRedisClient | None:
    """Get Redis cache client from app state."""
    return getattr(request.app.state, "cache_client", None)


async def get_sync_coordinator(request: Request) -> SyncCoordinator:
    """Get the sync coordinator from app state."""
    return request.app.state.sync_coordinator


async def get_query_router(request: Request) -> QueryRouter:
    """Get the query router from app state."""
    return request.app.state.query_router


async def get_reconciliation_job(request: Request) -> ReconciliationJob:
    """Get the reconciliation job from app state."""
    return request.app.state.reconciliation_job


async def get_product_service(
    request: Request,
    store: CatalogStore = Depends(get_catalog_store),
    coordinator: SyncCoordinator = Depends(get_sync_coordinator),
    cache: AsyncRedisClient | None = Depends(get_cache_client),
) -> ProductService:
    """Get product service with all dependencies."""
    from catalogsearch.services.products import ProductService

    cache_ttl = getattr(request.app.state, "cache_ttl", 300)
    return ProductService(store=store, coordinator=coordinator, cache=cache, cache_ttl=cache_ttl)


async def get_search_service(
    router: QueryRouter = Depends(get_query_router),
) -> SearchService:
    """Get search service over the shared query router."""
    from catalogsearch.services.search import SearchService

    return SearchService(router)


# Type aliases for cleaner dependency injection
ProductSvc = Annotated["ProductService", Depends(get_product_service)]
SearchSvc = Annotated["SearchService", Depends(get_search_service)]
Reconciler = Annotated["ReconciliationJob", Depends(get_reconciliation_job)]
