"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalogsearch.api.routes import admin_router, health_router, products_router, search_router
from catalogsearch.config import CatalogSearchSettings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    settings: CatalogSearchSettings = app.state.settings
    logging.basicConfig(level=settings.log_level.upper())

    # Initialize catalog
    from catalogsearch.catalog.store import CatalogStore
    from catalogsearch.db.session import DatabaseManager

    logger.info("Initializing database connection...")
    app.state.database = DatabaseManager(settings.database_url, echo=settings.debug)
    app.state.catalog_store = CatalogStore(app.state.database.session_factory)

    # Initialize Redis cache (optional)
    app.state.cache_ttl = settings.cache_ttl
    if settings.redis_url:
        try:
            from catalogsearch.cache.client import AsyncRedisClient

            logger.info("Initializing Redis cache...")
            app.state.cache_client = AsyncRedisClient(str(settings.redis_url))
            await app.state.cache_client.connect()
            logger.info("Redis cache initialized")
        except Exception as e:
            logger.warning(f"Failed to initialize Redis: {e}")
            app.state.cache_client = None
    else:
        app.state.cache_client = None

    # Initialize search index; an unreachable engine is tolerated here and
    # bootstrapped lazily on the first propagation
    from catalogsearch.search.client import IndexClient
    from catalogsearch.search.reconcile import ReconciliationJob
    from catalogsearch.search.searcher import QueryRouter
    from catalogsearch.search.sync import SyncCoordinator

    logger.info("Initializing Meilisearch client...")
    app.state.index_client = IndexClient(
        settings.meilisearch_url,
        settings.meilisearch_key,
        index_name=settings.index_name,
        timeout=settings.index_timeout,
        task_timeout_ms=settings.index_task_timeout_ms,
    )
    await app.state.index_client.open()
    app.state.sync_coordinator = SyncCoordinator(app.state.index_client)
    app.state.query_router = QueryRouter(app.state.index_client)
    app.state.reconciliation_job = ReconciliationJob(
        app.state.catalog_store,
        app.state.sync_coordinator,
        batch_size=settings.reconcile_batch_size,
        concurrency=settings.reconcile_concurrency,
    )

    if settings.reconcile_on_startup:
        from catalogsearch.core.exceptions import IndexUnavailableError, StoreError

        try:
            report = await app.state.reconciliation_job.reconcile()
            if not report.complete:
                logger.warning(f"Startup reconciliation left {report.failed} products unindexed")
        except (IndexUnavailableError, StoreError) as e:
            logger.warning(f"Startup reconciliation failed: {e}")

    logger.info("Application startup complete")

    yield

    # Cleanup
    logger.info("Shutting down application...")

    # Close index client
    if getattr(app.state, "index_client", None):
        await app.state.index_client.close()

    # Close cache
    if getattr(app.state, "cache_client", None):
        await app.state.cache_client.close()

    # Close database connections
    if getattr(app.state, "database", None):
        await app.state.database.close()

    logger.info("Application shutdown complete")


def create_app(
    settings: CatalogSearchSettings | None = None,
    *,
    title: str = "Catalog Search API",
    description: str = "Product catalog with a search index kept in sync on every write",
    version: str = "0.1.0",
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If not provided, loaded from environment.
        title: API title for OpenAPI docs
        description: API description for OpenAPI docs
        version: API version

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=title,
        description=description,
        version=version,
        debug=settings.debug,
        lifespan=lifespan,
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(products_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    return app


# For uvicorn direct execution
app = create_app()
