"""Integration test fixtures for the catalog database, Redis, and Meilisearch."""

from __future__ import annotations

import os
from typing import AsyncIterator
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from catalogsearch.catalog.store import CatalogStore
from catalogsearch.config import CatalogSearchSettings
from catalogsearch.core.exceptions import CacheError
from catalogsearch.db.session import DatabaseManager
from catalogsearch.search.client import IndexClient
from catalogsearch.search.schema import PRODUCT_SCHEMA
from catalogsearch.search.sync import SyncCoordinator


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def database_url(tmp_path) -> str:
    """Get test database URL from environment or use a throwaway SQLite file."""
    return os.getenv(
        "TEST_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'catalog_it.db'}",
    )


@pytest.fixture
async def database(database_url: str) -> AsyncIterator[DatabaseManager]:
    """
    Create a fresh database manager for each test.

    Tables are created up front and emptied afterwards so a shared
    Postgres test database stays clean between runs.
    """
    manager = DatabaseManager(database_url)
    await manager.create_all()

    yield manager

    async with manager.session() as session:
        await session.execute(text("DELETE FROM products"))
    await manager.close()


@pytest.fixture
def catalog_store(database: DatabaseManager) -> CatalogStore:
    return CatalogStore(database.session_factory)


# ============================================================================
# Redis Fixtures (Optional - skipped if not available)
# ============================================================================


@pytest.fixture
def redis_url() -> str:
    """Get test Redis URL from environment or use default."""
    return os.getenv("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
async def redis_client(redis_url: str):
    """Create Redis client for testing (optional)."""
    from catalogsearch.cache.client import AsyncRedisClient

    client = AsyncRedisClient(redis_url)
    await client.connect()
    try:
        await client.ping()
    except CacheError:
        await client.close()
        pytest.skip("Redis not available for integration tests")

    await client._redis.flushdb()
    yield client
    await client._redis.flushdb()
    await client.close()


# ============================================================================
# Meilisearch Fixtures (Optional - skipped if not available)
# ============================================================================


@pytest.fixture
def meilisearch_url() -> str:
    """Get test Meilisearch URL from environment or use default."""
    return os.getenv("TEST_MEILISEARCH_URL", "http://localhost:7700")


@pytest.fixture
def meilisearch_key() -> str | None:
    """Get test Meilisearch key from environment."""
    return os.getenv("TEST_MEILISEARCH_KEY")


@pytest.fixture
def test_index_name() -> str:
    """A unique index per test so runs never see each other's documents."""
    return f"products_test_{uuid4().hex[:8]}"


@pytest.fixture
async def index_client(
    meilisearch_url: str, meilisearch_key: str | None, test_index_name: str
) -> AsyncIterator[IndexClient]:
    """Create an index client against a live engine (optional)."""
    client = IndexClient(meilisearch_url, meilisearch_key, index_name=test_index_name)
    if not await client.health():
        await client.close()
        pytest.skip("Meilisearch not available for integration tests")

    yield client

    await client.drop_index()
    await client.close()


@pytest.fixture
async def live_coordinator(index_client: IndexClient) -> SyncCoordinator:
    """Coordinator with the index already bootstrapped."""
    coordinator = SyncCoordinator(index_client, PRODUCT_SCHEMA)
    await coordinator.ensure_index()
    return coordinator


# ============================================================================
# FastAPI Test Client Fixtures
# ============================================================================


@pytest.fixture
def live_settings(
    database_url: str,
    meilisearch_url: str,
    meilisearch_key: str | None,
    test_index_name: str,
) -> CatalogSearchSettings:
    return CatalogSearchSettings(
        database_url=database_url,
        redis_url=None,
        meilisearch_url=meilisearch_url,
        meilisearch_key=meilisearch_key,
        index_name=test_index_name,
        reconcile_on_startup=True,
    )


@pytest.fixture
async def test_app(live_settings: CatalogSearchSettings, database: DatabaseManager, index_client):
    """
    Create the real application and run its lifespan.

    Depends on ``index_client`` so the test is skipped when the engine is
    down and the index is dropped afterwards.
    """
    from catalogsearch.api.app import create_app

    app = create_app(live_settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest.fixture
async def test_client(test_app) -> AsyncIterator[AsyncClient]:
    """Create async HTTP test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ============================================================================
# Marker Registration
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "requires_redis: mark test as requiring Redis connection",
    )
    config.addinivalue_line(
        "markers",
        "requires_meilisearch: mark test as requiring Meilisearch connection",
    )
