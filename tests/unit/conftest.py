"""Unit test fixtures: in-memory index, sqlite catalog and wired components."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any, AsyncIterator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalogsearch.catalog.store import CatalogStore
from catalogsearch.core.exceptions import IndexUnavailableError
from catalogsearch.db.base import Base, create_engine, create_session_factory
from catalogsearch.search.client import SearchResults
from catalogsearch.search.reconcile import ReconciliationJob
from catalogsearch.search.schema import IndexSchema
from catalogsearch.search.searcher import QueryRouter
from catalogsearch.search.sync import SyncCoordinator
from catalogsearch.services.products import ProductService


# ============================================================================
# Index Double
# ============================================================================


class FakeIndexClient:
    """
    In-memory index with the same surface as IndexClient.

    Matching is naive substring scoring. Failures are injected per
    operation, per document id, or globally via ``available``.
    """

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.schema: IndexSchema | None = None
        self.ensure_calls = 0
        self.calls: list[tuple[str, str | None]] = []
        self.searches: list[dict[str, Any]] = []
        self.available = True
        self.fail_operations: set[str] = set()
        self.fail_ids: set[str] = set()
        self.upsert_delay = 0.0

    def _check(self, operation: str, document_id: str | None = None) -> None:
        self.calls.append((operation, document_id))
        if (
            not self.available
            or operation in self.fail_operations
            or (document_id is not None and document_id in self.fail_ids)
        ):
            raise IndexUnavailableError(
                f"Index {operation} failed: connection refused",
                operation=operation,
                document_id=document_id,
            )

    async def health(self) -> bool:
        return self.available

    async def ensure_index(self, schema: IndexSchema) -> None:
        self.ensure_calls += 1
        self._check("ensure_index")
        self.schema = schema

    async def upsert(self, document_id: str, fields: dict[str, Any]) -> None:
        self._check("upsert", document_id)
        if self.upsert_delay:
            await asyncio.sleep(self.upsert_delay)
        self.documents[document_id] = {**fields, "id": document_id}

    async def delete(self, document_id: str) -> None:
        self._check("delete", document_id)
        self.documents.pop(document_id, None)

    async def search(
        self,
        text: str,
        fields: Sequence[str],
        *,
        filter: list[str] | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> SearchResults:
        self._check("search")
        self.searches.append(
            {"text": text, "fields": list(fields), "filter": filter, "offset": offset, "limit": limit}
        )
        terms = text.lower().split()
        matches = []
        for document in self.documents.values():
            haystack = " ".join(_flatten(document.get(name)) for name in fields).lower()
            score = sum(term in haystack for term in terms) / len(terms)
            if score > 0:
                matches.append((score, document))
        matches.sort(key=lambda match: -match[0])
        page = matches[offset : offset + limit]
        return SearchResults(
            hits=[{**document, "_rankingScore": score} for score, document in page],
            estimated_total_hits=len(matches),
            processing_time_ms=1,
        )

    async def get_document(self, document_id: str) -> dict[str, Any] | None:
        self._check("get_document", document_id)
        return self.documents.get(document_id)

    async def open(self) -> None:
        pass

    async def close(self) -> None:
        pass


def _flatten(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)


class FakeCache:
    """Dict-backed stand-in for AsyncRedisClient."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.generations: dict[str, int] = {}
        self.error: Exception | None = None

    async def get(self, key: str) -> Any | None:
        if self.error:
            raise self.error
        return self.data.get(key)

    async def delete(self, key: str) -> bool:
        if self.error:
            raise self.error
        return self.data.pop(key, None) is not None

    async def get_generation(self, key: str) -> str | None:
        if self.error:
            raise self.error
        generation = self.generations.get(key)
        return None if generation is None else str(generation)

    async def bump_generation(self, key: str, ttl: int = 300) -> None:
        if self.error:
            raise self.error
        self.generations[key] = self.generations.get(key, 0) + 1

    async def set_if_generation(
        self, key: str, value: Any, *, generation_key: str, generation: str | None, ttl: int = 300
    ) -> bool:
        if self.error:
            raise self.error
        if await self.get_generation(generation_key) != generation:
            return False
        self.data[key] = value
        return True

    async def ping(self) -> bool:
        return self.error is None


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def fake_index() -> FakeIndexClient:
    return FakeIndexClient()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
async def session_factory(tmp_path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """File-backed sqlite catalog so concurrent sessions get separate connections."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield create_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def store(session_factory) -> CatalogStore:
    return CatalogStore(session_factory)


@pytest.fixture
def coordinator(fake_index: FakeIndexClient) -> SyncCoordinator:
    return SyncCoordinator(fake_index)


@pytest.fixture
def query_router(fake_index: FakeIndexClient) -> QueryRouter:
    return QueryRouter(fake_index)


@pytest.fixture
def reconciliation_job(store: CatalogStore, coordinator: SyncCoordinator) -> ReconciliationJob:
    return ReconciliationJob(store, coordinator, batch_size=3, concurrency=2)


@pytest.fixture
def product_service(store: CatalogStore, coordinator: SyncCoordinator) -> ProductService:
    return ProductService(store, coordinator)
