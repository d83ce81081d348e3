"""Async Meilisearch client wrapper for the product index."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from httpx2 import HTTPError
from meilisearch_python_sdk import AsyncClient
from meilisearch_python_sdk.errors import MeilisearchApiError, MeilisearchError
from meilisearch_python_sdk.models.task import TaskInfo

from catalogsearch.core.exceptions import IndexUnavailableError
from catalogsearch.search.schema import PRIMARY_KEY, IndexSchema

logger = logging.getLogger(__name__)

DEFAULT_INDEX = "products"


@dataclass
class SearchResults:
    """Raw ranked hits as returned by the engine."""

    hits: list[dict[str, Any]] = field(default_factory=list)
    estimated_total_hits: int | None = None
    processing_time_ms: int = 0


class IndexClient:
    """
    Adapter around a single Meilisearch index.

    One instance owns one connection. It is constructed explicitly,
    opened once, shared by reference with every component that talks to
    the index, and closed on shutdown. Every engine failure surfaces as
    IndexUnavailableError.

    Writes are asynchronous tasks on the engine side; each write method
    waits for its task and returns only once the engine reports it applied.
    """

    TASK_POLL_INTERVAL_MS = 50

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        *,
        index_name: str = DEFAULT_INDEX,
        timeout: float = 10.0,
        task_timeout_ms: int = 10000,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            url: Meilisearch server URL
            api_key: Optional API key for authentication
            index_name: Name of the index holding product documents
            timeout: HTTP timeout in seconds for each request
            task_timeout_ms: How long to wait for an indexing task to finish
        """
        self._url = url
        self._api_key = api_key
        self._index_name = index_name
        self._timeout = timeout
        self._task_timeout_ms = task_timeout_ms
        self._client: AsyncClient | None = None

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def open(self) -> None:
        """Create the underlying client."""
        if self._client is None:
            self._client = AsyncClient(self._url, self._api_key, timeout=self._timeout)
            logger.debug(f"Opened Meilisearch client for {self._url}")

    async def close(self) -> None:
        """Close the client connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @asynccontextmanager
    async def _call(
        self, operation: str, document_id: str | None = None
    ) -> AsyncIterator[AsyncClient]:
        """Yield the SDK client, translating engine failures into IndexUnavailableError."""
        await self.open()
        try:
            yield self._client
        except MeilisearchApiError as e:
            raise IndexUnavailableError(
                f"Index {operation} failed: {e}",
                operation=operation,
                document_id=document_id,
                details={"status_code": e.status_code, "code": e.code},
            ) from e
        except (MeilisearchError, HTTPError) as e:
            # Communication errors, task timeouts, and non-JSON error responses
            raise IndexUnavailableError(
                f"Index {operation} failed: {e}",
                operation=operation,
                document_id=document_id,
            ) from e

    async def _wait(
        self,
        client: AsyncClient,
        task: TaskInfo,
        operation: str,
        document_id: str | None = None,
    ) -> None:
        """Wait for an engine task to finish and fail unless it succeeded."""
        result = await client.wait_for_task(
            task.task_uid,
            timeout_in_ms=self._task_timeout_ms,
            interval_in_ms=self.TASK_POLL_INTERVAL_MS,
        )
        if result.status != "succeeded":
            raise IndexUnavailableError(
                f"Index {operation} task {task.task_uid} ended as {result.status}",
                operation=operation,
                document_id=document_id,
                details={"error": result.error} if result.error else None,
            )

    async def health(self) -> bool:
        """Check if Meilisearch is healthy."""
        try:
            async with self._call("health") as client:
                health = await client.health()
            return health.status == "available"
        except IndexUnavailableError as e:
            logger.warning(f"Meilisearch health check failed: {e}")
            return False

    async def ensure_index(self, schema: IndexSchema) -> None:
        """Create the index if it is absent and apply the schema settings."""
        async with self._call("ensure_index") as client:
            try:
                index = await client.get_index(self._index_name)
            except MeilisearchApiError as e:
                if e.status_code != 404:
                    raise
                logger.info(f"Creating index: {self._index_name}")
                # Losing a creation race leaves a failed task; the index still exists
                index = await client.create_index(
                    self._index_name,
                    primary_key=schema.primary_key,
                    timeout_in_ms=self._task_timeout_ms,
                )

            task = await index.update_settings(schema.to_settings())
            await self._wait(client, task, "ensure_index")
        logger.info(f"Configured index: {self._index_name}")

    async def upsert(self, document_id: str, fields: dict[str, Any]) -> None:
        """
        Insert or fully replace one document.

        Returns once the engine reports the write as applied.
        """
        document = {**fields, PRIMARY_KEY: document_id}
        async with self._call("upsert", document_id) as client:
            index = client.index(self._index_name)
            task = await index.add_documents([document], primary_key=PRIMARY_KEY)
            await self._wait(client, task, "upsert", document_id)
        logger.debug(f"Upserted document {document_id}, task: {task.task_uid}")

    async def delete(self, document_id: str) -> None:
        """Remove one document. Removing an absent document succeeds."""
        async with self._call("delete", document_id) as client:
            index = client.index(self._index_name)
            task = await index.delete_document(document_id)
            await self._wait(client, task, "delete", document_id)
        logger.debug(f"Deleted document {document_id}, task: {task.task_uid}")

    async def search(
        self,
        text: str,
        fields: Sequence[str],
        *,
        filter: list[str] | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> SearchResults:
        """
        Full-text search restricted to ``fields``, ranked by relevance.

        Args:
            text: Query text
            fields: Attributes the query is matched against
            filter: Filter expressions (e.g. 'color = "red"'), ANDed together
            offset: Number of results to skip
            limit: Maximum number of results

        Returns:
            Search results with hits carrying their ranking score
        """
        async with self._call("search") as client:
            index = client.index(self._index_name)
            results = await index.search(
                text,
                offset=offset,
                limit=limit,
                filter=filter or None,
                attributes_to_search_on=list(fields),
                show_ranking_score=True,
            )

        total = results.estimated_total_hits
        if total is None:
            total = results.total_hits
        return SearchResults(
            hits=list(results.hits),
            estimated_total_hits=total,
            processing_time_ms=results.processing_time_ms,
        )

    async def get_document(self, document_id: str) -> dict[str, Any] | None:
        """Get a single stored document, or None if it is not indexed."""
        async with self._call("get_document", document_id) as client:
            try:
                return await client.index(self._index_name).get_document(document_id)
            except MeilisearchApiError as e:
                if e.status_code == 404:
                    return None
                raise

    async def drop_index(self) -> None:
        """Delete the whole index. A schema change requires drop and recreate."""
        async with self._call("drop_index") as client:
            dropped = await client.delete_index_if_exists(self._index_name)
        if dropped:
            logger.info(f"Dropped index: {self._index_name}")

    async def __aenter__(self) -> IndexClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
