"""Propagation of catalog mutations to the search index."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from catalogsearch.core.exceptions import IndexUnavailableError
from catalogsearch.core.models import SyncEvent
from catalogsearch.core.types import SyncEventKind
from catalogsearch.search.client import IndexClient
from catalogsearch.search.documents import product_to_document
from catalogsearch.search.schema import PRODUCT_SCHEMA, IndexSchema

logger = logging.getLogger(__name__)


class SyncCoordinator:
    """
    Applies committed catalog mutations to the search index.

    ``propagate`` is awaited inline by the write path. It does not retry:
    the catalog write has already committed, so a failure is raised to
    the caller and left for the reconciliation job to repair.

    Within one process, propagations for the same product run one at a
    time, and once a deletion has been seen any later upsert for that id
    is dropped. Product ids are never reused, so such an upsert can only
    carry state older than the deletion. Across processes no ordering is
    guaranteed.
    """

    def __init__(
        self,
        index: IndexClient,
        schema: IndexSchema = PRODUCT_SCHEMA,
        *,
        tombstone_limit: int = 10000,
    ) -> None:
        """
        Initialize the coordinator.

        Args:
            index: Shared index adapter
            schema: Schema the index is bootstrapped with
            tombstone_limit: How many deleted ids to remember
        """
        self._index = index
        self._schema = schema
        self._tombstone_limit = tombstone_limit
        self._tombstones: OrderedDict[UUID, None] = OrderedDict()
        self._locks: dict[UUID, tuple[asyncio.Lock, int]] = {}
        self._bootstrap_lock = asyncio.Lock()
        self._index_ready = False

    @property
    def index_ready(self) -> bool:
        return self._index_ready

    async def ensure_index(self, *, force: bool = False) -> None:
        """
        Make sure the index exists with the fixed schema.

        Runs once per coordinator unless ``force`` is set. A failed
        bootstrap is retried on the next call.
        """
        if self._index_ready and not force:
            return
        async with self._bootstrap_lock:
            if self._index_ready and not force:
                return
            await self._index.ensure_index(self._schema)
            self._index_ready = True

    async def propagate(self, event: SyncEvent) -> bool:
        """
        Apply one sync event to the index.

        Returns:
            False if the event was a stale upsert for a deleted product and
            was dropped, True once the index has applied it.

        Raises:
            IndexUnavailableError: If the index could not be updated.
        """
        await self.ensure_index()

        async with self._serialized(event.id):
            try:
                if event.kind is SyncEventKind.DELETED:
                    self._remember_deleted(event.id)
                    await self._index.delete(str(event.id))
                elif self.was_deleted(event.id):
                    logger.info(f"Skipping stale {event.kind} for deleted product {event.id}")
                    return False
                else:
                    await self._index.upsert(str(event.id), product_to_document(event.payload))
            except IndexUnavailableError as e:
                logger.warning(f"Propagation of {event.kind} for product {event.id} failed: {e}")
                raise

        logger.debug(f"Propagated {event.kind} for product {event.id}")
        return True

    def was_deleted(self, product_id: UUID) -> bool:
        """Whether this coordinator has seen the product's deletion."""
        return product_id in self._tombstones

    def _remember_deleted(self, product_id: UUID) -> None:
        self._tombstones[product_id] = None
        self._tombstones.move_to_end(product_id)
        while len(self._tombstones) > self._tombstone_limit:
            self._tombstones.popitem(last=False)

    @asynccontextmanager
    async def _serialized(self, product_id: UUID) -> AsyncIterator[None]:
        """Hold the per-product lock, dropping it once nobody is waiting."""
        lock, waiters = self._locks.get(product_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[product_id] = (lock, waiters + 1)
        try:
            async with lock:
                yield
        finally:
            lock, waiters = self._locks[product_id]
            if waiters == 1:
                del self._locks[product_id]
            else:
                self._locks[product_id] = (lock, waiters - 1)
