"""Full-scan reconciliation of the search index against the catalog."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID

from catalogsearch.core.exceptions import IndexUnavailableError
from catalogsearch.core.models import ProductRecord, SyncEvent

if TYPE_CHECKING:
    from catalogsearch.catalog.store import CatalogStore
    from catalogsearch.search.sync import SyncCoordinator

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """Summary of one reconciliation pass."""

    attempted: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    batches: int = 0
    failed_ids: list[UUID] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def complete(self) -> bool:
        """Whether every scanned record reached the index or was deleted meanwhile."""
        return self.failed == 0


class UpsertOutcome(StrEnum):
    """What happened to one scanned record."""

    INDEXED = "indexed"
    SKIPPED = "skipped"
    FAILED = "failed"


class ReconciliationJob:
    """
    Rebuilds the search index from the catalog.

    Scans every product in id order and upserts it. Safe to run at any
    time, including alongside live traffic: upserts are idempotent and
    only move the index toward the catalog. The job never deletes, so
    documents whose product was removed while the index was unreachable
    are left in place.
    """

    def __init__(
        self,
        store: CatalogStore,
        coordinator: SyncCoordinator,
        *,
        batch_size: int = 500,
        concurrency: int = 8,
        max_reported_failures: int = 100,
    ) -> None:
        """
        Initialize the job.

        Args:
            store: Catalog to scan
            coordinator: Coordinator used for schema bootstrap and upserts
            batch_size: Records fetched per catalog query
            concurrency: Upserts in flight at once
            max_reported_failures: Cap on failed ids kept in the report
        """
        self._store = store
        self._coordinator = coordinator
        self._batch_size = batch_size
        self._concurrency = concurrency
        self._max_reported_failures = max_reported_failures
        self._run_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._run_lock.locked()

    async def reconcile(self) -> ReconciliationReport:
        """
        Run one full pass. Overlapping calls run one after another.

        A record that fails to index is logged and counted; the scan
        carries on.

        Raises:
            IndexUnavailableError: If the index schema cannot be ensured.
            StoreError: If the catalog scan itself fails.
        """
        async with self._run_lock:
            return await self._run()

    async def _run(self) -> ReconciliationReport:
        start = time.monotonic()
        report = ReconciliationReport()
        logger.info("Starting reconciliation")

        # The index may have been dropped since the coordinator last checked
        await self._coordinator.ensure_index(force=True)

        semaphore = asyncio.Semaphore(self._concurrency)
        async for batch in self._store.list_all(batch_size=self._batch_size):
            report.batches += 1
            outcomes = await asyncio.gather(
                *(self._upsert(record, semaphore) for record in batch)
            )
            for record, outcome in zip(batch, outcomes):
                report.attempted += 1
                if outcome is UpsertOutcome.INDEXED:
                    report.succeeded += 1
                elif outcome is UpsertOutcome.SKIPPED:
                    report.skipped += 1
                else:
                    report.failed += 1
                    if len(report.failed_ids) < self._max_reported_failures:
                        report.failed_ids.append(record.id)
            logger.debug(f"Reconciled batch {report.batches}: {len(batch)} records")

        report.duration_ms = (time.monotonic() - start) * 1000
        logger.info(
            f"Reconciliation complete: {report.attempted} attempted, "
            f"{report.succeeded} succeeded, {report.skipped} skipped, {report.failed} failed "
            f"in {report.duration_ms:.0f}ms"
        )
        return report

    async def _upsert(
        self, record: ProductRecord, semaphore: asyncio.Semaphore
    ) -> UpsertOutcome:
        async with semaphore:
            try:
                applied = await self._coordinator.propagate(SyncEvent.updated(record))
            except IndexUnavailableError as e:
                logger.warning(f"Failed to reconcile product {record.id}: {e}")
                return UpsertOutcome.FAILED
        # Not applied: the product was deleted after the scan read it
        return UpsertOutcome.INDEXED if applied else UpsertOutcome.SKIPPED
