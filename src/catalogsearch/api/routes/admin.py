"""Administrative endpoints."""

from fastapi import APIRouter, HTTPException, status

from catalogsearch.api.dependencies import Reconciler
from catalogsearch.api.schemas import ReconciliationResponse
from catalogsearch.core.exceptions import IndexUnavailableError, StoreError

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/reconcile",
    response_model=ReconciliationResponse,
    operation_id="reconcileIndex",
    summary="Reconcile search index",
    description=(
        "Upsert every catalog product into the search index. "
        "Waits for any reconciliation already in progress."
    ),
)
async def reconcile_index(job: Reconciler) -> ReconciliationResponse:
    """Run a full reconciliation pass and report the outcome."""
    try:
        report = await job.reconcile()
    except IndexUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search index unavailable",
        )
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Catalog store unavailable",
        )

    return ReconciliationResponse(
        attempted=report.attempted,
        succeeded=report.succeeded,
        skipped=report.skipped,
        failed=report.failed,
        batches=report.batches,
        complete=report.complete,
        failed_ids=report.failed_ids,
        duration_ms=report.duration_ms,
    )
