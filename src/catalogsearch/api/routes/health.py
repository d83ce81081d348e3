"""Health check endpoints."""

from typing import Literal

from fastapi import APIRouter, Request

from catalogsearch.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    operation_id="getHealth",
    summary="Health check",
    description="Check the health status of the API and its dependencies.",
)
async def health_check(request: Request) -> HealthResponse:
    """Check API health status."""
    services: dict[str, Literal["up", "down", "unknown"]] = {}
    overall_status: Literal["healthy", "degraded", "unhealthy"] = "healthy"

    # Check database
    try:
        database = getattr(request.app.state, "database", None)
        if database:
            await database.ping()
            services["database"] = "up"
        else:
            services["database"] = "unknown"
    except Exception:
        services["database"] = "down"
        overall_status = "unhealthy"

    # Check Redis
    try:
        cache_client = getattr(request.app.state, "cache_client", None)
        if cache_client:
            await cache_client.ping()
            services["redis"] = "up"
        else:
            services["redis"] = "unknown"
    except Exception:
        services["redis"] = "down"
        if overall_status == "healthy":
            overall_status = "degraded"

    # Check Meilisearch; the catalog still accepts writes while it is down
    index_client = getattr(request.app.state, "index_client", None)
    if index_client is None:
        services["meilisearch"] = "unknown"
    elif await index_client.health():
        services["meilisearch"] = "up"
    else:
        services["meilisearch"] = "down"
        if overall_status == "healthy":
            overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version="0.1.0",
        services=services,
    )


@router.get(
    "/ready",
    operation_id="getReady",
    summary="Readiness check",
    description="Check if the API is ready to serve traffic.",
)
async def readiness_check(request: Request) -> dict[str, bool]:
    """Check if API is ready to serve traffic."""
    catalog_store = getattr(request.app.state, "catalog_store", None)
    sync_coordinator = getattr(request.app.state, "sync_coordinator", None)

    ready = catalog_store is not None and sync_coordinator is not None

    return {"ready": ready}
