"""Search endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from catalogsearch.api.dependencies import SearchSvc
from catalogsearch.api.schemas import SearchProductsResponse
from catalogsearch.core.exceptions import IndexUnavailableError, MissingQueryError

router = APIRouter(tags=["search"])


@router.get(
    "/search",
    response_model=SearchProductsResponse,
    operation_id="searchProducts",
    summary="Search products",
    description="Full-text search over product title, description and categories.",
)
async def search_products(
    search_service: SearchSvc,
    q: str | None = Query(None, max_length=500, description="Search query"),
    page: int = Query(1, ge=1, le=1000, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Results per page"),
    category: str | None = Query(None, max_length=200),
    size: str | None = Query(None, max_length=50),
    color: str | None = Query(None, max_length=50),
    price_min: float | None = Query(None, ge=0, alias="priceMin"),
    price_max: float | None = Query(None, ge=0, alias="priceMax"),
) -> SearchProductsResponse:
    """Search for products using full-text search."""
    try:
        return await search_service.search_products(
            q,
            category=category,
            size=size,
            color=color,
            price_min=price_min,
            price_max=price_max,
            page=page,
            page_size=page_size,
        )
    except MissingQueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except IndexUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search is temporarily unavailable",
        )
