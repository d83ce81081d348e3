"""Product catalog endpoints."""

from typing import TYPE_CHECKING, NoReturn

from fastapi import APIRouter, HTTPException, Query, status

from catalogsearch.api.dependencies import ProductSvc
from catalogsearch.api.schemas import (
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
    ProductWriteResponse,
)
from catalogsearch.core.exceptions import NotFoundError, StoreError, ValidationError
from catalogsearch.core.types import SortField, SortOrder

if TYPE_CHECKING:
    from catalogsearch.services.products import WriteOutcome

router = APIRouter(prefix="/products", tags=["products"])


def _write_response(outcome: "WriteOutcome", message: str) -> ProductWriteResponse:
    product = None
    if outcome.product is not None:
        product = ProductResponse.model_validate(outcome.product.model_dump())
    return ProductWriteResponse(
        id=outcome.product_id,
        message=message,
        indexed=outcome.indexed,
        index_error=outcome.index_error,
        product=product,
    )


def _raise_http(error: Exception) -> NoReturn:
    """Map catalog errors onto HTTP errors."""
    if isinstance(error, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, StoreError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Catalog store unavailable",
        )
    raise error


@router.get(
    "",
    response_model=ProductListResponse,
    operation_id="listProducts",
    summary="List products",
    description="List catalog products, optionally filtered by category or limited to the newest.",
)
async def list_products(
    product_service: ProductSvc,
    page: int = Query(1, ge=1, le=10000, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Results per page"),
    new: bool = Query(False, description="Return only the most recently created products"),
    category: str | None = Query(None, max_length=200),
    sort: SortField = Query(SortField.CREATED_AT),
    order: SortOrder = Query(SortOrder.ASC),
) -> ProductListResponse:
    """List products straight from the catalog."""
    try:
        result = await product_service.list_products(
            page=page,
            page_size=page_size,
            newest=new,
            category=category,
            sort=sort,
            order=order,
        )
    except StoreError as e:
        _raise_http(e)

    return ProductListResponse(
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        has_more=result.has_more,
        results=[ProductResponse.model_validate(p.model_dump()) for p in result.items],
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    operation_id="getProduct",
    summary="Get product",
    description="Read a single product from the catalog.",
)
async def get_product(product_id: str, product_service: ProductSvc) -> ProductResponse:
    """Get one product by id."""
    try:
        product = await product_service.get_product(product_id)
    except (ValidationError, NotFoundError, StoreError) as e:
        _raise_http(e)

    return ProductResponse.model_validate(product.model_dump())


@router.post(
    "",
    response_model=ProductWriteResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createProduct",
    summary="Create product",
    description="Create a product. The write succeeds even if indexing fails; see `indexed`.",
)
async def create_product(
    request: ProductCreateRequest,
    product_service: ProductSvc,
) -> ProductWriteResponse:
    """Create a product and index it."""
    try:
        outcome = await product_service.create_product(request)
    except StoreError as e:
        _raise_http(e)

    return _write_response(outcome, "Product created successfully")


@router.put(
    "/{product_id}",
    response_model=ProductWriteResponse,
    operation_id="updateProduct",
    summary="Update product",
    description="Update the given fields of a product.",
)
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    product_service: ProductSvc,
) -> ProductWriteResponse:
    """Update a product and refresh its index document."""
    try:
        outcome = await product_service.update_product(product_id, request)
    except (ValidationError, NotFoundError, StoreError) as e:
        _raise_http(e)

    return _write_response(outcome, "Product updated successfully")


@router.delete(
    "/{product_id}",
    response_model=ProductWriteResponse,
    operation_id="deleteProduct",
    summary="Delete product",
    description="Delete a product and remove it from search results.",
)
async def delete_product(
    product_id: str,
    product_service: ProductSvc,
) -> ProductWriteResponse:
    """Delete a product."""
    try:
        outcome = await product_service.delete_product(product_id)
    except (ValidationError, NotFoundError, StoreError) as e:
        _raise_http(e)

    return _write_response(outcome, "Product has been deleted successfully")
