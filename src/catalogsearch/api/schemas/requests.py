"""Request schemas for API endpoints."""

from __future__ import annotations

from pydantic import ConfigDict

from catalogsearch.core.models import ProductData, ProductPatch


class ProductCreateRequest(ProductData):
    """Request to create a product."""

    model_config = ConfigDict(extra="forbid")


class ProductUpdateRequest(ProductPatch):
    """Request to update a product. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")
