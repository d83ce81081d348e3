"""Core types, models, and utilities."""

from .exceptions import (
    CacheError,
    CatalogSearchError,
    IndexUnavailableError,
    MissingQueryError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .identifiers import parse_product_id
from .models import ProductData, ProductPatch, ProductRecord, SyncEvent
from .types import FieldKind, SortField, SortOrder, SyncEventKind

__all__ = [
    # Types
    "FieldKind",
    "SortField",
    "SortOrder",
    "SyncEventKind",
    # Identifiers
    "parse_product_id",
    # Models
    "ProductData",
    "ProductPatch",
    "ProductRecord",
    "SyncEvent",
    # Exceptions
    "CacheError",
    "CatalogSearchError",
    "IndexUnavailableError",
    "MissingQueryError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
