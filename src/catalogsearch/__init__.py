"""Catalogsearch - Product catalog with a synchronized full-text search index."""

from catalogsearch.client import CatalogSearchClient, reconcile_index
from catalogsearch.core.models import ProductData, ProductPatch, ProductRecord, SyncEvent
from catalogsearch.core.types import SortField, SortOrder, SyncEventKind
from catalogsearch.search.reconcile import ReconciliationReport
from catalogsearch.search.searcher import SearchFilters, SearchHit, SearchPage
from catalogsearch.services.products import WriteOutcome

__version__ = "0.1.0"
__all__ = [
    # Client
    "CatalogSearchClient",
    "reconcile_index",
    # Types
    "SortField",
    "SortOrder",
    "SyncEventKind",
    # Models
    "ProductData",
    "ProductPatch",
    "ProductRecord",
    "SyncEvent",
    # Results
    "ReconciliationReport",
    "SearchFilters",
    "SearchHit",
    "SearchPage",
    "WriteOutcome",
    # Version
    "__version__",
]
