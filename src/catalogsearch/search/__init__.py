"""Search index synchronization and querying."""

from catalogsearch.search.client import IndexClient, SearchResults
from catalogsearch.search.documents import product_to_document
from catalogsearch.search.reconcile import ReconciliationJob, ReconciliationReport
from catalogsearch.search.schema import PRODUCT_SCHEMA, IndexSchema
from catalogsearch.search.searcher import QueryRouter, SearchFilters, SearchHit, SearchPage
from catalogsearch.search.sync import SyncCoordinator

__all__ = [
    "IndexClient",
    "IndexSchema",
    "PRODUCT_SCHEMA",
    "QueryRouter",
    "ReconciliationJob",
    "ReconciliationReport",
    "SearchFilters",
    "SearchHit",
    "SearchPage",
    "SearchResults",
    "SyncCoordinator",
    "product_to_document",
]
