"""Service layer for orchestrating business logic."""

from catalogsearch.services.products import ProductPage, ProductService, WriteOutcome
from catalogsearch.services.search import SearchService

__all__ = [
    "ProductPage",
    "ProductService",
    "SearchService",
    "WriteOutcome",
]
