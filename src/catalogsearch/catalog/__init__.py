"""Authoritative product catalog."""

from catalogsearch.catalog.store import CatalogStore

__all__ = ["CatalogStore"]
