"""Custom exception hierarchy for catalogsearch."""

from typing import Any


class CatalogSearchError(Exception):
    """Base exception for all catalogsearch errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(CatalogSearchError):
    """Input validation failed."""

    pass


class MissingQueryError(ValidationError):
    """Search query text was blank or missing."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("Search query is required", details)


class NotFoundError(CatalogSearchError):
    """Resource not found."""

    def __init__(
        self,
        message: str,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.resource_id = resource_id


class StoreError(CatalogSearchError):
    """Catalog store operation failed."""

    pass


class IndexUnavailableError(CatalogSearchError):
    """A call to the search index failed (network, timeout, failed task)."""

    def __init__(
        self,
        message: str,
        operation: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
        self.document_id = document_id


class CacheError(CatalogSearchError):
    """Cache operation failed."""

    pass
