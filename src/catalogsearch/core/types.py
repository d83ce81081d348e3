"""Core enums and type definitions."""

from enum import StrEnum


class SyncEventKind(StrEnum):
    """Kinds of catalog mutation that are propagated to the search index."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class FieldKind(StrEnum):
    """How a document field is treated by the search index."""

    TEXT = "text"  # Full-text, tokenized and ranked
    KEYWORD = "keyword"  # Exact-match token, filterable
    NUMERIC = "numeric"
    DATE = "date"


class SortField(StrEnum):
    """Catalog fields that product listings can be sorted by."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"
    PRICE = "price"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"
