"""Shared configuration for API request and response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def to_camel_case(string: str) -> str:
    """Convert snake_case to camelCase (``page_size`` -> ``pageSize``)."""
    head, *rest = string.split("_")
    return head + "".join(word.capitalize() for word in rest)


class APIBaseSchema(BaseModel):
    """
    Base for every model the API reads or writes.

    Fields are exposed in camelCase on the wire but can be populated by
    their Python names, and response models validate straight from
    catalog records.
    """

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginatedResponse(APIBaseSchema):
    """Page bookkeeping shared by catalog listings and search results."""

    total: int
    page: int
    page_size: int
    has_more: bool
