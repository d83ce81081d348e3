"""Conversion between catalog products and index documents."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from catalogsearch.core.models import ProductRecord


def _isoformat(value: datetime) -> str:
    # Naive timestamps from the store are UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def product_to_document(record: ProductRecord) -> dict[str, Any]:
    """
    Convert a catalog product to a full search document.

    The document always carries every indexed field so that an upsert
    replaces the stored document wholesale.
    """
    return {
        "id": str(record.id),
        "title": record.title,
        "description": record.description,
        "image": record.image,
        "categories": list(record.categories),
        "size": record.size,
        "color": record.color,
        "price": record.price,
        "created_at": _isoformat(record.created_at),
        "updated_at": _isoformat(record.updated_at),
    }
