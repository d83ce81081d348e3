"""Product identifier parsing."""

from __future__ import annotations

from uuid import UUID

from .exceptions import ValidationError


def parse_product_id(raw: str | UUID) -> UUID:
    """
    Parse a product identifier from request input.

    Accepts the canonical hyphenated form as well as the 32-character
    hex form. Anything else is rejected before it reaches the store or
    the index.

    Raises:
        ValidationError: If the value is not a valid UUID.
    """
    if isinstance(raw, UUID):
        return raw

    value = raw.strip() if isinstance(raw, str) else ""
    try:
        return UUID(value)
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(
            "Invalid product ID format",
            details={"id": raw if isinstance(raw, str) else repr(raw)},
        ) from None
