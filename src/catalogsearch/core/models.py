"""Domain models for catalog products and sync events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import SyncEventKind


def _dedupe_labels(labels: list[str]) -> list[str]:
    """Strip labels and drop blanks and repeats, keeping first-seen order."""
    seen: dict[str, None] = {}
    for label in labels:
        label = label.strip()
        if label:
            seen.setdefault(label, None)
    return list(seen)


class ProductData(BaseModel):
    """Fields supplied when creating a product."""

    title: str = Field(..., min_length=1, max_length=500, description="Product title")
    description: str = Field(..., min_length=1, description="Long-form description")
    image: str = Field(..., min_length=1, max_length=2000, description="Image reference")
    categories: list[str] = Field(default_factory=list, description="Category labels")
    size: str | None = Field(default=None, max_length=50, description="Size label")
    color: str | None = Field(default=None, max_length=50, description="Color label")
    price: float = Field(..., ge=0, description="Non-negative price")

    @field_validator("categories")
    @classmethod
    def _unique_categories(cls, value: list[str]) -> list[str]:
        return _dedupe_labels(value)


class ProductPatch(BaseModel):
    """Partial update for a product. Only fields that are set are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, min_length=1)
    image: str | None = Field(default=None, min_length=1, max_length=2000)
    categories: list[str] | None = None
    size: str | None = Field(default=None, max_length=50)
    color: str | None = Field(default=None, max_length=50)
    price: float | None = Field(default=None, ge=0)

    @field_validator("categories")
    @classmethod
    def _unique_categories(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _dedupe_labels(value)

    def changes(self) -> dict:
        """Return only the explicitly provided fields."""
        changes = self.model_dump(exclude_unset=True)
        # Required catalog columns cannot be cleared through a patch
        for required in ("title", "description", "image", "price", "categories"):
            if changes.get(required, ...) is None:
                changes.pop(required)
        return changes


class ProductRecord(BaseModel):
    """Canonical product as held by the catalog store."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    title: str
    description: str
    image: str
    categories: list[str] = Field(default_factory=list)
    size: str | None = None
    color: str | None = None
    price: float
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SyncEvent:
    """
    Ephemeral notification of a committed catalog mutation.

    Created and updated events carry the product as committed; deleted
    events carry only the identifier.
    """

    kind: SyncEventKind
    id: UUID
    payload: ProductRecord | None = None

    def __post_init__(self) -> None:
        if self.kind is not SyncEventKind.DELETED and self.payload is None:
            raise ValueError(f"{self.kind} event for {self.id} requires a payload")
        if self.payload is not None and self.payload.id != self.id:
            raise ValueError(f"Payload id {self.payload.id} does not match event id {self.id}")

    @classmethod
    def created(cls, record: ProductRecord) -> SyncEvent:
        return cls(SyncEventKind.CREATED, record.id, record)

    @classmethod
    def updated(cls, record: ProductRecord) -> SyncEvent:
        return cls(SyncEventKind.UPDATED, record.id, record)

    @classmethod
    def deleted(cls, product_id: UUID) -> SyncEvent:
        return cls(SyncEventKind.DELETED, product_id)
