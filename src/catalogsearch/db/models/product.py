"""Product database model."""

from __future__ import annotations

from sqlalchemy import JSON, CheckConstraint, Float, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from catalogsearch.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ProductModel(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Authoritative catalog record for a product.

    The primary key doubles as the search document id. It is generated
    once on insert and never reused after the row is deleted.
    """

    __tablename__ = "products"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String(2000), nullable=False)
    categories: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=list,
    )
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="non_negative_price"),
        Index("ix_products_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ProductModel(id={self.id}, title='{self.title[:50]}', price={self.price})>"
