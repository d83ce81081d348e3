"""Fixed schema of the product search index."""

from __future__ import annotations

from dataclasses import dataclass, field

from meilisearch_python_sdk.models.settings import MeilisearchSettings

from catalogsearch.core.types import FieldKind

PRIMARY_KEY = "id"


@dataclass(frozen=True)
class IndexSchema:
    """
    Field layout of a search index.

    Changing the schema of an existing index means dropping and
    recreating it; there is no in-place migration.
    """

    fields: dict[str, FieldKind]
    # Fields matched by free-text queries, in ranking priority order
    query_fields: tuple[str, ...]
    primary_key: str = PRIMARY_KEY
    displayed: tuple[str, ...] = field(default=("*",))

    def fields_of(self, kind: FieldKind) -> list[str]:
        return [name for name, k in self.fields.items() if k is kind]

    def to_settings(self) -> MeilisearchSettings:
        """Render the schema as Meilisearch index settings."""
        filterable = (
            self.fields_of(FieldKind.KEYWORD)
            + self.fields_of(FieldKind.NUMERIC)
            + self.fields_of(FieldKind.DATE)
        )
        sortable = self.fields_of(FieldKind.NUMERIC) + self.fields_of(FieldKind.DATE)
        # Text fields first so they outrank keyword fields that are also queried
        searchable = self.fields_of(FieldKind.TEXT) + [
            name for name in self.query_fields if self.fields.get(name) is not FieldKind.TEXT
        ]
        return MeilisearchSettings(
            searchable_attributes=searchable,
            filterable_attributes=filterable,
            sortable_attributes=sortable,
            displayed_attributes=list(self.displayed),
        )


PRODUCT_SCHEMA = IndexSchema(
    fields={
        "title": FieldKind.TEXT,
        "description": FieldKind.TEXT,
        "image": FieldKind.KEYWORD,
        "categories": FieldKind.KEYWORD,
        "size": FieldKind.KEYWORD,
        "color": FieldKind.KEYWORD,
        "price": FieldKind.NUMERIC,
        "created_at": FieldKind.DATE,
        "updated_at": FieldKind.DATE,
    },
    query_fields=("title", "description", "categories"),
)
