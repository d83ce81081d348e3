"""Cache key builders for consistent key formatting."""

from uuid import UUID


class CacheKeys:
    """Cache key builders for consistent key formatting."""

    PREFIX = "catalogsearch"

    @classmethod
    def product(cls, product_id: UUID | str) -> str:
        """Key for a single product by id."""
        return f"{cls.PREFIX}:product:{product_id}"

    @classmethod
    def product_generation(cls, product_id: UUID | str) -> str:
        """Key for the write counter guarding a product's cached copy."""
        return f"{cls.PREFIX}:product-generation:{product_id}"
