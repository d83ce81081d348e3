"""Repository implementations."""

from .base import BaseRepository
from .product import ProductRepository

__all__ = ["BaseRepository", "ProductRepository"]
