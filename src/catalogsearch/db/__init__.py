"""Database layer."""

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin, create_engine, create_session_factory
from .models import ProductModel
from .repositories import BaseRepository, ProductRepository
from .session import DatabaseManager

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "create_engine",
    "create_session_factory",
    # Models
    "ProductModel",
    # Repositories
    "BaseRepository",
    "ProductRepository",
    # Session
    "DatabaseManager",
]
