"""API route modules."""

from catalogsearch.api.routes.admin import router as admin_router
from catalogsearch.api.routes.health import router as health_router
from catalogsearch.api.routes.products import router as products_router
from catalogsearch.api.routes.search import router as search_router

__all__ = [
    "admin_router",
    "health_router",
    "products_router",
    "search_router",
]
