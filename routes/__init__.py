"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.products import router as products_router
from routes.product_import import router as product_import_router

__all__ = [
    "products_router",
    "product_import_router",
]
