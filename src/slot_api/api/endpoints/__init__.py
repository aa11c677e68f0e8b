# src/slot_api/api/endpoints/__init__.py
"""API endpoint modules."""

from .admin import router as admin_router
from .public import router as public_router

__all__ = [
    "admin_router",
    "public_router",
]
