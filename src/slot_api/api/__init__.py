# src/slot_api/api/__init__.py
"""HTTP API routers."""

from .endpoints import admin_router, public_router

__all__ = [
    "admin_router",
    "public_router",
]
