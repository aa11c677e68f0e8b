# src/slot_api/models/__init__.py
"""SQLAlchemy models for the slot. backend."""

from .config_entry import ConfigEntry
from .drop import DROP_MODES, Drop
from .streak import Streak

__all__ = [
    "ConfigEntry",
    "DROP_MODES",
    "Drop",
    "Streak",
]
