# src/slot_api/services/__init__.py
"""Business logic services for the slot. backend."""

from .config_store import ConfigSnapshot, ConfigStore
from .drop_service import DropService
from .rate_limit import RateLimitService
from .stats_service import collect_stats

__all__ = [
    "ConfigSnapshot",
    "ConfigStore",
    "DropService",
    "RateLimitService",
    "collect_stats",
]
