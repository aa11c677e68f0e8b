# src/slot_api/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .drop import CountResponse, DropCreate, DropResult, SuccessResponse
from .status import HourlyBucket, ModeCount, RecentDrop, StatsResponse, StatusResponse

__all__ = [
    "CountResponse", "DropCreate", "DropResult", "SuccessResponse",
    "HourlyBucket", "ModeCount", "RecentDrop", "StatsResponse", "StatusResponse",
]
