# src/slot_api/schemas/status.py
"""Schemas for per-device status and the admin dashboard."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StatusResponse(BaseModel):
    """Public status of the calling device."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    today_count: int
    has_dropped_today: bool
    streak: int
    longest_streak: int
    config: dict[str, str]


class HourlyBucket(BaseModel):
    hour: int
    count: int


class ModeCount(BaseModel):
    mode: str
    count: int


class RecentDrop(BaseModel):
    mode: str
    char_count: int
    created_at: datetime


class StatsResponse(BaseModel):
    """Aggregates for `GET /api/admin/stats`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    today: int
    yesterday: int
    this_week: int
    all_time: int
    unique_today: int
    hourly: list[HourlyBucket]
    modes: list[ModeCount]
    recent: list[RecentDrop]
