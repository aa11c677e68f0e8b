# src/slot_api/api/endpoints/admin.py
"""Admin dashboard, config management and maintenance endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from slot_api.api.dependencies import DropServiceDep, SessionDep, require_admin
from slot_api.schemas import DropCreate, StatsResponse, SuccessResponse
from slot_api.services.config_store import ConfigStore
from slot_api.services.stats_service import collect_stats

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: SessionDep) -> dict[str, object]:
    """Return dashboard aggregates for today, yesterday, the week and all time."""
    return collect_stats(db)


@router.post("/drop", response_model=SuccessResponse)
def create_admin_drop(
    service: DropServiceDep,
    payload: Annotated[DropCreate, Body()] = DropCreate(),
) -> dict[str, bool]:
    """Insert a drop as the "admin" device, ignoring the daily cap and mode flags."""
    service.admin_drop(payload.mode, payload.char_count)
    return {"success": True}


@router.get("/config")
def get_config(db: SessionDep) -> dict[str, str]:
    """Return every config entry."""
    return ConfigStore(db).get_all()


@router.put("/config", response_model=SuccessResponse)
def update_config(
    entries: Annotated[dict[str, Any], Body()],
    db: SessionDep,
) -> dict[str, bool]:
    """Insert or overwrite the given config entries in one transaction."""
    ConfigStore(db).upsert_many(entries)
    return {"success": True}


@router.post("/reset-streaks", response_model=SuccessResponse)
def reset_streaks(service: DropServiceDep) -> dict[str, bool]:
    """Zero every device's current streak; longest streaks are kept."""
    service.reset_streaks()
    return {"success": True}


@router.post("/reset-counter", response_model=SuccessResponse)
def reset_counter(service: DropServiceDep) -> dict[str, bool]:
    """Delete all of today's drops. Irreversible."""
    service.reset_counter()
    return {"success": True}
