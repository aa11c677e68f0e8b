# src/slot_api/api/endpoints/public.py
"""Public endpoints keyed to the caller's device identity."""

from typing import Annotated

from fastapi import APIRouter, Body

from slot_api.api.dependencies import DeviceHashDep, DropServiceDep
from slot_api.schemas import CountResponse, DropCreate, DropResult, StatusResponse

router = APIRouter(tags=["public"])


@router.get("/status", response_model=StatusResponse)
def get_status(device: DeviceHashDep, service: DropServiceDep) -> dict[str, object]:
    """Return today's count, the caller's streak and the public config."""
    return service.device_status(device)


@router.post("/drop", response_model=DropResult)
def create_drop(
    device: DeviceHashDep,
    service: DropServiceDep,
    payload: Annotated[DropCreate, Body()] = DropCreate(),
) -> dict[str, object]:
    """Record today's drop for the caller.

    Refusals are reported as 429 (daily allowance used), 400 (unknown mode)
    or 403 (mode switched off). A missing body records a `type` drop.
    """
    today_count = service.submit_drop(device, payload.mode, payload.char_count)
    return {"success": True, "today_count": today_count}


@router.get("/count", response_model=CountResponse)
def get_count(service: DropServiceDep) -> dict[str, int]:
    """Return today's drop count across all devices."""
    return {"count": service.today_total()}
