"""Shared API dependencies for caller identity and admin authentication."""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from slot_api.core.security import device_hash, verify_admin_key
from slot_api.db.session import get_db
from slot_api.services.drop_service import DropService
from slot_api.services.errors import Unauthorized

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_device_hash(
    request: Request,
    user_agent: Annotated[str | None, Header()] = None,
) -> str:
    """Resolve the pseudonymous device identity of the caller.

    Args:
        request: Incoming request; the peer address is read from it
        user_agent: `User-Agent` header, if present

    Returns:
        16-character device hash
    """
    address = request.client.host if request.client else ""
    return device_hash(address, user_agent)


def require_admin(
    x_admin_key: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless `x-admin-key` matches the configured secret.

    Raises:
        Unauthorized: If the header is missing or wrong
    """
    if not verify_admin_key(x_admin_key):
        raise Unauthorized()


def get_drop_service(db: SessionDep) -> DropService:
    """Return a drop service bound to the request session."""
    return DropService(db)


DeviceHashDep = Annotated[str, Depends(get_device_hash)]
DropServiceDep = Annotated[DropService, Depends(get_drop_service)]
