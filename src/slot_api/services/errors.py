"""Domain errors raised by services and rendered by the API layer."""

from __future__ import annotations

from fastapi import status


class SlotError(Exception):
    """Base class for errors that carry a client-safe message and status."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


class AlreadyDroppedToday(SlotError):
    """The device reached its daily drop allowance."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Already dropped today"


class InvalidMode(SlotError):
    """The requested drop mode is not a known mode."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid mode"


class ModeDisabled(SlotError):
    """An operator switched the requested mode off."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "This mode is currently disabled"


class Unauthorized(SlotError):
    """Missing or wrong admin credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class RateLimited(SlotError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Too many requests"


class StoreUnavailable(SlotError):
    """The persistence layer failed; details are logged, never returned."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"
