"""Caller identity and admin credential helpers."""
from __future__ import annotations

import hashlib
import secrets

from slot_api.core.settings import settings

DEVICE_HASH_LENGTH = 16


def device_hash(address: str | None, user_agent: str | None) -> str:
    """Return a pseudonymous device identifier.

    The identifier is the SHA-256 of the caller address followed by the
    user agent, truncated to 16 hex characters. Missing values hash as empty
    strings, so two callers behind one NAT with the same user agent share an
    identifier.

    Args:
        address: Network address of the caller, if known.
        user_agent: Raw `User-Agent` header value, if sent.

    Returns:
        A 16-character lowercase hex string.
    """
    raw = (address or "") + (user_agent or "")
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:DEVICE_HASH_LENGTH]


def verify_admin_key(provided: str | None, expected: str | None = None) -> bool:
    """Compare an admin key against the configured secret in constant time."""
    expected = settings.admin_key if expected is None else expected
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
