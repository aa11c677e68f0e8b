"""Runtime configuration stored in the `config` table.

Values are text. Consumers parse them through `ConfigSnapshot`, which is
read fresh at the start of every request and passed explicitly into the
admission logic.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from slot_api.models import ConfigEntry
from slot_api.services.errors import StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Final[dict[str, str]] = {
    "type_enabled": "true",
    "speak_enabled": "true",
    "draw_enabled": "true",
    "streaks_enabled": "true",
    "global_drops_visible": "true",
    "live_counter_visible": "true",
    "seasonal_accent": "true",
    "max_chars": "200",
    "drops_per_day": "1",
    "announcement": "",
}

DEFAULT_MAX_CHARS: Final[int] = 200
DEFAULT_DROPS_PER_DAY: Final[int] = 1


def coerce_value(value: object) -> str:
    """Return the stored text form of a config value.

    Booleans become "true"/"false", None becomes an empty string and
    integral floats lose their trailing ".0".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class ConfigSnapshot:
    """Immutable view of the config table at one point in a request."""

    values: Mapping[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.values.get(key, default)

    def flag(self, key: str) -> bool:
        """Return False only when the flag is stored as the string "false"."""
        return self.values.get(key) != "false"

    def int_value(self, key: str, default: int) -> int:
        raw = self.values.get(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning("Config key %s holds non-integer value %r; using %d", key, raw, default)
            return default

    @property
    def max_chars(self) -> int:
        return self.int_value("max_chars", DEFAULT_MAX_CHARS)

    @property
    def drops_per_day(self) -> int:
        return self.int_value("drops_per_day", DEFAULT_DROPS_PER_DAY)

    def mode_enabled(self, mode: str) -> bool:
        return self.flag(f"{mode}_enabled")

    def as_dict(self) -> dict[str, str]:
        return dict(self.values)


class ConfigStore:
    """Read and write runtime configuration entries."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_all(self) -> dict[str, str]:
        """Return every config entry as a key/value mapping."""
        rows = self.db.execute(select(ConfigEntry.key, ConfigEntry.value)).all()
        return {key: value for (key, value) in rows}

    def snapshot(self) -> ConfigSnapshot:
        return ConfigSnapshot(self.get_all())

    def upsert_many(self, entries: Mapping[str, object]) -> None:
        """Insert or overwrite every entry in one transaction.

        Raises:
            StoreUnavailable: If the write fails; nothing is applied.
        """
        try:
            for key, value in entries.items():
                self.db.merge(ConfigEntry(key=str(key), value=coerce_value(value)))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Config upsert failed for keys %s", sorted(entries))
            raise StoreUnavailable() from exc
        logger.info("Config updated: %s", ", ".join(sorted(str(key) for key in entries)))

    def seed_defaults(self) -> list[str]:
        """Insert default entries whose keys are missing.

        Existing values are never overwritten, so operator changes survive
        restarts.

        Returns:
            The keys that were inserted.
        """
        existing = set(self.db.scalars(select(ConfigEntry.key)))
        missing = [key for key in DEFAULT_CONFIG if key not in existing]
        for key in missing:
            self.db.add(ConfigEntry(key=key, value=DEFAULT_CONFIG[key]))
        self.db.commit()
        if missing:
            logger.info("Seeded default config keys: %s", ", ".join(missing))
        return missing
