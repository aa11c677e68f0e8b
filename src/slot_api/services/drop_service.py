"""Drop admission, recording and maintenance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Final

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from slot_api.db.time import as_utc, local_day, utcnow
from slot_api.models import DROP_MODES, Drop
from slot_api.repositories.drop_repo import DropRepository, StreakRepository
from slot_api.services.config_store import ConfigSnapshot, ConfigStore
from slot_api.services.errors import (
    AlreadyDroppedToday,
    InvalidMode,
    ModeDisabled,
    StoreUnavailable,
)
from slot_api.services.streaks import advance_streak

logger = logging.getLogger(__name__)

ADMIN_DEVICE_HASH: Final[str] = "admin"
STREAK_CONFLICT_ATTEMPTS: Final[int] = 2


@dataclass(frozen=True)
class RequestClock:
    """Single instant captured at the start of a request.

    `today` and `yesterday` are both derived from it so a request that
    straddles midnight sees one consistent pair of dates.
    """

    now: datetime
    today: date
    yesterday: date

    @classmethod
    def capture(cls, now: datetime | None = None) -> RequestClock:
        instant = as_utc(now) if now is not None else utcnow()
        today = local_day(instant)
        return cls(now=instant, today=today, yesterday=today - timedelta(days=1))


def clamp_char_count(char_count: int, max_chars: int) -> int:
    """Clamp a submitted character count into `[0, max_chars]`."""
    return max(0, min(char_count, max_chars))


def validate_mode(mode: object) -> None:
    if mode not in DROP_MODES:
        raise InvalidMode()


def check_admission(mode: object, device_today_count: int, config: ConfigSnapshot) -> None:
    """Raise if a drop must be refused; the checks run in a fixed order.

    Raises:
        AlreadyDroppedToday: The device used up `drops_per_day`.
        InvalidMode: `mode` is not one of the known modes.
        ModeDisabled: `{mode}_enabled` is "false".
    """
    if device_today_count >= config.drops_per_day:
        raise AlreadyDroppedToday()
    validate_mode(mode)
    if not config.mode_enabled(mode):
        raise ModeDisabled()


class DropService:
    """Orchestrates the drop ledger, streak table and config store."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.drops = DropRepository(db)
        self.streaks = StreakRepository(db)
        self.config = ConfigStore(db)

    def today_total(self, now: datetime | None = None) -> int:
        """Return today's drop count across all devices."""
        clock = RequestClock.capture(now)
        return self.drops.count_for_day(clock.today)

    def device_status(self, device_hash: str, now: datetime | None = None) -> dict[str, object]:
        """Return the public status payload for one device."""
        clock = RequestClock.capture(now)
        config = self.config.snapshot()
        device_count = self.drops.count_for_day(clock.today, device_hash)
        streak = self.streaks.get(device_hash)
        return {
            "today_count": self.drops.count_for_day(clock.today),
            "has_dropped_today": device_count >= config.drops_per_day,
            "streak": streak.current_streak if streak else 0,
            "longest_streak": streak.longest_streak if streak else 0,
            "config": config.as_dict(),
        }

    def submit_drop(
        self,
        device_hash: str,
        mode: str,
        char_count: int,
        now: datetime | None = None,
    ) -> int:
        """Admit and record a drop, then advance the device's streak.

        The drop insert and the streak update commit together or not at
        all. Concurrent first requests from one device are not serialized
        and may both pass the daily cap. When a concurrent request creates
        the device's streak row first, the whole write is retried once with
        admission re-checked against the committed state.

        Args:
            device_hash: Resolved identity of the caller.
            mode: Requested drop mode.
            char_count: Size metric reported by the client.
            now: Override for the request instant (tests, backfills).

        Returns:
            Today's total drop count across all devices after the insert.

        Raises:
            AlreadyDroppedToday, InvalidMode, ModeDisabled: Admission
                refused; nothing was written.
            StoreUnavailable: The write failed and was rolled back.
        """
        clock = RequestClock.capture(now)
        for attempt in range(1, STREAK_CONFLICT_ATTEMPTS + 1):
            config = self._admit(device_hash, mode, clock)
            try:
                self.drops.create(
                    device_hash=device_hash,
                    mode=mode,
                    char_count=clamp_char_count(char_count, config.max_chars),
                    created_at=clock.now,
                    day=clock.today,
                )
                self._record_streak(device_hash, clock.today)
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                if attempt < STREAK_CONFLICT_ATTEMPTS:
                    logger.info("Streak for %s was created concurrently; retrying", device_hash)
                    continue
                logger.exception("Failed to record drop for %s", device_hash)
                raise StoreUnavailable() from exc
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Failed to record drop for %s", device_hash)
                raise StoreUnavailable() from exc
            break

        logger.info("Drop recorded for %s (%s)", device_hash, mode)
        return self.drops.count_for_day(clock.today)

    def _admit(self, device_hash: str, mode: object, clock: RequestClock) -> ConfigSnapshot:
        config = self.config.snapshot()
        device_count = self.drops.count_for_day(clock.today, device_hash)
        try:
            check_admission(mode, device_count, config)
        except (AlreadyDroppedToday, InvalidMode, ModeDisabled) as exc:
            logger.debug("Drop refused for %s (%s): %s", device_hash, mode, exc.message)
            raise
        return config

    def _record_streak(self, device_hash: str, today: date) -> None:
        streak = self.streaks.get(device_hash)
        if streak is None:
            self.streaks.create(device_hash=device_hash, current=1, longest=1, last_drop_date=today)
            return

        values = advance_streak(
            streak.current_streak,
            streak.longest_streak,
            streak.last_drop_date,
            today,
        )
        streak.current_streak = values.current
        streak.longest_streak = values.longest
        streak.last_drop_date = today

    def admin_drop(self, mode: str, char_count: int, now: datetime | None = None) -> Drop:
        """Insert a drop for the synthetic admin device.

        Skips the daily cap and mode flags and leaves streaks untouched. The
        mode must still be a known one.
        """
        validate_mode(mode)
        clock = RequestClock.capture(now)
        config = self.config.snapshot()
        try:
            drop = self.drops.create(
                device_hash=ADMIN_DEVICE_HASH,
                mode=mode,
                char_count=clamp_char_count(char_count, config.max_chars),
                created_at=clock.now,
                day=clock.today,
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to record admin drop")
            raise StoreUnavailable() from exc
        logger.info("Admin drop recorded (%s)", mode)
        return drop

    def reset_streaks(self) -> int:
        """Zero every current streak; returns the number of rows touched."""
        try:
            affected = self.streaks.reset_current()
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to reset streaks")
            raise StoreUnavailable() from exc
        logger.warning("Reset current streak on %d devices", affected)
        return affected

    def reset_counter(self, now: datetime | None = None) -> int:
        """Delete today's drops; returns the number of rows removed."""
        clock = RequestClock.capture(now)
        try:
            removed = self.drops.delete_for_day(clock.today)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to reset today's counter")
            raise StoreUnavailable() from exc
        logger.warning("Deleted %d drops for %s", removed, clock.today.isoformat())
        return removed
