"""Data access helpers for the drop ledger and streak table."""
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from slot_api.models.drop import Drop
from slot_api.models.streak import Streak

__all__ = ["DropRepository", "StreakRepository"]


class DropRepository:
    """Thin wrapper around database access for drop rows."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def count_for_day(self, day: date, device_hash: str | None = None) -> int:
        """Return the number of drops on `day`, optionally for one device."""
        stmt = select(func.count(Drop.id)).where(Drop.day == day)
        if device_hash is not None:
            stmt = stmt.where(Drop.device_hash == device_hash)
        return int(self.session.scalar(stmt) or 0)

    def count_since(self, day: date) -> int:
        """Return the number of drops on or after `day`."""
        stmt = select(func.count(Drop.id)).where(Drop.day >= day)
        return int(self.session.scalar(stmt) or 0)

    def count_all(self) -> int:
        """Return the all-time drop count."""
        return int(self.session.scalar(select(func.count(Drop.id))) or 0)

    def count_devices_for_day(self, day: date) -> int:
        """Return the number of distinct devices that dropped on `day`."""
        stmt = select(func.count(func.distinct(Drop.device_hash))).where(Drop.day == day)
        return int(self.session.scalar(stmt) or 0)

    def timestamps_for_day(self, day: date) -> list[datetime]:
        """Return `created_at` of every drop on `day`."""
        return list(self.session.scalars(select(Drop.created_at).where(Drop.day == day)))

    def mode_counts_for_day(self, day: date) -> list[tuple[str, int]]:
        """Return `(mode, count)` pairs for `day`, ordered by mode."""
        rows = self.session.execute(
            select(Drop.mode, func.count(Drop.id))
            .where(Drop.day == day)
            .group_by(Drop.mode)
            .order_by(Drop.mode)
        ).all()
        return [(mode, int(count)) for (mode, count) in rows]

    def list_recent(self, limit: int) -> list[Drop]:
        """Return the newest drops, most recent first."""
        result = self.session.scalars(
            select(Drop).order_by(Drop.created_at.desc(), Drop.id.desc()).limit(limit)
        )
        return list(result)

    def create(
        self,
        *,
        device_hash: str,
        mode: str,
        char_count: int,
        created_at: datetime,
        day: date,
    ) -> Drop:
        """Insert a new drop and return the flushed ORM instance.

        The caller owns the transaction; nothing is committed here.
        """
        drop = Drop(
            device_hash=device_hash,
            mode=mode,
            char_count=char_count,
            created_at=created_at,
            day=day,
        )
        self.session.add(drop)
        self.session.flush()
        return drop

    def delete_for_day(self, day: date) -> int:
        """Delete every drop on `day` and return how many were removed."""
        result = self.session.execute(delete(Drop).where(Drop.day == day))
        return int(result.rowcount or 0)


class StreakRepository:
    """Thin wrapper around database access for streak rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, device_hash: str) -> Streak | None:
        """Return the streak row for a device."""
        return self.session.get(Streak, device_hash)

    def create(self, *, device_hash: str, current: int, longest: int, last_drop_date: date) -> Streak:
        streak = Streak(
            device_hash=device_hash,
            current_streak=current,
            longest_streak=longest,
            last_drop_date=last_drop_date,
        )
        self.session.add(streak)
        self.session.flush()
        return streak

    def reset_current(self) -> int:
        """Zero `current_streak` on every row; longest and last date are kept."""
        result = self.session.execute(update(Streak).values(current_streak=0))
        return int(result.rowcount or 0)
