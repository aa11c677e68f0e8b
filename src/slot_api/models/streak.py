# src/slot_api/models/streak.py
"""Per-device streak bookkeeping."""

from datetime import date

from sqlalchemy import CheckConstraint, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from slot_api.db.session import Base


class Streak(Base):
    """Consecutive-day participation for one device."""

    __tablename__ = "streaks"
    __table_args__ = (
        CheckConstraint("current_streak >= 0", name="ck_streaks_current"),
        CheckConstraint("longest_streak >= current_streak", name="ck_streaks_longest"),
    )

    device_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Null until the first drop; afterwards only moves forward.
    last_drop_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Streak device={self.device_hash} current={self.current_streak} "
            f"longest={self.longest_streak} last={self.last_drop_date}>"
        )
