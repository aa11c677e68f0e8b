# src/slot_api/models/drop.py
"""The drop ledger: one row per recorded drop."""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from slot_api.db.session import Base
from slot_api.db.time import utcnow

DROP_MODES = ("type", "speak", "draw")


class Drop(Base):
    """Immutable record of a single drop.

    `day` is the calendar date of `created_at` in the service time zone and
    is what every daily count filters on.
    """

    __tablename__ = "drops"
    __table_args__ = (
        CheckConstraint("mode IN ('type', 'speak', 'draw')", name="ck_drops_mode"),
        CheckConstraint("char_count >= 0", name="ck_drops_char_count"),
        Index("ix_drops_created_at", "created_at"),
        Index("ix_drops_day", "day"),
        Index("ix_drops_device_day", "device_hash", "day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    mode: Mapped[str] = mapped_column(String(16), nullable=False, default="type")
    char_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<Drop id={self.id} device={self.device_hash} mode={self.mode} day={self.day}>"
