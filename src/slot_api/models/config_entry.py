# src/slot_api/models/config_entry.py
"""Runtime feature flags and limits."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from slot_api.db.session import Base


class ConfigEntry(Base):
    """Key/value setting; values are always stored as text."""

    __tablename__ = "config"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
