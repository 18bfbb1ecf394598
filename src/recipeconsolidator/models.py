"""SQLAlchemy database models."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recipeconsolidator.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(Base):
    """One persisted slice of application state, stored as a JSON string."""

    __tablename__ = "key_value_entries"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
