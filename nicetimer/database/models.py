"""SQLAlchemy ORM models for NiceTimer."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class KeyValue(Base):
    """One entry of the key-value store shared by every front-end.

    Values are opaque text; callers own the encoding (JSON for the
    sequence catalog, a bare id string for the selection pointer).
    """

    __tablename__ = "key_values"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<KeyValue key={self.key} size={len(self.value or '')}>"
