"""SQLAlchemy model backing the server-side session store."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text

from ..db.session import Base


class SessionRecord(Base):
    """One browser session: JSON-encoded attributes plus an absolute expiry (naive UTC)."""

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    data = Column(Text, nullable=False, default="{}")
    expires_at = Column(DateTime, nullable=False, index=True)


__all__ = ["SessionRecord"]
