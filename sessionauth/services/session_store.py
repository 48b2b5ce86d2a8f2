"""Server-side session store backed by the ``sessions`` table.

The session middleware treats this class as an opaque key-value collaborator:
it loads a mapping by id, saves it back with a fresh expiry, and destroys it on
log-out. Every driver failure is re-raised as ``SessionStoreError`` so callers
can handle store trouble separately from credential-store trouble.
"""

from __future__ import annotations

import json
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..core.errors import SessionStoreError
from ..models.session import SessionRecord

logger = logging.getLogger("sessionauth.sessions")


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


class SessionStore:
    def __init__(self, session_factory: sessionmaker, max_age: int) -> None:
        self._session_factory = session_factory
        self.max_age = max_age

    @staticmethod
    def new_id() -> str:
        return secrets.token_urlsafe(32)

    def load(self, session_id: str) -> dict[str, Any] | None:
        """Return the stored attributes, or ``None`` when missing or expired."""

        try:
            with self._session_factory() as db:
                record = db.get(SessionRecord, session_id)
                if record is None:
                    return None
                if record.expires_at <= _utcnow():
                    db.delete(record)
                    db.commit()
                    logger.info("session.expired", extra={"extra_data": {"session_id": session_id[:8]}})
                    return None
                data = json.loads(record.data or "{}")
        except SQLAlchemyError as exc:
            raise SessionStoreError(f"could not load session: {exc}") from exc
        except ValueError:
            # Undecodable payload: treat the session as gone.
            logger.warning("session.corrupt", extra={"extra_data": {"session_id": session_id[:8]}})
            return None
        return data if isinstance(data, dict) else None

    def save(self, session_id: str, data: dict[str, Any]) -> None:
        record = SessionRecord(
            id=session_id,
            data=json.dumps(data, separators=(",", ":")),
            expires_at=_utcnow() + timedelta(seconds=self.max_age),
        )
        try:
            with self._session_factory() as db:
                db.merge(record)
                db.commit()
        except SQLAlchemyError as exc:
            raise SessionStoreError(f"could not save session: {exc}") from exc

    def destroy(self, session_id: str) -> None:
        try:
            with self._session_factory() as db:
                db.execute(delete(SessionRecord).where(SessionRecord.id == session_id))
                db.commit()
        except SQLAlchemyError as exc:
            raise SessionStoreError(f"could not destroy session: {exc}") from exc

    def purge_expired(self) -> int:
        """Delete every expired session and return how many were removed."""

        try:
            with self._session_factory() as db:
                result = db.execute(delete(SessionRecord).where(SessionRecord.expires_at <= _utcnow()))
                db.commit()
        except SQLAlchemyError as exc:
            raise SessionStoreError(f"could not purge sessions: {exc}") from exc
        removed = result.rowcount or 0
        if removed:
            logger.info("session.purged", extra={"extra_data": {"removed": removed}})
        return removed
