"""Local username/password strategy and the session login/logout helpers.

``authenticate`` never raises for bad credentials; it returns an ``AuthResult``
that either carries the matched user or the user-facing failure reason.
Database errors are not caught here and propagate to the persistence error
handler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from ..core.security import verify_password
from ..crud.users import get_user_by_username
from ..middlewares.authentication import SESSION_USER_KEY
from ..middlewares.sessions import destroy_session, regenerate_session
from ..models.user import User

logger = logging.getLogger("sessionauth.auth")

INCORRECT_USERNAME = "Incorrect username"
INCORRECT_PASSWORD = "Incorrect password"


@dataclass(frozen=True)
class AuthResult:
    user: User | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None


def authenticate(db: Session, username: str, password: str) -> AuthResult:
    user = get_user_by_username(db, username)
    if user is None:
        logger.info("auth.failed", extra={"extra_data": {"reason": "unknown_username"}})
        return AuthResult(reason=INCORRECT_USERNAME)
    if not verify_password(password, user.password_hash):
        logger.info("auth.failed", extra={"extra_data": {"reason": "bad_password", "user_id": user.id}})
        return AuthResult(reason=INCORRECT_PASSWORD)
    return AuthResult(user=user)


def login(conn: HTTPConnection, user: User) -> None:
    # Only the id goes into the session; the identity is rebuilt per request.
    conn.session[SESSION_USER_KEY] = user.id
    regenerate_session(conn)
    logger.info("auth.login", extra={"extra_data": {"user_id": user.id}})


def logout(conn: HTTPConnection) -> None:
    destroy_session(conn)
    logger.info("auth.logout")
