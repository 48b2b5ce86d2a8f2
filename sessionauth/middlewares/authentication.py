"""Starlette authentication backend that rebuilds the user from the session."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker
from starlette.authentication import AuthCredentials, AuthenticationBackend, BaseUser
from starlette.concurrency import run_in_threadpool
from starlette.requests import HTTPConnection

from ..crud.users import get_user
from .request_id import user_ctx_var

logger = logging.getLogger("sessionauth.auth")

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class SessionUser(BaseUser):
    """The identity attached to ``request.user`` for a logged-in session."""

    id: int
    username: str

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.username

    @property
    def identity(self) -> str:
        return str(self.id)


class SessionAuthBackend(AuthenticationBackend):
    """Rebuild the identity from the user id stored in the session.

    Returning ``None`` makes Starlette attach an ``UnauthenticatedUser``; that
    is also what happens when the referenced user no longer exists.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def _load(self, user_id: int) -> SessionUser | None:
        with self._session_factory() as db:
            user = get_user(db, user_id)
            if user is None:
                return None
            return SessionUser(id=user.id, username=user.username)

    async def authenticate(self, conn: HTTPConnection):
        raw_id = conn.session.get(SESSION_USER_KEY)
        if raw_id is None:
            return None
        try:
            user_id = int(raw_id)
        except (TypeError, ValueError):
            logger.warning("auth.bad_session_user", extra={"extra_data": {"value": repr(raw_id)}})
            return None
        user = await run_in_threadpool(self._load, user_id)
        if user is None:
            logger.info("auth.user_missing", extra={"extra_data": {"user_id": user_id}})
            return None
        user_ctx_var.set(user.identity)
        return AuthCredentials(["authenticated"]), user
