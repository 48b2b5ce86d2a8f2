"""Request pipeline: correlation ids, server-side sessions and session identity."""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker
from starlette.middleware import Middleware
from starlette.middleware.authentication import AuthenticationMiddleware

from ..core.config import AppSettings
from ..services.session_store import SessionStore
from .authentication import SessionAuthBackend, SessionUser
from .request_id import RequestIdMiddleware, request_id_ctx_var, user_ctx_var
from .sessions import ServerSessionMiddleware, destroy_session, regenerate_session


def build_pipeline(settings: AppSettings, store: SessionStore, session_factory: sessionmaker) -> list[Middleware]:
    """Return the request-processing stages, outermost first.

    1. request id + completion log
    2. session hydrate/persist
    3. identity from the session's user id

    Each stage either calls the next one or returns a response itself.
    """

    return [
        Middleware(RequestIdMiddleware),
        Middleware(
            ServerSessionMiddleware,
            store=store,
            secret=settings.SESSION_SECRET,
            cookie_name=settings.SESSION_COOKIE_NAME,
            max_age=settings.SESSION_MAX_AGE,
            https_only=settings.SESSION_HTTPS_ONLY,
        ),
        Middleware(AuthenticationMiddleware, backend=SessionAuthBackend(session_factory)),
    ]


__all__ = [
    "RequestIdMiddleware",
    "ServerSessionMiddleware",
    "SessionAuthBackend",
    "SessionUser",
    "build_pipeline",
    "destroy_session",
    "regenerate_session",
    "request_id_ctx_var",
    "user_ctx_var",
]
