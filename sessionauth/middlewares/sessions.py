"""Server-side session middleware.

The browser only ever holds a signed session id. Attributes (queued messages,
the page counter, the logged-in user id) are loaded from ``SessionStore``
before the handler runs and written back after it. Store failures are logged
and the request carries on without them.
"""

from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import HTTPConnection, Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..core.errors import SessionStoreError
from ..core.security import decode_session_token, encode_session_token
from ..services.session_store import SessionStore

logger = logging.getLogger("sessionauth.sessions")

DESTROY_FLAG = "sessionauth.session_destroy"
REGENERATE_FLAG = "sessionauth.session_regenerate"


def destroy_session(conn: HTTPConnection) -> None:
    """Drop every attribute now and delete the stored session after the response."""

    conn.session.clear()
    conn.scope[DESTROY_FLAG] = True


def regenerate_session(conn: HTTPConnection) -> None:
    """Keep the attributes but store them under a fresh id after the response."""

    conn.scope[REGENERATE_FLAG] = True


class ServerSessionMiddleware(BaseHTTPMiddleware):
    """Hydrate ``request.session`` from the store and persist it afterwards.

    The cookie only carries a signed session id; the attributes themselves
    live in ``SessionStore``. A session that was never written to is not
    stored and gets no cookie.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        store: SessionStore,
        secret: str,
        cookie_name: str,
        max_age: int,
        https_only: bool = False,
        same_site: str = "lax",
    ) -> None:
        super().__init__(app)
        self.store = store
        self.secret = secret
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.https_only = https_only
        self.same_site = same_site

    def _session_id(self, request: Request) -> str | None:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        try:
            return decode_session_token(token, self.secret)
        except ValueError:
            logger.info("session.cookie_rejected")
            return None

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session_id = self._session_id(request)
        data = None
        if session_id:
            try:
                data = await run_in_threadpool(self.store.load, session_id)
            except SessionStoreError:
                logger.warning("session.load_failed", exc_info=True)
            if data is None:
                session_id = None
        stored = data is not None
        request.scope["session"] = dict(data or {})

        response = await call_next(request)

        if request.scope.get(DESTROY_FLAG):
            if session_id:
                try:
                    await run_in_threadpool(self.store.destroy, session_id)
                except SessionStoreError:
                    logger.warning("session.destroy_failed", exc_info=True)
            response.delete_cookie(
                self.cookie_name,
                path="/",
                secure=self.https_only,
                httponly=True,
                samesite=self.same_site,
            )
            return response

        session = request.scope["session"]
        if not session and not stored:
            return response

        if request.scope.get(REGENERATE_FLAG) and session_id:
            # Retire the pre-login id so a planted cookie never becomes authenticated.
            old_id, session_id = session_id, None
            try:
                await run_in_threadpool(self.store.destroy, old_id)
            except SessionStoreError:
                logger.warning("session.destroy_failed", exc_info=True)

        if session_id is None:
            session_id = self.store.new_id()
        try:
            await run_in_threadpool(self.store.save, session_id, session)
        except SessionStoreError:
            logger.warning("session.save_failed", exc_info=True)
            return response

        response.set_cookie(
            self.cookie_name,
            encode_session_token(session_id, self.secret, self.max_age),
            max_age=self.max_age,
            path="/",
            secure=self.https_only,
            httponly=True,
            samesite=self.same_site,
        )
        return response
