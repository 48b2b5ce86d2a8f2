"""Request correlation ids and the per-request completion log line."""

from __future__ import annotations

import logging
import time
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_ctx_var: ContextVar[str | None] = ContextVar("user_id", default=None)
logger = logging.getLogger("sessionauth.request")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Give every request a correlation id and log its completion."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid4())
        token = request_id_ctx_var.set(request_id)
        request.state.request_id = request_id
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[self.header_name] = request_id
            response.headers.setdefault("X-Response-Time", f"{duration_ms:.2f}ms")
            extra = {
                "extra_data": {
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                }
            }
            # Inner stages run in their own task, so read the identity from the
            # shared scope rather than from the context variable.
            user = request.scope.get("user")
            if user is not None and getattr(user, "is_authenticated", False):
                extra["extra_data"]["user_id"] = user.identity
            logger.info("request.completed", extra=extra)
            return response
        finally:
            request_id_ctx_var.reset(token)
