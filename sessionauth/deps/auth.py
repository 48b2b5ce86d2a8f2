"""Dependencies that gate pages on a logged-in user."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..middlewares.authentication import SessionUser
from ..services.messages import push_message

LOGIN_REQUIRED_MESSAGE = "You can't access that page before logon."


def is_logged_in(request: Request) -> bool:
    return bool(getattr(request.user, "is_authenticated", False))


async def require_user(request: Request) -> SessionUser:
    """
    Gate for pages that need a logged-in identity.

    Anonymous visitors get a queued message and a 401, which the HTTP
    exception handler turns into a redirect to the home page.
    """
    if not is_logged_in(request):
        push_message(request, LOGIN_REQUIRED_MESSAGE)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return request.user
