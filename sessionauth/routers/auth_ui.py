"""Sign-up, log-in and log-out routes for browser clients."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from ..core.jinja import render
from ..crud.users import create_user
from ..db.session import get_db
from ..schemas.auth import Credentials
from ..services.auth import authenticate, login, logout
from ..services.messages import push_message

router = APIRouter(tags=["auth"])


def _home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)


@router.get("/sign-up", response_class=HTMLResponse)
def sign_up_page(request: Request):
    return render(request, "sign-up-form.html")


@router.post("/sign-up")
def sign_up_submit(
    request: Request,
    credentials: Annotated[Credentials, Form()],
    db: Session = Depends(get_db),
):
    create_user(
        db,
        credentials.username,
        credentials.password,
        rounds=request.app.state.settings.BCRYPT_ROUNDS,
    )
    return _home()


@router.post("/log-in")
def log_in_submit(
    request: Request,
    credentials: Annotated[Credentials, Form()],
    db: Session = Depends(get_db),
):
    result = authenticate(db, credentials.username, credentials.password)
    if not result.ok:
        push_message(request, result.reason)
        return _home()
    login(request, result.user)
    return _home()


@router.get("/log-out")
def log_out(request: Request):
    logout(request)
    return _home()
