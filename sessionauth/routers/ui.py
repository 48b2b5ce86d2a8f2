"""HTML pages: the home page and the restricted page with its visit counter."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ..core.jinja import render
from ..deps.auth import require_user
from ..middlewares.authentication import SessionUser
from ..services.messages import pop_messages

router = APIRouter(tags=["pages"])

SESSION_PAGE_COUNT_KEY = "page_count"


@router.get("/", response_class=HTMLResponse)
def index_page(request: Request):
    return render(request, "index.html", {"messages": pop_messages(request)})


@router.get("/restricted", response_class=HTMLResponse)
def restricted_page(request: Request, user: SessionUser = Depends(require_user)):
    # Counted per session, so a fresh login starts again at 1.
    page_count = int(request.session.get(SESSION_PAGE_COUNT_KEY) or 0) + 1
    request.session[SESSION_PAGE_COUNT_KEY] = page_count
    return render(request, "restricted.html", {"page_count": page_count})
