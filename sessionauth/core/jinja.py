"""Template environment and the small rendering helper the routers share."""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .config import AppSettings


def get_templates(settings: AppSettings) -> Jinja2Templates:
    """Create a ``Jinja2Templates`` instance for the configured directory."""

    templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
    templates.env.globals["app_name"] = settings.APP_NAME
    return templates


def current_user(request: Request):
    user = request.scope.get("user")
    if user is not None and getattr(user, "is_authenticated", False):
        return user
    return None


def render(request: Request, name: str, context: dict[str, Any] | None = None, status_code: int = 200):
    # Every view sees the logged-in user (or None) as ``current_user``.
    templates: Jinja2Templates = request.app.state.templates
    ctx = {"current_user": current_user(request)}
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
