"""Application factory and top-level wiring for sessionauth.

This module brings together configuration, the database, the session store,
templates, the middleware pipeline, routers and error handling. Every
long-lived handle is built here and kept on ``app.state``; nothing is opened at
import time, so tests can build as many isolated apps as they like.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool

from .core.config import AppSettings, get_settings
from .core.errors import SessionStoreError, register_exception_handlers
from .core.jinja import get_templates
from .db.migrate import run_migrations
from .db.session import Base, build_engine, build_sessionmaker
from .middlewares import build_pipeline
from .services.session_store import SessionStore

# Importing the models registers them with the metadata so create_all sees them.
from . import models as _models  # noqa: F401

logger = logging.getLogger("sessionauth")


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or get_settings()
    if settings.uses_insecure_secret:
        logger.warning("config.insecure_session_secret")

    engine = build_engine(settings.DATABASE_URL)
    session_factory = build_sessionmaker(engine)
    store = SessionStore(session_factory, max_age=settings.SESSION_MAX_AGE)

    # create_all covers brand-new databases, run_migrations upgrades old ones.
    Base.metadata.create_all(bind=engine)
    run_migrations(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await run_in_threadpool(store.purge_expired)
        except SessionStoreError:
            logger.warning("session.purge_failed", exc_info=True)
        try:
            yield
        finally:
            engine.dispose()
            logger.info("app.shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
        middleware=build_pipeline(settings, store, session_factory),
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = session_factory
    app.state.session_store = store
    app.state.templates = get_templates(settings)

    from .routers import auth_ui, ui

    app.include_router(ui.router)
    app.include_router(auth_ui.router)

    register_exception_handlers(app)
    return app


__all__ = ["create_app"]
