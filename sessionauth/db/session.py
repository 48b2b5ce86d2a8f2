"""SQLAlchemy engine and session helpers.

Nothing here runs at import time: ``create_app`` builds the engine and the
session factory once per process and keeps them on ``app.state`` so request
handlers, the session store and the authentication backend all share the same
pool.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# ``Base`` is the parent class for every SQLAlchemy model defined in sessionauth/models.
Base = declarative_base()


def build_engine(url: str) -> Engine:
    """Create the engine for ``url``, preparing SQLite paths on the way."""

    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    # Worker threads share SQLite connections, so drop the same-thread check.
    connect_args = {"check_same_thread": False}
    database = parsed.database or ""
    if database in ("", ":memory:"):
        # One shared connection, otherwise every checkout sees an empty database.
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args)


def build_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def get_db(request: Request):
    """FastAPI dependency that yields a session and guarantees cleanup."""

    db: Session = request.app.state.sessionmaker()
    try:
        yield db
    finally:
        db.close()
