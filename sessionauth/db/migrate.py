"""Tiny idempotent migrations for databases created by older builds."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

logger = logging.getLogger("sessionauth.db")

# We only ADD indexes here. Tables themselves come from Base.metadata.create_all.


def _indexes(engine: Engine, table: str) -> list[dict]:
    inspector = inspect(engine)
    if not inspector.has_table(table):
        return []
    return list(inspector.get_indexes(table)) + [
        {"name": uc.get("name"), "column_names": uc.get("column_names", []), "unique": True}
        for uc in inspector.get_unique_constraints(table)
    ]


def _has_index(engine: Engine, table: str, cols: Iterable[str], unique: bool = False) -> bool:
    wanted = list(cols)
    for index in _indexes(engine, table):
        if list(index.get("column_names") or []) != wanted:
            continue
        if unique and not index.get("unique"):
            continue
        return True
    return False


def _create_index_if_not_exists(engine: Engine, table: str, name: str, cols: Iterable[str], unique: bool = False) -> None:
    cols_sql = ", ".join(cols)
    unique_sql = "UNIQUE " if unique else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {name} ON {table} ({cols_sql})"))
    logger.info("migration.index_created", extra={"extra_data": {"table": table, "index": name}})


def run_migrations(engine: Engine) -> None:
    """Bring an existing schema up-to-date with the expectations of the code."""

    inspector = inspect(engine)

    # Early builds stored users without a uniqueness guarantee on username.
    # Creating the index fails if duplicates already exist.
    if inspector.has_table("users") and not _has_index(engine, "users", ["username"], unique=True):
        _create_index_if_not_exists(engine, "users", "ix_users_username_unique", ["username"], unique=True)

    if inspector.has_table("sessions") and not _has_index(engine, "sessions", ["expires_at"]):
        _create_index_if_not_exists(engine, "sessions", "ix_sessions_expires_at", ["expires_at"])
