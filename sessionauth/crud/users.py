"""CRUD helpers for the credential store."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.security import DEFAULT_ROUNDS, hash_password
from ..models.user import User


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    stmt = select(User).where(User.username == username)
    return db.execute(stmt).scalars().first()


def create_user(db: Session, username: str, password: str, rounds: int = DEFAULT_ROUNDS) -> User:
    # No duplicate pre-check: the unique index is the single source of truth,
    # and an IntegrityError propagates to the caller.
    user = User(username=username, password_hash=hash_password(password, rounds=rounds))
    db.add(user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user
