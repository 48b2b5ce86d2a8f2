"""Password hashing and the signed session-id cookie token."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

ALGORITHM = "HS256"
AUDIENCE = "sessionauth-browser"
ISSUER = "sessionauth"
SESSION_TOKEN_TYPE = "session"

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72
DEFAULT_ROUNDS = 10


def _password_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash for ``plain`` using ``rounds`` as the cost factor."""

    return bcrypt.hashpw(_password_bytes(plain), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class SessionTokenPayload(BaseModel):
    sid: str
    exp: datetime
    iat: datetime
    typ: str
    aud: str
    iss: str


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def encode_session_token(session_id: str, secret: str, max_age: int) -> str:
    """Sign ``session_id`` into the value stored in the session cookie."""

    now = _now()
    payload: dict[str, Any] = {
        "sid": session_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=max_age)).timestamp()),
        "typ": SESSION_TOKEN_TYPE,
        "aud": AUDIENCE,
        "iss": ISSUER,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_session_token(token: str, secret: str) -> str:
    """Return the session id carried by ``token``.

    Raises ``ValueError`` when the token is tampered, expired or malformed.
    """

    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            issuer=ISSUER,
        )
    except JWTError as exc:
        raise ValueError("Invalid session token") from exc
    try:
        payload = SessionTokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid session token payload") from exc
    if payload.typ != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid session token type")
    return payload.sid
