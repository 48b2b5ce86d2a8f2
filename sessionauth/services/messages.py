"""Session-scoped user messages, shown once on the next home page render."""

from __future__ import annotations

from starlette.requests import HTTPConnection

SESSION_MESSAGES_KEY = "messages"


def push_message(conn: HTTPConnection, message: str) -> None:
    messages = list(conn.session.get(SESSION_MESSAGES_KEY) or [])
    messages.append(message)
    conn.session[SESSION_MESSAGES_KEY] = messages


def pop_messages(conn: HTTPConnection) -> list[str]:
    """Return the queued messages in order and clear the queue."""

    messages = conn.session.pop(SESSION_MESSAGES_KEY, None) or []
    return [str(message) for message in messages]
