"""Importing this package registers every model with ``Base.metadata``."""

from .session import SessionRecord
from .user import User

__all__ = ["SessionRecord", "User"]
