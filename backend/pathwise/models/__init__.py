"""Database models."""

from pathwise.models.chat import Chat
from pathwise.models.pathway import Pathway, PathwayStatus
from pathwise.models.user import User

__all__ = [
    "User",
    "Chat",
    "Pathway",
    "PathwayStatus",
]
