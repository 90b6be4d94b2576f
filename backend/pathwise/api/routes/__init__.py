"""API routes."""

from pathwise.api.routes import chats, content, practice, roadmaps

__all__ = ["chats", "content", "practice", "roadmaps"]
