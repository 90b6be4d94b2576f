"""Chat model."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pathwise.core.database import Base, utcnow


class Chat(Base):
    """A tutoring conversation.

    All mutable conversation state lives in ``meta`` (see
    ``pathwise.schemas.chat.ChatMeta`` for its shape and merge rules).
    """

    __tablename__ = "chats"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    title: Mapped[str | None] = mapped_column(String)

    meta: Mapped[dict] = mapped_column(JSON, default=dict)
    # Bumped on every write to meta; append_turn writes only if it is unchanged
    revision: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    started_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)
