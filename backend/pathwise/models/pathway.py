"""Pathway model - the saved form of a chat's roadmap."""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from pathwise.core.database import Base, utcnow


class PathwayStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class Pathway(Base):
    __tablename__ = "pathways"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    # One pathway per chat
    chat_id: Mapped[str] = mapped_column(ForeignKey("chats.id"), unique=True)

    title: Mapped[str | None] = mapped_column(String)
    status: Mapped[str] = mapped_column(String, default=PathwayStatus.DRAFT.value)
    plan_spec: Mapped[list[dict[str, object]]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
