"""User model."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from pathwise.core.database import Base, utcnow


class User(Base):
    """Internal user record mapped from the identity provider's session."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Unique when present; name-only and guest users are also stored here
    email: Mapped[str | None] = mapped_column(String, unique=True)
    name: Mapped[str | None] = mapped_column(String, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
