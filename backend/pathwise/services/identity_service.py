"""Map the external session identity to an internal user record.

Precedence, each step only when the previous one has nothing to go on:

1. email: find-or-create by email, refreshing the display name
2. display name only: reuse the most recently created user with that exact
   name, else create one (names are not unique)
3. anonymous: the single guest user, keyed by a reserved email

Resolution runs on every call that mutates or checks ownership; nothing is
cached.
"""

from enum import Enum
from typing import NamedTuple

from sqlalchemy import insert as sa_insert
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pathwise.core.config import Settings, get_settings
from pathwise.core.database import utcnow
from pathwise.core.logging import get_logger
from pathwise.models.user import User
from pathwise.schemas.identity import SessionIdentity

logger = get_logger(__name__)


class LookupKind(str, Enum):
    EMAIL = "email"
    NAME = "name"
    GUEST = "guest"


class UserLookup(NamedTuple):
    kind: LookupKind
    key: str


def plan_user_lookup(identity: SessionIdentity, guest_email: str) -> UserLookup:
    """Decide how a session identity is matched to a user record."""
    if identity.email:
        return UserLookup(LookupKind.EMAIL, identity.email)
    if identity.name:
        return UserLookup(LookupKind.NAME, identity.name)
    return UserLookup(LookupKind.GUEST, guest_email)


async def _find_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _insert_email_user(db: AsyncSession, email: str, name: str | None) -> None:
    """Insert a user unless one with this email already exists.

    Concurrent requests for the same email must not fail, so the insert
    ignores unique conflicts where the dialect supports it and falls back to
    a savepoint elsewhere.
    """
    now = utcnow()
    values = {"email": email, "name": name, "created_at": now, "updated_at": now}
    dialect = db.get_bind().dialect.name

    if dialect == "sqlite":
        stmt = sqlite.insert(User).values(**values).on_conflict_do_nothing(index_elements=["email"])
        await db.execute(stmt)
    elif dialect == "postgresql":
        stmt = postgresql.insert(User).values(**values).on_conflict_do_nothing(
            index_elements=["email"]
        )
        await db.execute(stmt)
    else:
        try:
            async with db.begin_nested():
                await db.execute(sa_insert(User).values(**values))
        except IntegrityError:
            logger.info("User inserted concurrently", email=email)


async def upsert_user_by_email(
    db: AsyncSession,
    email: str,
    *,
    name: str | None = None,
    refresh_name: bool = True,
) -> User:
    """Find-or-create a user by email."""
    user = await _find_by_email(db, email)
    if user is None:
        await _insert_email_user(db, email, name)
        user = await _find_by_email(db, email)
        if user is None:
            raise RuntimeError(f"User {email} missing after insert")
        logger.info("User created", user_id=user.id, email=email)
    elif refresh_name and name and user.name != name:
        user.name = name
        await db.flush()
    return user


async def find_or_create_user_by_name(db: AsyncSession, name: str) -> User:
    """Reuse the most recent user with this name, else create one."""
    result = await db.execute(
        select(User)
        .where(User.name == name)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(1)
    )
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = User(name=name)
    db.add(user)
    await db.flush()
    logger.info("User created from display name", user_id=user.id, name=name)
    return user


async def ensure_guest_user(db: AsyncSession, settings: Settings | None = None) -> User:
    settings = settings or get_settings()
    return await upsert_user_by_email(
        db, settings.GUEST_EMAIL, name=settings.GUEST_NAME, refresh_name=False
    )


async def resolve_user(
    db: AsyncSession,
    identity: SessionIdentity,
    settings: Settings | None = None,
) -> User:
    settings = settings or get_settings()
    lookup = plan_user_lookup(identity, settings.GUEST_EMAIL)

    if lookup.kind is LookupKind.EMAIL:
        return await upsert_user_by_email(db, lookup.key, name=identity.name)
    if lookup.kind is LookupKind.NAME:
        return await find_or_create_user_by_name(db, lookup.key)
    return await ensure_guest_user(db, settings)


async def resolve_user_id(
    db: AsyncSession,
    identity: SessionIdentity,
    settings: Settings | None = None,
) -> int:
    """Resolve the caller's internal user id."""
    user = await resolve_user(db, identity, settings)
    return user.id
