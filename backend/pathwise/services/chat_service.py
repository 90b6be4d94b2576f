"""Chat transcript persistence.

Every operation resolves the caller and, apart from create/list, checks that
the chat belongs to them. A missing chat, a deleted chat and someone else's
chat are indistinguishable to the caller: all return ``ActionError``.

Note: These functions flush but never commit; the caller owns the
transaction (e.g., via get_db_session context manager).
"""

import time
import uuid
from enum import Enum
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pathwise.core.database import utcnow
from pathwise.core.exceptions import ChatConflictError, ChatNotFoundError
from pathwise.core.logging import get_logger
from pathwise.models.chat import Chat
from pathwise.schemas.chat import (
    ChatCreated,
    ChatList,
    ChatMessage,
    ChatMeta,
    ChatSnapshot,
    ChatSnapshotResult,
    ChatSummary,
)
from pathwise.schemas.identity import SessionIdentity
from pathwise.schemas.results import ActionError, ActionOk
from pathwise.schemas.roadmap import Roadmap
from pathwise.services.identity_service import resolve_user_id

logger = get_logger(__name__)

TITLE_FROM_MESSAGE_CHARS = 60
APPEND_TURN_ATTEMPTS = 3


class _Unset(Enum):
    UNSET = "UNSET"


UNSET = _Unset.UNSET
"""Marks "leave the stored roadmap alone" in ``append_turn``."""


def now_ms() -> int:
    return int(time.time() * 1000)


def not_found(e: ChatNotFoundError) -> ActionError:
    logger.info("Chat not found or not owned", chat_id=e.chat_id)
    return ActionError(error=e.message)


async def get_owned_chat(
    db: AsyncSession,
    chat_id: str,
    user_id: int,
    *,
    for_update: bool = False,
) -> Chat:
    """Load a live chat owned by ``user_id``.

    Always reloads the row, so a retried read sees other transactions' commits.
    ``for_update`` locks the row where the dialect supports it (not SQLite).

    Raises:
        ChatNotFoundError: If the chat is missing, deleted, or not owned
    """
    stmt = select(Chat).where(Chat.id == chat_id).execution_options(populate_existing=True)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    chat = result.scalar_one_or_none()
    if chat is None or chat.user_id != user_id or chat.deleted_at is not None:
        raise ChatNotFoundError(chat_id)
    return chat


# ============================================================================
# Create / list
# ============================================================================


async def create_chat(
    db: AsyncSession,
    identity: SessionIdentity,
    *,
    title: str | None = None,
    initial_messages: list[ChatMessage] | None = None,
    initial_roadmap: Roadmap | None = None,
) -> ChatCreated:
    """Create a chat for the caller, optionally seeded with a transcript."""
    user_id = await resolve_user_id(db, identity)

    meta = ChatMeta(messages=initial_messages or [], roadmap=initial_roadmap)
    meta.record_event("createChat", now_ms())

    chat = Chat(id=str(uuid.uuid4()), user_id=user_id, title=title, meta=meta.dump())
    db.add(chat)
    await db.flush()

    logger.info("Chat created", chat_id=chat.id, user_id=user_id)
    return ChatCreated(chat_id=chat.id)


async def list_chats(db: AsyncSession, identity: SessionIdentity) -> ChatList:
    """List the caller's chats, most recently updated first."""
    user_id = await resolve_user_id(db, identity)
    result = await db.execute(
        select(Chat)
        .where(Chat.user_id == user_id, Chat.deleted_at.is_(None))
        .order_by(Chat.updated_at.desc())
    )
    items = [ChatSummary.model_validate(chat) for chat in result.scalars().all()]
    return ChatList(items=items)


# ============================================================================
# Load / save
# ============================================================================


async def get_chat_snapshot(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
) -> ChatSnapshotResult | ActionError:
    try:
        user_id = await resolve_user_id(db, identity)
        chat = await get_owned_chat(db, chat_id, user_id)
    except ChatNotFoundError as e:
        return not_found(e)

    meta = ChatMeta.load(chat.meta)
    return ChatSnapshotResult(
        chat=ChatSnapshot(
            id=chat.id,
            title=chat.title,
            messages=meta.messages,
            roadmap=meta.roadmap,
            started_at=chat.started_at,
            updated_at=chat.updated_at,
        )
    )


async def save_chat_snapshot(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
    *,
    messages: list[ChatMessage],
    roadmap: Roadmap | None = None,
    title_fallback: str | None = None,
) -> ActionOk | ActionError:
    """Overwrite the stored messages and roadmap.

    ``ui`` and ``events`` are kept. The title is only set from
    ``title_fallback`` when the chat has none yet. Two concurrent snapshot
    saves race and the later commit wins.
    """
    try:
        user_id = await resolve_user_id(db, identity)
        chat = await get_owned_chat(db, chat_id, user_id, for_update=True)
    except ChatNotFoundError as e:
        return not_found(e)

    meta = ChatMeta.load(chat.meta)
    meta.messages = list(messages)
    meta.replace_roadmap(roadmap)
    chat.meta = meta.dump()
    chat.revision += 1
    if title_fallback and not chat.title:
        chat.title = title_fallback
    await db.flush()

    logger.info("Chat snapshot saved", chat_id=chat_id, messages=len(messages))
    return ActionOk()


async def append_turn(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
    *,
    user_message: ChatMessage,
    ai_message: ChatMessage,
    roadmap: Roadmap | None | _Unset = UNSET,
    ui_patch: dict[str, Any] | None = None,
) -> ActionOk | ActionError:
    """Append one user/ai exchange to the transcript.

    The merged meta is written with a compare-and-set on ``Chat.revision``:
    if another transaction changed the chat since it was read, nothing is
    written and the read-merge-write is repeated on the fresh row. Concurrent
    appends therefore never drop each other's messages, on SQLite (no row
    locks) as well as on PostgreSQL (``FOR UPDATE``). Message ids are stored
    as given; identical turns append twice.

    Raises:
        ChatConflictError: If the chat changed on every attempt
    """
    user_id = await resolve_user_id(db, identity)

    for attempt in range(1, APPEND_TURN_ATTEMPTS + 1):
        try:
            chat = await get_owned_chat(db, chat_id, user_id, for_update=True)
        except ChatNotFoundError as e:
            return not_found(e)

        meta = ChatMeta.load(chat.meta)
        meta.append_messages(user_message, ai_message)
        if roadmap is not UNSET:
            meta.replace_roadmap(roadmap)
        if ui_patch:
            meta.merge_ui(ui_patch)
        meta.record_event("appendTurn", now_ms(), {"len": len(user_message.content)})

        values: dict[str, Any] = {
            "meta": meta.dump(),
            "revision": chat.revision + 1,
            "updated_at": utcnow(),
        }
        if not chat.title:
            first_user = next((m for m in meta.messages if m.role == "user"), None)
            if first_user is not None:
                values["title"] = first_user.content[:TITLE_FROM_MESSAGE_CHARS]

        result = await db.execute(
            update(Chat)
            .where(Chat.id == chat_id, Chat.revision == chat.revision)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            await db.refresh(chat)
            logger.info("Turn appended", chat_id=chat_id, messages=len(meta.messages))
            return ActionOk()

        logger.info("Chat changed during append, retrying", chat_id=chat_id, attempt=attempt)

    raise ChatConflictError(chat_id)


# ============================================================================
# Rename / delete
# ============================================================================


async def rename_chat(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
    title: str,
) -> ActionOk | ActionError:
    try:
        user_id = await resolve_user_id(db, identity)
        chat = await get_owned_chat(db, chat_id, user_id)
    except ChatNotFoundError as e:
        return not_found(e)

    chat.title = title
    await db.flush()
    return ActionOk()


async def delete_chat(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
) -> ActionOk | ActionError:
    """Soft-delete a chat; the row and its pathway stay in the database."""
    try:
        user_id = await resolve_user_id(db, identity)
        chat = await get_owned_chat(db, chat_id, user_id)
    except ChatNotFoundError as e:
        return not_found(e)

    chat.deleted_at = utcnow()
    await db.flush()
    logger.info("Chat deleted", chat_id=chat_id)
    return ActionOk()
