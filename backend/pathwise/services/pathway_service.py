"""Pathway persistence: one saved roadmap per chat."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pathwise.core.exceptions import ChatNotFoundError
from pathwise.core.logging import get_logger
from pathwise.models.pathway import Pathway, PathwayStatus
from pathwise.schemas.identity import SessionIdentity
from pathwise.schemas.pathway import PathwayResponse, PathwayResult, PathwaySaved
from pathwise.schemas.results import ActionError
from pathwise.schemas.roadmap import Roadmap, roadmap_to_json
from pathwise.services.chat_service import get_owned_chat, not_found
from pathwise.services.identity_service import resolve_user_id

logger = get_logger(__name__)


async def get_pathway_by_chat(db: AsyncSession, chat_id: str) -> Pathway | None:
    result = await db.execute(select(Pathway).where(Pathway.chat_id == chat_id))
    return result.scalar_one_or_none()


async def save_plan_as_pathway(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
    *,
    plan: Roadmap,
    title: str | None = None,
    status: PathwayStatus | None = None,
) -> PathwaySaved | ActionError:
    """Create or update the pathway for a chat.

    An existing pathway is updated in place; ``title`` and ``status`` are only
    overwritten when given. A new pathway defaults to DRAFT.

    Note: This function flushes; the caller commits.
    """
    try:
        user_id = await resolve_user_id(db, identity)
        await get_owned_chat(db, chat_id, user_id)
    except ChatNotFoundError as e:
        return not_found(e)

    plan_spec = roadmap_to_json(plan)
    pathway = await get_pathway_by_chat(db, chat_id)

    if pathway is not None:
        if title is not None:
            pathway.title = title
        if status is not None:
            pathway.status = PathwayStatus(status).value
        pathway.plan_spec = plan_spec
        await db.flush()
        logger.info("Pathway updated", pathway_id=pathway.id, chat_id=chat_id)
        return PathwaySaved(pathway_id=pathway.id, created=False)

    pathway = Pathway(
        user_id=user_id,
        chat_id=chat_id,
        title=title,
        status=PathwayStatus(status or PathwayStatus.DRAFT).value,
        plan_spec=plan_spec,
    )
    db.add(pathway)
    await db.flush()
    logger.info("Pathway created", pathway_id=pathway.id, chat_id=chat_id, topics=len(plan_spec))
    return PathwaySaved(pathway_id=pathway.id, created=True)


async def get_chat_pathway(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
) -> PathwayResult | ActionError:
    """Get the pathway saved for a chat, if any."""
    try:
        user_id = await resolve_user_id(db, identity)
        await get_owned_chat(db, chat_id, user_id)
    except ChatNotFoundError as e:
        return not_found(e)

    pathway = await get_pathway_by_chat(db, chat_id)
    return PathwayResult(
        pathway=PathwayResponse.model_validate(pathway) if pathway is not None else None
    )
