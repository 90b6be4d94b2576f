"""Tutor exchange: run the tutor graph and persist the result.

One call handles one user message end to end: the tutor graph produces the AI
reply (and possibly a roadmap), the exchange is appended to the transcript,
and a new roadmap is saved as the chat's pathway. Tutor service failures do
not fail the call; the AI message reports the failure instead and is
persisted like any other reply, so the user can simply send again.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from pathwise.agent.graph import get_graph
from pathwise.agent.state import TutorState
from pathwise.clients.tutor_api import TutorApiClient
from pathwise.core.exceptions import ChatNotFoundError
from pathwise.core.logging import get_logger
from pathwise.models.pathway import PathwayStatus
from pathwise.schemas.chat import ChatMessage, ChatMeta, TurnResult
from pathwise.schemas.identity import SessionIdentity
from pathwise.schemas.results import ActionError
from pathwise.schemas.roadmap import roadmap_to_json
from pathwise.services import chat_service, pathway_service
from pathwise.services.identity_service import resolve_user_id

logger = get_logger(__name__)

PATHWAY_TITLE = "Learning Path"


def build_chat_metadata(meta: ChatMeta, pending: ChatMessage) -> dict:
    """Payload for the general chat endpoint: transcript so far plus the new message."""
    return {
        "events": [],
        "roadmap": roadmap_to_json(meta.roadmap) if meta.roadmap is not None else [],
        "messages": [m.model_dump(mode="json") for m in [*meta.messages, pending]],
    }


def upstream_error_text(reason: str) -> str:
    return f"Could not reach server:\n\n{reason}"


async def send_message(
    db: AsyncSession,
    identity: SessionIdentity,
    chat_id: str,
    text: str,
    *,
    client: TutorApiClient,
) -> TurnResult | ActionError:
    """Send a user message to the tutor and record the exchange."""
    try:
        user_id = await resolve_user_id(db, identity)
        chat = await chat_service.get_owned_chat(db, chat_id, user_id)
    except ChatNotFoundError as e:
        return chat_service.not_found(e)

    meta = ChatMeta.load(chat.meta)
    user_message = ChatMessage(
        id=str(uuid.uuid4()),
        role="user",
        content=text,
        timestamp=chat_service.now_ms(),
    )

    state: TutorState = {"query": text, "metadata": build_chat_metadata(meta, user_message)}
    result = await get_graph().ainvoke(state, config={"configurable": {"tutor_client": client}})

    error = result.get("error")
    roadmap = None if error else result.get("roadmap")
    if error:
        logger.warning("Tutor service failed", chat_id=chat_id, error=error)
        reply = upstream_error_text(error)
    else:
        reply = result.get("reply", "")

    ai_message = ChatMessage(
        id=str(uuid.uuid4()),
        role="ai",
        content=reply,
        timestamp=chat_service.now_ms(),
    )

    appended = await chat_service.append_turn(
        db,
        identity,
        chat_id,
        user_message=user_message,
        ai_message=ai_message,
        roadmap=roadmap if roadmap is not None else chat_service.UNSET,
    )
    if isinstance(appended, ActionError):
        return appended

    pathway_id = None
    if roadmap is not None:
        saved = await pathway_service.save_plan_as_pathway(
            db,
            identity,
            chat_id,
            plan=roadmap,
            title=PATHWAY_TITLE,
            status=PathwayStatus.ACTIVE,
        )
        if isinstance(saved, ActionError):
            return saved
        pathway_id = saved.pathway_id

    logger.info(
        "Tutor turn completed",
        chat_id=chat_id,
        intent=result.get("intent"),
        has_roadmap=roadmap is not None,
        upstream_error=bool(error),
    )
    return TurnResult(
        user_message=user_message,
        ai_message=ai_message,
        roadmap=roadmap,
        pathway_id=pathway_id,
        upstream_error=error,
    )
