"""Chat routes."""

from fastapi import APIRouter, HTTPException, status

from pathwise.api.deps import CurrentIdentity, DBDep, TutorApiDep, raise_for_error
from pathwise.core.exceptions import ChatConflictError
from pathwise.core.logging import get_logger
from pathwise.schemas import (
    ActionOk,
    ChatCreate,
    ChatCreated,
    ChatList,
    ChatRename,
    ChatSend,
    ChatSnapshotResult,
    ChatSnapshotSave,
    ChatTurnAppend,
    PathwayResult,
    PathwaySave,
    PathwaySaved,
    TurnResult,
)
from pathwise.services import chat_service, pathway_service, turn_service

logger = get_logger(__name__)
router = APIRouter(prefix="/chats", tags=["chats"])


def _conflict(e: ChatConflictError) -> HTTPException:
    logger.warning("Chat write conflict", chat_id=e.chat_id)
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("", response_model=ChatCreated, status_code=status.HTTP_201_CREATED)
async def create_chat(data: ChatCreate, identity: CurrentIdentity, db: DBDep) -> ChatCreated:
    """Start a new chat."""
    return await chat_service.create_chat(
        db,
        identity,
        title=data.title,
        initial_messages=data.initial_messages,
        initial_roadmap=data.initial_roadmap,
    )


@router.get("", response_model=ChatList)
async def list_chats(identity: CurrentIdentity, db: DBDep) -> ChatList:
    """List the caller's chats, most recently updated first."""
    return await chat_service.list_chats(db, identity)


@router.get("/{chat_id}", response_model=ChatSnapshotResult)
async def get_chat(chat_id: str, identity: CurrentIdentity, db: DBDep) -> ChatSnapshotResult:
    """Load a chat's transcript and current roadmap."""
    result = await chat_service.get_chat_snapshot(db, identity, chat_id)
    raise_for_error(result)
    return result


@router.put("/{chat_id}/snapshot", response_model=ActionOk)
async def save_snapshot(
    chat_id: str,
    data: ChatSnapshotSave,
    identity: CurrentIdentity,
    db: DBDep,
) -> ActionOk:
    """Overwrite the transcript and roadmap."""
    result = await chat_service.save_chat_snapshot(
        db,
        identity,
        chat_id,
        messages=data.messages,
        roadmap=data.roadmap,
        title_fallback=data.title_fallback,
    )
    raise_for_error(result)
    return result


@router.post("/{chat_id}/turns", response_model=ActionOk)
async def append_turn(
    chat_id: str,
    data: ChatTurnAppend,
    identity: CurrentIdentity,
    db: DBDep,
) -> ActionOk:
    """Append a user/ai exchange produced elsewhere."""
    roadmap = data.roadmap if "roadmap" in data.model_fields_set else chat_service.UNSET
    try:
        result = await chat_service.append_turn(
            db,
            identity,
            chat_id,
            user_message=data.user_message,
            ai_message=data.ai_message,
            roadmap=roadmap,
            ui_patch=data.ui_patch,
        )
    except ChatConflictError as e:
        raise _conflict(e) from e
    raise_for_error(result)
    return result


@router.post("/{chat_id}/messages", response_model=TurnResult)
async def send_message(
    chat_id: str,
    data: ChatSend,
    identity: CurrentIdentity,
    db: DBDep,
    client: TutorApiDep,
) -> TurnResult:
    """Send a message to the tutor and persist the exchange."""
    try:
        result = await turn_service.send_message(db, identity, chat_id, data.text, client=client)
    except ChatConflictError as e:
        raise _conflict(e) from e
    raise_for_error(result)
    return result


@router.patch("/{chat_id}", response_model=ActionOk)
async def rename_chat(
    chat_id: str,
    data: ChatRename,
    identity: CurrentIdentity,
    db: DBDep,
) -> ActionOk:
    result = await chat_service.rename_chat(db, identity, chat_id, data.title)
    raise_for_error(result)
    return result


@router.delete("/{chat_id}", response_model=ActionOk)
async def delete_chat(chat_id: str, identity: CurrentIdentity, db: DBDep) -> ActionOk:
    result = await chat_service.delete_chat(db, identity, chat_id)
    raise_for_error(result)
    return result


@router.put("/{chat_id}/pathway", response_model=PathwaySaved)
async def save_pathway(
    chat_id: str,
    data: PathwaySave,
    identity: CurrentIdentity,
    db: DBDep,
) -> PathwaySaved:
    """Save the chat's roadmap as its pathway (created once, then updated)."""
    result = await pathway_service.save_plan_as_pathway(
        db,
        identity,
        chat_id,
        plan=data.plan,
        title=data.title,
        status=data.status,
    )
    raise_for_error(result)
    return result


@router.get("/{chat_id}/pathway", response_model=PathwayResult)
async def get_pathway(chat_id: str, identity: CurrentIdentity, db: DBDep) -> PathwayResult:
    result = await pathway_service.get_chat_pathway(db, identity, chat_id)
    raise_for_error(result)
    return result
