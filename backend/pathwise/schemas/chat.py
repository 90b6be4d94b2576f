"""Chat schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from pathwise.core.logging import get_logger
from pathwise.schemas.results import ActionOk
from pathwise.schemas.roadmap import Roadmap, RoadmapTopic

logger = get_logger(__name__)

MessageRole = Literal["user", "ai"]


class ChatMessage(BaseModel):
    """A single transcript entry.

    Older clients stored the role under ``type``; both keys are accepted.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    role: MessageRole = Field(validation_alias=AliasChoices("role", "type"))
    content: str
    timestamp: int  # epoch milliseconds


class ChatEvent(BaseModel):
    """Audit trail entry."""

    type: str
    ts: int
    data: dict[str, Any] | None = None


def _valid_entries(model: type[BaseModel], value: Any, field: str) -> list[Any]:
    """Keep the stored list entries that still validate; log and drop the rest."""
    if not isinstance(value, list):
        if value is not None:
            logger.warning("Stored chat field is not a list, ignoring", field=field)
        return []
    kept = []
    for index, item in enumerate(value):
        try:
            kept.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "Dropping invalid stored chat entry",
                field=field,
                index=index,
                errors=e.error_count(),
            )
    return kept


class ChatMeta(BaseModel):
    """Typed view of ``Chat.meta``.

    Merge rules per field:
    - messages: append-only, or replaced whole by a snapshot save
    - roadmap: replaced whole, never merged
    - ui: shallow-merged with each patch
    - events: append-only

    Stored data is read leniently: entries that no longer validate are
    dropped, a roadmap that no longer validates reads as None.
    """

    messages: list[ChatMessage] = Field(default_factory=list)
    roadmap: list[RoadmapTopic] | None = None
    ui: dict[str, Any] = Field(default_factory=dict)
    events: list[ChatEvent] = Field(default_factory=list)

    @field_validator("messages", mode="before")
    @classmethod
    def _drop_invalid_messages(cls, value: Any) -> list[Any]:
        return _valid_entries(ChatMessage, value, "messages")

    @field_validator("events", mode="before")
    @classmethod
    def _drop_invalid_events(cls, value: Any) -> list[Any]:
        return _valid_entries(ChatEvent, value, "events")

    @field_validator("ui", mode="before")
    @classmethod
    def _ui_must_be_object(cls, value: Any) -> dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @field_validator("roadmap", mode="wrap")
    @classmethod
    def _tolerate_invalid_roadmap(cls, value: Any, handler: Any) -> Roadmap | None:
        # Stored roadmaps that no longer validate read as "no roadmap"
        try:
            return handler(value)
        except ValidationError:
            return None

    @classmethod
    def load(cls, raw: dict | None) -> "ChatMeta":
        return cls.model_validate(raw if isinstance(raw, dict) else {})

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def append_messages(self, *messages: ChatMessage) -> None:
        self.messages = [*self.messages, *messages]

    def replace_roadmap(self, roadmap: Roadmap | None) -> None:
        self.roadmap = roadmap

    def merge_ui(self, patch: dict[str, Any]) -> None:
        self.ui = {**self.ui, **patch}

    def record_event(self, event_type: str, ts: int, data: dict[str, Any] | None = None) -> None:
        self.events = [*self.events, ChatEvent(type=event_type, ts=ts, data=data)]


# ============================================================================
# Requests
# ============================================================================


class ChatCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    initial_messages: list[ChatMessage] | None = Field(default=None, alias="initialMessages")
    initial_roadmap: Roadmap | None = Field(default=None, alias="initialRoadmap")


class ChatSnapshotSave(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage]
    roadmap: Roadmap | None = None
    title_fallback: str | None = Field(default=None, alias="titleFallback")


class ChatTurnAppend(BaseModel):
    """Append one user/ai exchange.

    ``roadmap`` replaces the stored roadmap only when the key is present in
    the request; send ``null`` to clear it.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_message: ChatMessage = Field(alias="userMessage")
    ai_message: ChatMessage = Field(alias="aiMessage")
    roadmap: Roadmap | None = None
    ui_patch: dict[str, Any] | None = Field(default=None, alias="uiPatch")


class ChatRename(BaseModel):
    title: str


class ChatSend(BaseModel):
    """Free-text message to the tutor."""

    text: str = Field(min_length=1)


# ============================================================================
# Responses
# ============================================================================


class ChatSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str | None
    started_at: datetime
    updated_at: datetime


class ChatSnapshot(BaseModel):
    id: str
    title: str | None
    messages: list[ChatMessage]
    roadmap: Roadmap | None
    started_at: datetime
    updated_at: datetime


class ChatCreated(ActionOk):
    chat_id: str


class ChatList(ActionOk):
    items: list[ChatSummary]


class ChatSnapshotResult(ActionOk):
    chat: ChatSnapshot


class TurnResult(ActionOk):
    """Outcome of a tutor exchange.

    ``upstream_error`` is set when the tutor service failed; the AI message
    then carries the error text and was persisted like any other reply.
    """

    user_message: ChatMessage
    ai_message: ChatMessage
    roadmap: Roadmap | None = None
    pathway_id: int | None = None
    upstream_error: str | None = None
