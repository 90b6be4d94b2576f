"""Pydantic schemas."""

from pathwise.schemas.chat import (
    ChatCreate,
    ChatCreated,
    ChatEvent,
    ChatList,
    ChatMessage,
    ChatMeta,
    ChatRename,
    ChatSend,
    ChatSnapshot,
    ChatSnapshotResult,
    ChatSnapshotSave,
    ChatSummary,
    ChatTurnAppend,
    TurnResult,
)
from pathwise.schemas.content import ContentItem
from pathwise.schemas.identity import SessionIdentity
from pathwise.schemas.pathway import PathwayResponse, PathwayResult, PathwaySave, PathwaySaved
from pathwise.schemas.practice import (
    GeneratedMCQ,
    GeneratedPractice,
    GeneratedTextQ,
    PracticeRequest,
)
from pathwise.schemas.results import ActionError, ActionOk
from pathwise.schemas.roadmap import Roadmap, RoadmapSubtopic, RoadmapTopic

__all__ = [
    "ActionOk",
    "ActionError",
    "SessionIdentity",
    "ChatMessage",
    "ChatEvent",
    "ChatMeta",
    "ChatCreate",
    "ChatCreated",
    "ChatList",
    "ChatRename",
    "ChatSend",
    "ChatSnapshot",
    "ChatSnapshotResult",
    "ChatSnapshotSave",
    "ChatSummary",
    "ChatTurnAppend",
    "TurnResult",
    "ContentItem",
    "PathwaySave",
    "PathwaySaved",
    "PathwayResponse",
    "PathwayResult",
    "GeneratedMCQ",
    "GeneratedTextQ",
    "GeneratedPractice",
    "PracticeRequest",
    "Roadmap",
    "RoadmapTopic",
    "RoadmapSubtopic",
]
