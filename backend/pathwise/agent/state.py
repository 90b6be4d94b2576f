"""LangGraph tutor state definition."""

from typing import Annotated, Any, Literal, TypedDict

from pathwise.schemas.roadmap import Roadmap


class TutorState(TypedDict, total=False):
    """State passed between the nodes of one tutor exchange."""

    # === Input ===
    query: str
    metadata: Annotated[dict[str, Any], "Transcript sent to the general chat endpoint"]

    # === Classifier output ===
    intent: Literal["roadmap", "general"]

    # === Results ===
    reply: Annotated[str, "Text of the AI message"]
    roadmap: Annotated[Roadmap | None, "Roadmap produced by this exchange"]
    error: Annotated[str | None, "Upstream failure, if any"]
