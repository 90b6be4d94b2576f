"""LangGraph tutor graph definition."""

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from pathwise.agent.nodes import (
    classify_node,
    general_agent_node,
    roadmap_agent_node,
    route_by_intent,
)
from pathwise.agent.state import TutorState
from pathwise.core.logging import get_logger

logger = get_logger(__name__)


def create_tutor_graph() -> CompiledStateGraph:
    """Create the tutor workflow graph.

    Flow:
    1. classify - roadmap request or general chat
    2. [conditional] -> roadmap_agent (ask endpoint)
                     -> general_agent (general chat endpoint)

    No checkpointer: the transcript is persisted in Chat.meta and sent with
    every general chat request.
    """
    workflow = StateGraph(TutorState)

    workflow.add_node("classify", classify_node)
    workflow.add_node("roadmap_agent", roadmap_agent_node)
    workflow.add_node("general_agent", general_agent_node)

    workflow.set_entry_point("classify")

    workflow.add_conditional_edges(
        "classify",
        route_by_intent,
        {
            "roadmap_agent": "roadmap_agent",
            "general_agent": "general_agent",
        },
    )

    workflow.add_edge("roadmap_agent", END)
    workflow.add_edge("general_agent", END)

    return workflow.compile()  # type: ignore[return-value]


_graph = None


def get_graph() -> CompiledStateGraph:
    """Get or create the global graph instance."""
    global _graph
    if _graph is None:
        _graph = create_tutor_graph()
        logger.info("Tutor graph created")
    return _graph
