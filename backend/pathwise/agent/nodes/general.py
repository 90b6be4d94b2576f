"""General Agent Node - free-form tutoring chat."""

from langchain_core.runnables import RunnableConfig

from pathwise.agent.nodes._config import tutor_client_from
from pathwise.agent.roadmap_parser import strip_roadmap_json, try_extract_roadmap
from pathwise.agent.state import TutorState
from pathwise.core.exceptions import UpstreamUnavailableError
from pathwise.core.logging import get_logger

logger = get_logger(__name__)


async def general_agent_node(state: TutorState, config: RunnableConfig) -> TutorState:
    """Send the transcript to the general endpoint.

    A roadmap embedded in the reply is pulled out and the remaining prose
    becomes the AI message.
    """
    client = tutor_client_from(config)
    try:
        raw = await client.general_chat(state.get("metadata", {}), state["query"])
    except UpstreamUnavailableError as e:
        return {"error": str(e)}

    roadmap = try_extract_roadmap(raw)
    if roadmap is None:
        return {"reply": raw, "roadmap": None}

    logger.info("Roadmap embedded in chat reply", topics=len(roadmap))
    return {"reply": strip_roadmap_json(raw) or raw, "roadmap": roadmap}
