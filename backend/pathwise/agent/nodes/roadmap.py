"""Roadmap Agent Node - asks the tutor service for a learning roadmap."""

from langchain_core.runnables import RunnableConfig

from pathwise.agent.nodes._config import tutor_client_from
from pathwise.agent.roadmap_parser import roadmap_lead_in, try_extract_roadmap
from pathwise.agent.state import TutorState
from pathwise.core.exceptions import UpstreamUnavailableError
from pathwise.core.logging import get_logger

logger = get_logger(__name__)


async def roadmap_agent_node(state: TutorState, config: RunnableConfig) -> TutorState:
    """Call the ask endpoint.

    When the reply holds a roadmap the AI message becomes a short lead-in and
    the roadmap is returned separately; otherwise the raw reply is the message.
    """
    client = tutor_client_from(config)
    try:
        raw = await client.ask(state["query"])
    except UpstreamUnavailableError as e:
        return {"error": str(e)}

    roadmap = try_extract_roadmap(raw)
    if roadmap is None:
        logger.info("Ask reply carried no roadmap", reply_preview=raw[:80])
        return {"reply": raw, "roadmap": None}

    logger.info("Roadmap received", topics=len(roadmap))
    return {"reply": roadmap_lead_in(roadmap), "roadmap": roadmap}
