"""Classify node - picks the tutor endpoint for a message."""

from pathwise.agent.classifier import classify_prompt
from pathwise.agent.state import TutorState


async def classify_node(state: TutorState) -> TutorState:
    verdict = classify_prompt(state["query"])
    return {"intent": verdict.type}


def route_by_intent(state: TutorState) -> str:
    if state.get("intent") == "roadmap":
        return "roadmap_agent"
    return "general_agent"
