"""Tutor graph nodes."""

from pathwise.agent.nodes.classify import classify_node, route_by_intent
from pathwise.agent.nodes.general import general_agent_node
from pathwise.agent.nodes.roadmap import roadmap_agent_node

__all__ = [
    "classify_node",
    "route_by_intent",
    "general_agent_node",
    "roadmap_agent_node",
]
