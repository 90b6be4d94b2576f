"""Roadmap schemas.

A roadmap is an ordered list of topics, each with an ordered list of
subtopics. Nodes carry a ``type`` tag and a display name, nothing else.
"""

from typing import Literal

from pydantic import BaseModel, TypeAdapter


class RoadmapSubtopic(BaseModel):
    type: Literal["SUBTOPIC"]
    name: str


class RoadmapTopic(BaseModel):
    type: Literal["TOPIC"]
    name: str
    subtopics: list[RoadmapSubtopic]


Roadmap = list[RoadmapTopic]

RoadmapAdapter: TypeAdapter[list[RoadmapTopic]] = TypeAdapter(Roadmap)


def roadmap_to_json(roadmap: Roadmap | list[dict]) -> list[dict]:
    """Validate and dump a roadmap to plain JSON-compatible dicts."""
    return RoadmapAdapter.dump_python(RoadmapAdapter.validate_python(roadmap), mode="json")


class RoadmapExtractRequest(BaseModel):
    text: str


class RoadmapExtractResponse(BaseModel):
    """Roadmap found in a piece of text, plus the text without it."""

    roadmap: Roadmap | None
    text: str
