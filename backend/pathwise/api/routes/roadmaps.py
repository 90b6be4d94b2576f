"""Roadmap routes."""

from fastapi import APIRouter

from pathwise.agent.roadmap_parser import strip_roadmap_json, try_extract_roadmap
from pathwise.schemas.roadmap import RoadmapExtractRequest, RoadmapExtractResponse

router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


@router.post("/extract", response_model=RoadmapExtractResponse)
async def extract_roadmap(data: RoadmapExtractRequest) -> RoadmapExtractResponse:
    """Split a tutor reply into its embedded roadmap and the remaining prose.

    When no valid roadmap is embedded, ``roadmap`` is null and ``text`` is
    the whole reply.
    """
    roadmap = try_extract_roadmap(data.text)
    if roadmap is None:
        return RoadmapExtractResponse(roadmap=None, text=data.text.strip())
    return RoadmapExtractResponse(roadmap=roadmap, text=strip_roadmap_json(data.text))
