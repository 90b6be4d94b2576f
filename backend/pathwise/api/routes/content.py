"""Learning content routes."""

from fastapi import APIRouter, HTTPException, Query, status

from pathwise.api.deps import TutorApiDep
from pathwise.core.exceptions import MalformedResponseError, UpstreamUnavailableError
from pathwise.core.logging import get_logger
from pathwise.schemas.content import ContentItem

logger = get_logger(__name__)
router = APIRouter(prefix="/content", tags=["content"])


@router.get("", response_model=list[ContentItem])
async def get_content(
    client: TutorApiDep,
    q: str = Query(min_length=1),
) -> list[ContentItem]:
    """Learning material for a topic; an empty list means nothing was found."""
    try:
        return await client.fetch_content(q)
    except (UpstreamUnavailableError, MalformedResponseError) as e:
        logger.warning("Content lookup failed", query=q, error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
