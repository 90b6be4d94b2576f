"""Practice routes."""

from fastapi import APIRouter

from pathwise.agent.practice import generate_practice
from pathwise.schemas.practice import GeneratedPractice, PracticeRequest

router = APIRouter(prefix="/practice", tags=["practice"])


@router.post("", response_model=GeneratedPractice)
async def create_practice(data: PracticeRequest) -> GeneratedPractice:
    """Generate practice questions for a subtopic.

    Always succeeds; empty lists mean generation was unavailable and the
    client should show its placeholder questions.
    """
    return await generate_practice(data)
