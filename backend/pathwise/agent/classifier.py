"""Rule-based prompt classifier: roadmap request or general chat."""

import re
from typing import Literal

from pydantic import BaseModel

from pathwise.core.logging import get_logger

logger = get_logger(__name__)


class PromptVerdict(BaseModel):
    type: Literal["roadmap", "general"]
    pattern: str | None = None


ROADMAP_PATTERNS = [
    r"\broad\s*map\b",
    r"\blearning\s+(path|plan|pathway)\b",
    r"\bstudy\s+(plan|guide|path)\b",
    r"\bcurriculum\b|\bsyllabus\b",
    r"\b(i\s+want|i'd\s+like|i\s+would\s+like)\s+to\s+learn\b",
    r"\bteach\s+me\b",
    r"\bhow\s+(do|should|can|would)\s+i\s+(learn|study|get\s+started\s+with)\b",
    r"\bwhere\s+(do|should)\s+i\s+start\b",
    r"\b(plan|path)\s+(for|to)\s+(learn|master|study)",
    r"\bfrom\s+scratch\b",
]

_COMPILED = [re.compile(p, re.IGNORECASE) for p in ROADMAP_PATTERNS]


def classify_prompt(text: str) -> PromptVerdict:
    """Route a user message to the roadmap or general chat endpoint."""
    for pattern in _COMPILED:
        if pattern.search(text):
            logger.debug("Prompt classified as roadmap", pattern=pattern.pattern)
            return PromptVerdict(type="roadmap", pattern=pattern.pattern)
    return PromptVerdict(type="general")
