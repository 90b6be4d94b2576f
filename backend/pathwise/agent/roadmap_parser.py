"""Roadmap extraction from free-form tutor replies.

The tutor service answers in prose and, when it produced a roadmap, embeds a
JSON array somewhere in that prose. The array is located by taking everything
from the first ``[`` to the last ``]``; nested or multiple arrays therefore end
up in a single parse attempt, which fails unless the whole span is one valid
roadmap.
"""

import json

from pydantic import ValidationError

from pathwise.core.logging import get_logger
from pathwise.schemas.roadmap import Roadmap, RoadmapAdapter

logger = get_logger(__name__)

LEAD_IN_TOPIC_LIMIT = 6


def _bracket_span(text: str) -> tuple[int, int] | None:
    first = text.find("[")
    last = text.rfind("]")
    if first == -1 or last == -1 or last <= first:
        return None
    return first, last


def try_extract_roadmap(text: str) -> Roadmap | None:
    """Return the roadmap embedded in ``text``, or None.

    All-or-nothing: one malformed topic or subtopic rejects the whole
    roadmap. An empty array is a valid roadmap with no topics.
    """
    span = _bracket_span(text)
    if span is None:
        return None
    first, last = span

    try:
        parsed = json.loads(text[first : last + 1].strip())
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, list):
        return None

    try:
        return RoadmapAdapter.validate_python(parsed)
    except ValidationError as e:
        logger.debug("Embedded array is not a roadmap", errors=e.error_count())
        return None


def strip_roadmap_json(text: str) -> str:
    """Remove the bracketed span and return the surrounding prose.

    Prefix and suffix are trimmed and joined by a blank line; when there is
    no span the trimmed text is returned.
    """
    span = _bracket_span(text)
    if span is None:
        return text.strip()
    first, last = span
    parts = [text[:first].strip(), text[last + 1 :].strip()]
    return "\n\n".join(p for p in parts if p).strip()


def roadmap_lead_in(roadmap: Roadmap) -> str:
    """Chat message announcing a freshly generated roadmap."""
    names = [topic.name for topic in roadmap[:LEAD_IN_TOPIC_LIMIT]]
    tail = "…" if len(roadmap) > LEAD_IN_TOPIC_LIMIT else ""
    return f"I created a roadmap ({' → '.join(names)}{tail}). Click a topic to explore subtopics."
