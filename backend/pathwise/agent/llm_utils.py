"""LLM utility functions."""

import json
import re
from typing import Any

from langchain_core.messages import BaseMessage

from pathwise.core.logging import get_logger

logger = get_logger(__name__)

_CODE_BLOCK_RE = re.compile(r"```(?:json|javascript|js|text)?\s*\n(.*?)\n\s*```", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def message_text(message: BaseMessage) -> str:
    """Flatten a chat model reply to plain text.

    ``content`` is either a string or a list of parts (strings or
    ``{"type": "text", "text": ...}`` dicts); non-text parts are dropped.
    """
    content = message.content
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts)


def _try_parse_json(text: str) -> dict[str, Any] | list[Any] | None:
    """Parse JSON after stripping whitespace and trailing commas."""
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", text.strip())
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, ValueError):
        return None


def parse_llm_json_response(content: str | None) -> dict[str, Any] | list[Any]:
    """Parse a model reply that is supposed to be pure JSON.

    Tries the whole reply first, then the first fenced code block. Prose
    around bare JSON is not searched; models asked for "JSON only" that answer
    with prose are treated as failures.

    Raises:
        ValueError: If content is empty or no strategy yields JSON
    """
    if not content:
        raise ValueError("Empty LLM response")

    result = _try_parse_json(content)
    if result is not None:
        logger.debug("Parsed JSON using direct strategy")
        return result

    match = _CODE_BLOCK_RE.search(content)
    if match:
        result = _try_parse_json(match.group(1))
        if result is not None:
            logger.debug("Parsed JSON using code block strategy")
            return result

    logger.warning("Failed to parse LLM JSON response", content_preview=content[:200])
    raise ValueError("Failed to parse LLM JSON response: no valid JSON found")
