"""LLM provider configuration."""

from functools import lru_cache

from langchain_openai import ChatOpenAI

from pathwise.core.config import Settings, get_settings
from pathwise.core.logging import get_logger

logger = get_logger(__name__)


def build_llm(settings: Settings) -> ChatOpenAI:
    """Build the practice chat model from the given settings."""
    kwargs: dict = {
        "model": settings.OPENAI_MODEL,
        "temperature": settings.PRACTICE_TEMPERATURE,
        "api_key": settings.OPENAI_API_KEY,
    }
    if settings.OPENAI_API_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_API_BASE_URL

    logger.info("Initializing LLM", model=settings.OPENAI_MODEL)
    return ChatOpenAI(**kwargs)


@lru_cache
def get_llm() -> ChatOpenAI:
    """Get the shared chat model built from application settings."""
    return build_llm(get_settings())
