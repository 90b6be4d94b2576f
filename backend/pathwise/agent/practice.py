"""Practice question generation for a roadmap subtopic."""

import json
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from pathwise.agent.llm import build_llm, get_llm
from pathwise.agent.llm_utils import message_text, parse_llm_json_response
from pathwise.core.config import Settings, get_settings
from pathwise.core.logging import get_logger
from pathwise.schemas.practice import (
    GeneratedMCQ,
    GeneratedPractice,
    GeneratedTextQ,
    PracticeRequest,
)

logger = get_logger(__name__)

DEFAULT_MCQS = 3
MAX_MCQS = 6
DEFAULT_TEXTS = 2
MAX_TEXTS = 4
MCQ_OPTION_COUNT = 4


# ============================================================================
# Prompt
# ============================================================================

PRACTICE_INSTRUCTION = """
You are a tutor. Create {num_mcqs} multiple-choice questions and {num_texts} short-answer prompts
for the given TOPIC and SUBTOPIC. Use the ROADMAP context to keep phrasing aligned with what's being studied.
Return STRICT JSON only, with this shape:

{{
  "mcqs": [
    {{ "question": "...", "options": ["A","B","C","D"], "correctIndex": 1, "explanation": "..." }}
  ],
  "texts": [
    {{ "prompt": "...", "context": "optional extra guidance" }}
  ]
}}

Rules:
- MCQs must have 4 options (A-D) and exactly one correct answer.
- Keep questions concise and unambiguous.
- Avoid code that cannot be rendered as plain text.
- No prose outside of the JSON.
""".strip()


def _clamp(value: int | None, default: int, upper: int) -> int:
    return max(1, min(default if value is None else value, upper))


def build_practice_prompt(request: PracticeRequest, num_mcqs: int, num_texts: int) -> str:
    payload = {
        "topic": request.topic,
        "subtopic": request.subtopic,
        "roadmap": request.roadmap if request.roadmap is not None else [],
    }
    instruction = PRACTICE_INSTRUCTION.format(num_mcqs=num_mcqs, num_texts=num_texts)
    return f"{instruction}\n\nINPUT:\n{json.dumps(payload, ensure_ascii=False, default=str)}"


# ============================================================================
# Validation
# ============================================================================


def _valid_mcq(item: Any) -> GeneratedMCQ | None:
    if not isinstance(item, dict):
        return None
    question = item.get("question")
    options = item.get("options")
    correct = item.get("correctIndex")
    if not isinstance(question, str):
        return None
    if not isinstance(options, list) or len(options) != MCQ_OPTION_COUNT:
        return None
    # bool is an int subclass; true/false are not indexes
    if not isinstance(correct, int) or isinstance(correct, bool):
        return None
    if not 0 <= correct < MCQ_OPTION_COUNT:
        return None
    explanation = item.get("explanation")
    return GeneratedMCQ(
        question=question,
        options=[str(option) for option in options],
        correct_index=correct,
        explanation=explanation if isinstance(explanation, str) else None,
    )


def _valid_text(item: Any) -> GeneratedTextQ | None:
    if not isinstance(item, dict) or not isinstance(item.get("prompt"), str):
        return None
    context = item.get("context")
    return GeneratedTextQ(
        prompt=item["prompt"],
        context=context if isinstance(context, str) else None,
    )


def validate_practice(parsed: Any, num_mcqs: int, num_texts: int) -> GeneratedPractice:
    """Keep structurally valid items only, truncated to the requested counts.

    Nothing checks that the marked answer is actually correct.
    """
    if not isinstance(parsed, dict):
        return GeneratedPractice()

    raw_mcqs = parsed.get("mcqs")
    raw_texts = parsed.get("texts")
    mcqs = [q for q in map(_valid_mcq, raw_mcqs if isinstance(raw_mcqs, list) else []) if q]
    texts = [t for t in map(_valid_text, raw_texts if isinstance(raw_texts, list) else []) if t]
    return GeneratedPractice(mcqs=mcqs[:num_mcqs], texts=texts[:num_texts])


# ============================================================================
# Entry point
# ============================================================================


async def generate_practice(
    request: PracticeRequest,
    *,
    llm: BaseChatModel | None = None,
    settings: Settings | None = None,
) -> GeneratedPractice:
    """Generate practice questions for a subtopic.

    Fails open: without an API key, or when the model call fails or answers
    with something that is not the expected JSON object, both lists come back
    empty so the UI can show its placeholder cards.

    ``settings`` both gates generation on the API key and configures the
    model; without it the application settings and shared model are used.
    """
    num_mcqs = _clamp(request.num_mcqs, DEFAULT_MCQS, MAX_MCQS)
    num_texts = _clamp(request.num_texts, DEFAULT_TEXTS, MAX_TEXTS)

    if llm is None:
        active = settings or get_settings()
        if not active.OPENAI_API_KEY:
            logger.info("Practice generation skipped: no API key configured")
            return GeneratedPractice()
        llm = build_llm(settings) if settings is not None else get_llm()

    prompt = build_practice_prompt(request, num_mcqs, num_texts)
    try:
        response = await llm.ainvoke([HumanMessage(content=prompt)])
        parsed = parse_llm_json_response(message_text(response).strip())
    except Exception as e:
        logger.warning(
            "Practice generation failed, returning empty set",
            topic=request.topic,
            subtopic=request.subtopic,
            error=str(e),
        )
        return GeneratedPractice()

    practice = validate_practice(parsed, num_mcqs, num_texts)
    logger.info(
        "Practice generated",
        topic=request.topic,
        subtopic=request.subtopic,
        mcqs=len(practice.mcqs),
        texts=len(practice.texts),
    )
    return practice
