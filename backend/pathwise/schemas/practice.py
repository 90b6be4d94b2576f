"""Practice question schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GeneratedMCQ(BaseModel):
    """Multiple-choice question with exactly four options."""

    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: list[str] = Field(min_length=4, max_length=4)
    correct_index: int = Field(alias="correctIndex", ge=0, lt=4)
    explanation: str | None = None


class GeneratedTextQ(BaseModel):
    """Short-answer prompt."""

    prompt: str
    context: str | None = None


class GeneratedPractice(BaseModel):
    mcqs: list[GeneratedMCQ] = Field(default_factory=list)
    texts: list[GeneratedTextQ] = Field(default_factory=list)


class PracticeRequest(BaseModel):
    """Practice generation request.

    ``roadmap`` is only passed through to the model as context, so its shape
    is not checked here.
    """

    model_config = ConfigDict(populate_by_name=True)

    topic: str
    subtopic: str
    roadmap: Any = None
    num_mcqs: int | None = Field(default=None, alias="numMcqs")
    num_texts: int | None = Field(default=None, alias="numTexts")
