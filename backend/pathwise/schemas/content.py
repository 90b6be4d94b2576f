"""Learning content schemas."""

from pydantic import BaseModel


class ContentItem(BaseModel):
    """A block of learning material from the tutor service."""

    type: str
    content: str
