"""Session identity schema."""

from pydantic import BaseModel, field_validator


class SessionIdentity(BaseModel):
    """What the external identity provider tells us about the caller."""

    email: str | None = None
    name: str | None = None

    @field_validator("email", "name")
    @classmethod
    def _blank_is_absent(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def is_anonymous(self) -> bool:
        return self.email is None and self.name is None
