"""Service layer modules."""

from pathwise.services import (
    chat_service,
    identity_service,
    pathway_service,
    turn_service,
)

__all__ = [
    "chat_service",
    "identity_service",
    "pathway_service",
    "turn_service",
]
