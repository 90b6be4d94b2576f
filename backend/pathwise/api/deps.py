"""API dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from pathwise.clients.tutor_api import TutorApiClient
from pathwise.core.auth import CurrentIdentity, get_session_identity
from pathwise.core.database import get_session
from pathwise.schemas.results import ActionError


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


def get_tutor_api(request: Request) -> TutorApiClient:
    """Tutor service client shared by the app (created in the lifespan)."""
    return request.app.state.tutor_client


DBDep = Annotated[AsyncSession, Depends(get_db)]
TutorApiDep = Annotated[TutorApiClient, Depends(get_tutor_api)]


def raise_for_error(result: object) -> None:
    """Turn a service ``ActionError`` into a 404."""
    if isinstance(result, ActionError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)


__all__ = [
    "CurrentIdentity",
    "DBDep",
    "TutorApiDep",
    "get_db",
    "get_session_identity",
    "get_tutor_api",
    "raise_for_error",
]
