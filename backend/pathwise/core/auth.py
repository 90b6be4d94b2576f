"""Authentication utilities.

Sign-in is handled by an external identity provider sitting in front of the
API (an auth proxy). The proxy forwards the signed-in user's email and display
name as request headers; this module only reads them. A request without either
header is anonymous and resolves to the shared guest account.
"""

from typing import Annotated

from fastapi import Depends, Request

from pathwise.core.config import get_settings
from pathwise.core.logging import bind_request_context
from pathwise.schemas.identity import SessionIdentity


def get_session_identity(request: Request) -> SessionIdentity:
    """Read the forwarded session identity for an HTTP request.

    Example:
        @router.get("/chats")
        async def list_chats(identity: CurrentIdentity):
            ...
    """
    settings = get_settings()
    identity = SessionIdentity(
        email=request.headers.get(settings.AUTH_EMAIL_HEADER),
        name=request.headers.get(settings.AUTH_NAME_HEADER),
    )
    bind_request_context(
        path=request.url.path,
        user_email=identity.email,
        anonymous=identity.is_anonymous,
    )
    return identity


CurrentIdentity = Annotated[SessionIdentity, Depends(get_session_identity)]
