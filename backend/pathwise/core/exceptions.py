"""Domain exceptions.

These are raised inside the service and client layers. Service functions that
the API calls convert them into result values before returning, so nothing
here crosses into route handlers except the upstream errors, which routes
translate to HTTP 502, and ``ChatConflictError``, which routes translate to
HTTP 409.
"""


class PathwiseError(Exception):
    """Base class for application errors."""


class ChatNotFoundError(PathwiseError):
    """The chat does not exist, was deleted, or belongs to another user."""

    message = "Chat not found or not owned by user."

    def __init__(self, chat_id: str) -> None:
        super().__init__(self.message)
        self.chat_id = chat_id


class UpstreamUnavailableError(PathwiseError):
    """An external service could not be reached or answered with an error."""


class MalformedResponseError(PathwiseError):
    """An external service answered with a body of the wrong shape."""


class ChatConflictError(PathwiseError):
    """A chat kept changing underneath a write that was retried."""

    def __init__(self, chat_id: str) -> None:
        super().__init__(f"Chat {chat_id} was modified concurrently; try again.")
        self.chat_id = chat_id
