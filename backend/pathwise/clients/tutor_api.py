"""Client for the external tutor service.

The service exposes three endpoints on one base URL:

- ``GET /ask?q=``: roadmap requests; plain text, possibly with an embedded
  roadmap array
- ``POST /general``: general tutoring chat; free text, possibly with an
  embedded roadmap array
- ``GET /content/?q=``: learning material as a JSON array of ``{type, content}``

It is typically reached through an ngrok tunnel, which answers with an HTML
warning page instead of proxying when the bypass header is missing. That page
is treated as a transport failure.
"""

import json
from typing import Any

import httpx
from pydantic import ValidationError

from pathwise.core.config import get_settings
from pathwise.core.exceptions import MalformedResponseError, UpstreamUnavailableError
from pathwise.core.logging import get_logger
from pathwise.schemas.content import ContentItem

logger = get_logger(__name__)

INTERSTITIAL_MARKER = "ERR_NGROK_6024"
ERROR_PREVIEW_CHARS = 200

_BASE_HEADERS = {
    "ngrok-skip-browser-warning": "true",
    "Cache-Control": "no-cache",
}


class TutorApiClient:
    """Async client for the tutor service."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers=_BASE_HEADERS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "TutorApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Tutor service unreachable", url=url, error=str(e))
            raise UpstreamUnavailableError(f"Could not reach tutor service: {e}") from e

        content_type = response.headers.get("content-type", "")
        if "text/html" in content_type or INTERSTITIAL_MARKER in response.text:
            logger.warning("Tutor service returned an interstitial page", url=url)
            raise UpstreamUnavailableError("Ngrok splash intercepted the request.")
        if response.is_error:
            raise UpstreamUnavailableError(
                f"Backend error {response.status_code}: {response.text[:ERROR_PREVIEW_CHARS]}"
            )
        return response

    async def ask(self, query: str) -> str:
        """Ask for a roadmap; returns the raw reply text."""
        response = await self._request(
            "GET",
            "/ask",
            params={"q": query},
            headers={"Accept": "text/plain, application/json;q=0.9"},
        )
        return response.text

    async def general_chat(self, metadata: dict[str, Any], query: str) -> str:
        """Send the transcript plus a new query to the general chat endpoint."""
        response = await self._request(
            "POST",
            "/general",
            json={"metadata": metadata, "query": query},
            headers={"Accept": "application/json,text/plain;q=0.9"},
        )
        try:
            body = response.json()
        except ValueError:
            return response.text

        if isinstance(body, str):
            return body
        if isinstance(body, dict) and isinstance(body.get("text"), str):
            return body["text"]
        return json.dumps(body, ensure_ascii=False)

    async def fetch_content(self, query: str) -> list[ContentItem]:
        """Fetch learning material for a topic. An empty list means no content."""
        response = await self._request(
            "GET",
            "/content/",
            params={"q": query},
            headers={"Accept": "application/json,text/plain;q=0.9"},
        )
        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError("Content response is not JSON.") from e
        if not isinstance(body, list):
            raise MalformedResponseError("Unexpected /content shape.")
        try:
            return [ContentItem.model_validate(item) for item in body]
        except ValidationError as e:
            raise MalformedResponseError("Unexpected /content item shape.") from e


def get_tutor_client() -> TutorApiClient:
    """Build a client from settings."""
    settings = get_settings()
    return TutorApiClient(settings.TUTOR_API_BASE_URL, timeout=settings.TUTOR_API_TIMEOUT)
