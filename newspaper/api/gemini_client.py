"""Async wrapper around the Gemini-compatible generateContent endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from newspaper.config.settings import Settings

logger = logging.getLogger(__name__)

ERROR_BODY_LIMIT = 500


class GeminiRequestError(RuntimeError):
    """Raised when the generation endpoint responds with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class GeminiTransportError(RuntimeError):
    """Raised when the request never produced an HTTP response."""


def friendly_error_message(exc: BaseException) -> str:
    """Map low-level transport failures onto messages a user can act on."""

    message = str(exc)
    if isinstance(exc, httpx.TimeoutException):
        return "The image service took too long to respond, please try again."
    if isinstance(exc, httpx.ConnectError) or message == "Failed to fetch":
        return "Network request failed, please check your network connection or whether the API key is correct."
    if "NetworkError" in message:
        return "Network error, please check your network connection."
    if "CORS" in message:
        return "The cross-origin request was blocked, please contact the administrator."
    return message or exc.__class__.__name__


class GeminiClient:
    """Posts single-turn image generation requests."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url.rstrip("/"),
            timeout=settings.request_timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    def build_request_body(
        self,
        prompt: str,
        *,
        aspect_ratio: str,
        base_image: str | None = None,
        base_image_mime_type: str | None = None,
    ) -> dict[str, Any]:
        """Return the JSON body; the inline image part precedes the text."""

        parts: list[dict[str, Any]] = []
        if base_image and base_image_mime_type:
            parts.append({"inlineData": {"mimeType": base_image_mime_type, "data": base_image}})
        parts.append({"text": prompt})
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseModalities": ["Image"],
                "imageConfig": {
                    "aspectRatio": aspect_ratio,
                    "imageSize": self._settings.image_size,
                },
            },
        }

    async def generate_content(
        self,
        api_key: str,
        prompt: str,
        *,
        aspect_ratio: str,
        base_image: str | None = None,
        base_image_mime_type: str | None = None,
    ) -> dict[str, Any]:
        """Call ``<model>:generateContent`` and return the decoded JSON body."""

        body = self.build_request_body(
            prompt,
            aspect_ratio=aspect_ratio,
            base_image=base_image,
            base_image_mime_type=base_image_mime_type,
        )
        endpoint = f"/{self._settings.image_model}:generateContent"
        logger.info(
            "Requesting image from %s (aspect=%s, reference=%s)",
            self._settings.image_model,
            aspect_ratio,
            len(body["contents"][0]["parts"]) > 1,
        )
        try:
            response = await self._client.post(
                endpoint,
                json=body,
                headers={"Authorization": f"Bearer {api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GeminiRequestError(
                f"API request failed: {exc.response.status_code} - {exc.response.text[:ERROR_BODY_LIMIT]}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise GeminiTransportError(friendly_error_message(exc)) from exc

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise GeminiRequestError(
                f"API returned a non-JSON body: {response.text[:ERROR_BODY_LIMIT]}",
                status_code=response.status_code,
            ) from exc
