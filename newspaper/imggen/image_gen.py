"""Gemini-based newspaper image generation service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from newspaper.api.gemini_client import (
    GeminiClient,
    GeminiRequestError,
    GeminiTransportError,
    friendly_error_message,
)
from newspaper.imggen.paper import DEFAULT_ASPECT_RATIO
from newspaper.imggen.prompt_builder import PromptBuilder
from newspaper.imggen.reference import ReferenceImage
from newspaper.imggen.response_parser import extract_image
from newspaper.storage.config_store import ConfigStore

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Please configure the API key first."
EXTRACTION_MESSAGE = "Failed to generate an image, please retry."
_LOGGED_PAYLOAD_LIMIT = 2000


class ErrorKind(str, Enum):
    """Where a generation attempt failed."""

    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    EXTRACTION = "extraction"


@dataclass(slots=True, frozen=True)
class GenerationSuccess:
    image_ref: str


@dataclass(slots=True, frozen=True)
class GenerationFailure:
    kind: ErrorKind
    message: str


GenerationResult = GenerationSuccess | GenerationFailure


@dataclass(slots=True)
class GenerateCallbacks:
    """Optional lifecycle hooks; exactly one of ``on_complete``/``on_error`` fires."""

    on_start: Callable[[], Any] | None = None
    on_complete: Callable[[str], Any] | None = None
    on_error: Callable[[str], Any] | None = None


@dataclass(slots=True)
class GenerateOptions:
    """Per-request options."""

    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    base_image: str | None = None
    base_image_mime_type: str | None = None

    @classmethod
    def with_reference(
        cls,
        reference: ReferenceImage | None,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
    ) -> "GenerateOptions":
        if reference is None:
            return cls(aspect_ratio=aspect_ratio)
        return cls(
            aspect_ratio=aspect_ratio,
            base_image=reference.data,
            base_image_mime_type=reference.mime_type,
        )

    @property
    def has_base_image(self) -> bool:
        return bool(self.base_image and self.base_image_mime_type)


class ImageGenerationService:
    """Coordinates prompt building, the API call and image extraction."""

    def __init__(
        self,
        client: GeminiClient,
        config: ConfigStore,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._prompt_builder = prompt_builder or PromptBuilder()

    async def generate(
        self,
        prompt: str,
        callbacks: GenerateCallbacks | None = None,
        options: GenerateOptions | None = None,
        *,
        raw_prompt: bool = False,
    ) -> GenerationResult:
        """
        Generate a newspaper image for ``prompt``.

        Failures never raise: they are reported through ``callbacks.on_error``
        and returned as :class:`GenerationFailure`. Set ``raw_prompt`` when
        ``prompt`` is already the final instruction text.
        """

        callbacks = callbacks or GenerateCallbacks()
        options = options or GenerateOptions()

        api_key = self._config.api_key
        if not api_key:
            return self._fail(callbacks, ErrorKind.CONFIGURATION, MISSING_KEY_MESSAGE)

        if callbacks.on_start:
            callbacks.on_start()

        final_prompt = prompt
        if not raw_prompt:
            final_prompt = self._prompt_builder.build(
                prompt,
                self._config.image_style,
                signature=self._config.signature,
                has_base_image=options.has_base_image,
            )

        try:
            payload = await self._client.generate_content(
                api_key,
                final_prompt,
                aspect_ratio=options.aspect_ratio or DEFAULT_ASPECT_RATIO,
                base_image=options.base_image,
                base_image_mime_type=options.base_image_mime_type,
            )
        except GeminiRequestError as exc:
            logger.error("Image request rejected (status=%s): %s", exc.status_code, exc)
            return self._fail(callbacks, ErrorKind.PROTOCOL, str(exc))
        except GeminiTransportError as exc:
            logger.error("Image request failed in transport: %s", exc)
            return self._fail(callbacks, ErrorKind.TRANSPORT, str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure while requesting an image.")
            return self._fail(callbacks, ErrorKind.TRANSPORT, friendly_error_message(exc))

        image_ref = extract_image(payload)
        if image_ref is None:
            logger.warning(
                "Generation response contained no image: %s",
                repr(payload)[:_LOGGED_PAYLOAD_LIMIT],
            )
            return self._fail(callbacks, ErrorKind.EXTRACTION, EXTRACTION_MESSAGE)

        if callbacks.on_complete:
            callbacks.on_complete(image_ref)
        return GenerationSuccess(image_ref=image_ref)

    @staticmethod
    def _fail(callbacks: GenerateCallbacks, kind: ErrorKind, message: str) -> GenerationFailure:
        if callbacks.on_error:
            callbacks.on_error(message)
        return GenerationFailure(kind=kind, message=message)
