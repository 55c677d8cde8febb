"""High-level flows used by the UI screens."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from newspaper.api import GeminiClient, UserCenterClient, UserCenterError
from newspaper.config.settings import Settings
from newspaper.imggen.image_gen import (
    GenerateCallbacks,
    GenerateOptions,
    GenerationResult,
    GenerationSuccess,
    ImageGenerationService,
)
from newspaper.imggen.paper import resolve_aspect_ratio
from newspaper.imggen.reference import ReferenceImage, load_reference_image
from newspaper.storage import ConfigStore, HistoryCache, HistoryImage, build_storage

logger = logging.getLogger(__name__)

MAX_THEME_LENGTH = 200
PHONE_PATTERN = re.compile(r"^1[3-9]\d{9}$")
OTHER_CHANNEL_MARKERS = ("其它渠道", "别的渠道", "已经存在")


@dataclass(slots=True)
class LoginOutcome:
    """Result of the register-or-login flow."""

    success: bool
    message: str
    api_key: str | None = None
    needs_manual_key: bool = False


def mask_api_key(key: str) -> str:
    """Hide most of ``key`` while keeping it recognisable."""

    length = len(key)
    if length <= 4:
        return "*" * length
    if length <= 8:
        return key[:2] + "*" * (length - 2)
    if length <= 12:
        return key[:4] + "*" * (length - 4)
    return key[:8] + "*" * (length - 12) + key[-4:]


class NewspaperLogic:
    """Wires settings, generation and history together for the screens."""

    def __init__(
        self,
        settings: Settings,
        config: ConfigStore,
        history: HistoryCache,
        client: GeminiClient,
        user_center: UserCenterClient,
    ) -> None:
        self._settings = settings
        self.config = config
        self.history = history
        self._client = client
        self._user_center = user_center
        self._image_service = ImageGenerationService(client, config)

    @classmethod
    def from_settings(cls, settings: Settings) -> "NewspaperLogic":
        """Build the object graph for the configured platform target."""

        backend, file_system = build_storage(settings)
        return cls(
            settings,
            ConfigStore(backend),
            HistoryCache(backend, file_system),
            GeminiClient(settings),
            UserCenterClient(settings),
        )

    async def close(self) -> None:
        await self._client.close()
        await self._user_center.close()

    async def generate_newspaper(
        self,
        theme: str,
        callbacks: GenerateCallbacks | None = None,
        *,
        reference: ReferenceImage | None = None,
    ) -> GenerationResult:
        """Generate an image for ``theme`` and record it in the history on success."""

        text = theme.strip()
        if not text:
            raise ValueError("Please enter a theme.")
        if len(text) > MAX_THEME_LENGTH:
            raise ValueError(f"The theme must be at most {MAX_THEME_LENGTH} characters.")

        aspect_ratio = resolve_aspect_ratio(self.config.paper_size_index, self.config.orientation)
        options = GenerateOptions.with_reference(reference, aspect_ratio)
        result = await self._image_service.generate(text, callbacks, options)
        if isinstance(result, GenerationSuccess):
            entry = self.history.add(result.image_ref)
            logger.info("Stored generated image %s in history.", entry.id)
        return result

    def add_uploaded_image(self, path: Path) -> HistoryImage:
        """Put a picture chosen by the user into the history."""

        reference = load_reference_image(path)
        return self.history.add(reference.data_url)

    def save_api_key(self, key: str) -> None:
        cleaned = key.strip()
        if not cleaned:
            raise ValueError("Please enter an API key.")
        self.config.api_key = cleaned

    def clear_api_key(self) -> None:
        self.config.api_key = ""

    async def register_or_login(self, phone: str) -> LoginOutcome:
        """
        Obtain an API key for ``phone``.

        Registration is tried first. Users registered through another channel
        get no key and must enter one manually; any other registration failure
        falls back to looking up the existing key.
        """

        phone = phone.strip()
        if not PHONE_PATTERN.match(phone):
            return LoginOutcome(success=False, message="Please enter a valid phone number.")

        try:
            registered = await self._user_center.register_user(phone)
        except UserCenterError as exc:
            logger.error("Registration request failed: %s", exc)
            return LoginOutcome(success=False, message=str(exc))

        if registered.success and registered.api_key:
            self.config.api_key = registered.api_key
            return LoginOutcome(success=True, message="Registered successfully.", api_key=registered.api_key)

        if any(marker in registered.message for marker in OTHER_CHANNEL_MARKERS):
            return LoginOutcome(success=False, message=registered.message, needs_manual_key=True)

        try:
            existing = await self._user_center.get_user_key(phone)
        except UserCenterError as exc:
            logger.error("API key lookup failed: %s", exc)
            return LoginOutcome(success=False, message=str(exc))

        if existing.success and existing.api_key:
            self.config.api_key = existing.api_key
            return LoginOutcome(success=True, message="Logged in successfully.", api_key=existing.api_key)
        return LoginOutcome(success=False, message=existing.message or "Login failed.")
