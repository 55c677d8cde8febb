"""Persistent user settings with default-on-error reads."""

from __future__ import annotations

import json
import logging
from typing import Any

from newspaper.imggen.prompt_builder import DEFAULT_STYLE, ImageStyle
from newspaper.storage.backends import KeyValueBackend

logger = logging.getLogger(__name__)

API_KEY = "gemini_api_key"
PAPER_SIZE_INDEX = "paper_size_index"
ORIENTATION = "orientation_landscape"
IMAGE_STYLE = "image_style"
SIGNATURE = "signature"


class ConfigStore:
    """Reads and writes scalar settings through a platform key-value backend."""

    def __init__(self, backend: KeyValueBackend | None) -> None:
        self._backend = backend

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when absent or unreadable."""

        if self._backend is None:
            return default
        try:
            value = self._backend.get_item(key)
        except Exception as exc:
            logger.warning("Failed to read setting %s: %s", key, exc)
            return default
        if value is None or value == "":
            return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Persist a setting; failures are logged and otherwise ignored."""

        if self._backend is None:
            logger.error("No storage backend available; setting %s was not saved.", key)
            return
        try:
            self._backend.set_item(key, value)
        except Exception as exc:
            logger.error("Failed to save setting %s: %s", key, exc)

    @property
    def api_key(self) -> str:
        value = self.get(API_KEY, "")
        return value if isinstance(value, str) else ""

    @api_key.setter
    def api_key(self, value: str) -> None:
        self.set(API_KEY, value)

    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def paper_size_index(self) -> int:
        value = self.get(PAPER_SIZE_INDEX, 0)
        if isinstance(value, bool):
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @paper_size_index.setter
    def paper_size_index(self, value: int) -> None:
        self.set(PAPER_SIZE_INDEX, int(value))

    @property
    def orientation(self) -> bool:
        """Landscape flag; the browser store hands booleans back as JSON text."""

        value = self.get(ORIENTATION, False)
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return False
        return value is True

    @orientation.setter
    def orientation(self, value: bool) -> None:
        self.set(ORIENTATION, bool(value))

    @property
    def image_style(self) -> ImageStyle:
        value = self.get(IMAGE_STYLE, DEFAULT_STYLE.value)
        try:
            return ImageStyle(value)
        except ValueError:
            return DEFAULT_STYLE

    @image_style.setter
    def image_style(self, value: ImageStyle | str) -> None:
        try:
            style = ImageStyle(value)
        except ValueError:
            logger.warning("Unknown image style %r, storing %s instead.", value, DEFAULT_STYLE.value)
            style = DEFAULT_STYLE
        self.set(IMAGE_STYLE, style.value)

    @property
    def signature(self) -> str:
        value = self.get(SIGNATURE, "")
        return value if isinstance(value, str) else ""

    @signature.setter
    def signature(self, value: str) -> None:
        self.set(SIGNATURE, value)
