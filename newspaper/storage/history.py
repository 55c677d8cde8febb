"""Bounded, newest-first history of generated images."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from newspaper.storage.backends import KeyValueBackend, SandboxFileSystem

logger = logging.getLogger(__name__)

HISTORY_KEY = "generated_images_history"
MAX_HISTORY = 3
FILE_PREFIX = "newspaper_"

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


@dataclass(slots=True)
class HistoryImage:
    """A generated image kept on the device."""

    id: str
    url: str
    created_at: int

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "HistoryImage":
        return cls(
            id=str(payload["id"]),
            url=str(payload["url"]),
            created_at=int(payload.get("created_at", 0)),
        )


def _decode_data_url(image_ref: str) -> tuple[bytes, str] | None:
    """Return ``(bytes, extension)`` for a base64 data URL, else ``None``."""

    if not image_ref.startswith("data:") or "," not in image_ref:
        return None
    header, encoded = image_ref.split(",", 1)
    if ";base64" not in header:
        return None
    mime_type = header[len("data:"):].split(";", 1)[0].lower()
    try:
        payload = base64.b64decode(encoded, validate=False)
    except (ValueError, binascii.Error):
        return None
    return payload, _EXTENSIONS.get(mime_type, "png")


class HistoryCache:
    """Keeps the three most recent images and owns the files written for them."""

    def __init__(
        self,
        backend: KeyValueBackend | None,
        file_system: SandboxFileSystem | None = None,
        *,
        max_items: int = MAX_HISTORY,
    ) -> None:
        self._backend = backend
        self._fs = file_system
        self._max_items = max_items

    def list(self) -> list[HistoryImage]:
        """Return stored entries, newest first; unreadable storage yields ``[]``."""

        if self._backend is None:
            return []
        try:
            raw = self._backend.get_item(HISTORY_KEY)
            if raw is None:
                return []
            payload = json.loads(raw) if isinstance(raw, str) else raw
            if not isinstance(payload, list):
                return []
        except (ValueError, TypeError, OSError) as exc:
            logger.warning("History storage is unreadable, starting empty: %s", exc)
            return []

        items: list[HistoryImage] = []
        for item in payload:
            try:
                items.append(HistoryImage.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed history entry %r: %s", item, exc)
        return items

    def add(self, image_ref: str) -> HistoryImage:
        """Persist ``image_ref`` and prepend it, evicting entries beyond capacity."""

        image_id = uuid.uuid4().hex
        entry = HistoryImage(
            id=image_id,
            url=self._persist_image(image_id, image_ref),
            created_at=int(time.time() * 1000),
        )
        items = [entry, *self.list()]
        kept, dropped = items[: self._max_items], items[self._max_items:]
        for stale in dropped:
            self._delete_file(stale.url)
        self._save(kept)
        return entry

    def remove(self, image_id: str) -> None:
        """Remove an entry and its backing file; unknown ids are ignored."""

        items = self.list()
        target = next((item for item in items if item.id == image_id), None)
        if target is None:
            return
        self._delete_file(target.url)
        self._save([item for item in items if item.id != image_id])

    def clear(self) -> None:
        """Drop every entry together with the files the cache wrote."""

        for item in self.list():
            self._delete_file(item.url)
        self._save([])

    def owns(self, url: str) -> bool:
        """Return ``True`` for file paths this cache created."""

        if self._fs is None or url.startswith(("data:", "http://", "https://")):
            return False
        return Path(url).name.startswith(FILE_PREFIX) and self._fs.contains(url)

    def _persist_image(self, image_id: str, image_ref: str) -> str:
        if self._fs is None:
            return image_ref
        decoded = _decode_data_url(image_ref)
        if decoded is None:
            return image_ref
        payload, extension = decoded
        try:
            path = self._fs.write_bytes(f"{FILE_PREFIX}{image_id}.{extension}", payload)
        except OSError as exc:
            logger.error("Failed to write history image %s, keeping data URL: %s", image_id, exc)
            return image_ref
        return str(path)

    def _delete_file(self, url: str) -> None:
        if not self.owns(url):
            return
        try:
            self._fs.unlink(url)
        except FileNotFoundError:
            logger.debug("History file %s already removed.", url)
        except OSError as exc:
            logger.warning("Failed to delete history file %s: %s", url, exc)

    def _save(self, items: list[HistoryImage]) -> None:
        if self._backend is None:
            logger.error("No storage backend available; history was not saved.")
            return
        try:
            self._backend.set_item(HISTORY_KEY, json.dumps([asdict(item) for item in items]))
        except Exception as exc:
            logger.error("Failed to save image history: %s", exc)
