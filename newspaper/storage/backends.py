"""Platform storage capabilities: key-value stores and the sandbox file system."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Protocol

from newspaper.config.settings import Settings

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueBackend(Protocol):
    """Synchronous key-value capability shared by both platform targets."""

    def get_item(self, key: str) -> Any:
        """Return the stored value or ``None`` when the key is absent."""

    def set_item(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``."""


class LocalStorageBackend:
    """Browser-style store: string values kept in a single JSON document."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._items: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._items is None:
            self._items = {}
            if self._path.exists():
                try:
                    payload = json.loads(self._path.read_text(encoding="utf-8"))
                    if not isinstance(payload, dict):
                        raise ValueError(f"Storage document {self._path} is not an object.")
                except (ValueError, OSError) as exc:
                    logger.warning("Discarding unreadable storage document %s: %s", self._path, exc)
                else:
                    self._items = {str(key): str(value) for key, value in payload.items()}
        return self._items

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        body = json.dumps(self._load(), ensure_ascii=False, indent=2)
        self._path.write_text(body, encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: Any) -> None:
        text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        self._load()[key] = text
        self._flush()


class SyncStorageBackend:
    """Mini-program style store: one JSON file per key, values keep their type."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def _key_path(self, key: str) -> Path:
        return self._root / f"{_SAFE_KEY.sub('_', key)}.json"

    def get_item(self, key: str) -> Any:
        path = self._key_path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def set_item(self, key: str, value: Any) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        body = json.dumps(value, ensure_ascii=False)
        self._key_path(key).write_text(body, encoding="utf-8")


class SandboxFileSystem:
    """User data directory the app is allowed to write image files into."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, file_name: str) -> Path:
        return self.root / file_name

    def write_bytes(self, file_name: str, payload: bytes) -> Path:
        """Write ``payload`` and return the absolute file path."""

        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(file_name)
        path.write_bytes(payload)
        return path.resolve()

    def contains(self, candidate: str) -> bool:
        """Return ``True`` when ``candidate`` points inside the sandbox root."""

        try:
            Path(candidate).resolve().relative_to(self.root.resolve())
        except (ValueError, OSError):
            return False
        return True

    def unlink(self, path: str) -> None:
        """Delete ``path``; raises ``FileNotFoundError`` when it is already gone."""

        Path(path).unlink()


def build_storage(settings: Settings) -> tuple[KeyValueBackend, SandboxFileSystem | None]:
    """Select the storage strategy for the configured platform target."""

    root = Path(settings.storage_root).expanduser()
    if settings.uses_file_system:
        logger.debug("Using mini-program storage under %s", root)
        return SyncStorageBackend(root / "kv"), SandboxFileSystem(root / "usr")
    logger.debug("Using browser storage under %s", root)
    return LocalStorageBackend(root / "local_storage.json"), None
