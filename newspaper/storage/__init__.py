"""Device-side persistence: settings and image history."""

from .backends import (
    LocalStorageBackend,
    SandboxFileSystem,
    SyncStorageBackend,
    build_storage,
)
from .config_store import ConfigStore
from .history import HistoryCache, HistoryImage

__all__ = [
    "ConfigStore",
    "HistoryCache",
    "HistoryImage",
    "LocalStorageBackend",
    "SandboxFileSystem",
    "SyncStorageBackend",
    "build_storage",
]
