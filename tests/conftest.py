"""Shared fixtures for the newspaper core tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from newspaper.config.settings import PLATFORM_H5, PLATFORM_WEAPP, Settings
from newspaper.storage import (
    ConfigStore,
    HistoryCache,
    LocalStorageBackend,
    SandboxFileSystem,
    SyncStorageBackend,
)


@pytest.fixture
def h5_settings(tmp_path: Path) -> Settings:
    return Settings(platform=PLATFORM_H5, storage_root=str(tmp_path), api_base_url="https://api.test/v1beta/models")


@pytest.fixture
def weapp_settings(tmp_path: Path) -> Settings:
    return Settings(platform=PLATFORM_WEAPP, storage_root=str(tmp_path), api_base_url="https://api.test/v1beta/models")


@pytest.fixture
def local_backend(tmp_path: Path) -> LocalStorageBackend:
    return LocalStorageBackend(tmp_path / "local_storage.json")


@pytest.fixture
def sync_backend(tmp_path: Path) -> SyncStorageBackend:
    return SyncStorageBackend(tmp_path / "kv")


@pytest.fixture
def file_system(tmp_path: Path) -> SandboxFileSystem:
    return SandboxFileSystem(tmp_path / "usr")


@pytest.fixture
def config(local_backend: LocalStorageBackend) -> ConfigStore:
    return ConfigStore(local_backend)


@pytest.fixture
def file_history(sync_backend: SyncStorageBackend, file_system: SandboxFileSystem) -> HistoryCache:
    return HistoryCache(sync_backend, file_system)
