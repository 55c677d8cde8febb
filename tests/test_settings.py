"""Tests for environment-driven settings."""

from __future__ import annotations

import logging

import pytest
import pytest_mock

from newspaper.config.settings import PLATFORM_H5, PLATFORM_WEAPP, get_settings
from newspaper.monitoring.logging import configure_logging


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NEWSPAPER_PLATFORM", raising=False)
    monkeypatch.delenv("NEWSPAPER_IMAGE_MODEL", raising=False)

    settings = get_settings()

    assert settings.platform == PLATFORM_H5
    assert settings.image_model == "gemini-3-pro-image-preview"
    assert not settings.uses_file_system


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWSPAPER_PLATFORM", "WEAPP")
    monkeypatch.setenv("NEWSPAPER_REQUEST_TIMEOUT", "15")

    settings = get_settings()

    assert settings.platform == PLATFORM_WEAPP
    assert settings.uses_file_system
    assert settings.request_timeout == 15.0


def test_unknown_platform_falls_back_to_h5(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWSPAPER_PLATFORM", "desktop")

    assert get_settings().platform == PLATFORM_H5


def test_env_file_is_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("NEWSPAPER_INVITE_CODE", "placeholder")
    monkeypatch.delenv("NEWSPAPER_INVITE_CODE")
    (tmp_path / ".env").write_text("# comment\nNEWSPAPER_INVITE_CODE=FROMFILE\n", encoding="utf-8")

    assert get_settings().invite_code == "FROMFILE"


def test_configure_logging_uses_settings_level(
    monkeypatch: pytest.MonkeyPatch,
    mocker: pytest_mock.MockerFixture,
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    basic_config = mocker.patch("newspaper.monitoring.logging.logging.basicConfig")

    configure_logging()

    assert basic_config.call_args.kwargs["level"] == logging.DEBUG
