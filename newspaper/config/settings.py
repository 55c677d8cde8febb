"""Settings loader for the newspaper generation core."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PLATFORM_H5 = "h5"
PLATFORM_WEAPP = "weapp"


def _load_env_file(path: str = ".env") -> None:
    """Populate environment variables from a .env file if present."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(slots=True, frozen=True)
class Settings:
    """Deployment settings; user preferences live in the config store."""

    platform: str = PLATFORM_H5
    log_level: str = "INFO"
    api_base_url: str = "https://maas-openapi.wanjiedata.com/api/v1beta/models"
    image_model: str = "gemini-3-pro-image-preview"
    image_size: str = "1K"
    user_center_url: str = "https://maas-openapi.wanjiedata.com/api/user"
    invite_code: str = "xO9h1BTA"
    storage_root: str = "storage"
    request_timeout: float = 120.0

    @property
    def uses_file_system(self) -> bool:
        """Mini-program builds keep image bytes in sandbox files."""

        return self.platform == PLATFORM_WEAPP


def _build_settings() -> Settings:
    _load_env_file()
    platform = os.getenv("NEWSPAPER_PLATFORM", PLATFORM_H5).strip().lower()
    if platform not in (PLATFORM_H5, PLATFORM_WEAPP):
        platform = PLATFORM_H5
    return Settings(
        platform=platform,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        api_base_url=os.getenv(
            "NEWSPAPER_API_BASE_URL",
            "https://maas-openapi.wanjiedata.com/api/v1beta/models",
        ),
        image_model=os.getenv("NEWSPAPER_IMAGE_MODEL", "gemini-3-pro-image-preview"),
        image_size=os.getenv("NEWSPAPER_IMAGE_SIZE", "1K"),
        user_center_url=os.getenv(
            "NEWSPAPER_USER_CENTER_URL",
            "https://maas-openapi.wanjiedata.com/api/user",
        ),
        invite_code=os.getenv("NEWSPAPER_INVITE_CODE", "xO9h1BTA"),
        storage_root=os.getenv("NEWSPAPER_STORAGE_ROOT", "storage"),
        request_timeout=float(os.getenv("NEWSPAPER_REQUEST_TIMEOUT", "120")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return _build_settings()
