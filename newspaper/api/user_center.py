"""Client for the user center that provisions API keys."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from newspaper.config.settings import Settings

logger = logging.getLogger(__name__)


class UserCenterError(RuntimeError):
    """Raised when the user center cannot be reached or answers garbage."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class UserKeyResult(BaseModel):
    """Payload returned on successful registration or lookup."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_key: str | None = Field(default=None, alias="apiKey")


class UserCenterResponse(BaseModel):
    """Envelope shared by ``registerUser`` and ``getUserKey``."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    message: str = ""
    code: int | None = None
    result: UserKeyResult | None = None
    timestamp: int | None = None

    @property
    def api_key(self) -> str | None:
        return self.result.api_key if self.result else None


class UserCenterClient:
    """Registers phone numbers and looks up their API keys."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.user_center_url.rstrip("/"),
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> UserCenterResponse:
        try:
            response = await self._client.request(method, endpoint, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise UserCenterError(
                f"User center returned {exc.response.status_code}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise UserCenterError(f"User center is unreachable: {exc}") from exc
        except ValueError as exc:
            raise UserCenterError("User center returned a non-JSON response.") from exc

        try:
            return UserCenterResponse.model_validate(payload)
        except ValidationError as exc:
            logger.error("Invalid user center payload: %s", payload)
            raise UserCenterError("User center returned an unexpected response format.") from exc

    async def register_user(self, phone: str) -> UserCenterResponse:
        """Register ``phone`` with the configured invite code."""

        return await self._request(
            "POST",
            "/registerUser",
            json={"inviteCode": self._settings.invite_code, "phone": phone},
        )

    async def get_user_key(self, phone: str) -> UserCenterResponse:
        """Look up the API key of an already registered phone number."""

        return await self._request(
            "GET",
            "/getUserKey",
            params={"phone": phone, "inviteCode": self._settings.invite_code},
        )
