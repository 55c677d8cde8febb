"""Tests for the user center client."""

from __future__ import annotations

import json

import httpx
import pytest

from newspaper.api.user_center import UserCenterClient, UserCenterError
from newspaper.config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(user_center_url="https://users.test/api", invite_code="INVITE")


@pytest.mark.asyncio
async def test_register_user_posts_invite_code(settings: Settings) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            json={
                "success": True,
                "message": "ok",
                "code": 200,
                "result": {"apiKey": "sk-new"},
                "timestamp": 1700000000000,
            },
        )

    client = UserCenterClient(settings, transport=httpx.MockTransport(handler))
    response = await client.register_user("13800138000")
    await client.close()

    assert response.success
    assert response.api_key == "sk-new"
    assert captured[0].method == "POST"
    assert captured[0].url.path == "/api/registerUser"
    assert json.loads(captured[0].content) == {"inviteCode": "INVITE", "phone": "13800138000"}


@pytest.mark.asyncio
async def test_get_user_key_uses_query(settings: Settings) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"success": False, "message": "not found", "result": None})

    client = UserCenterClient(settings, transport=httpx.MockTransport(handler))
    response = await client.get_user_key("13800138000")
    await client.close()

    assert not response.success
    assert response.api_key is None
    assert captured[0].method == "GET"
    assert captured[0].url.path == "/api/getUserKey"
    assert captured[0].url.params["phone"] == "13800138000"
    assert captured[0].url.params["inviteCode"] == "INVITE"


@pytest.mark.asyncio
async def test_http_failure_raises(settings: Settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
    client = UserCenterClient(settings, transport=transport)

    with pytest.raises(UserCenterError) as exc_info:
        await client.register_user("13800138000")
    await client.close()

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_invalid_payload_raises(settings: Settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"success": "maybe"}))
    client = UserCenterClient(settings, transport=transport)

    with pytest.raises(UserCenterError):
        await client.get_user_key("13800138000")
    await client.close()


@pytest.mark.asyncio
async def test_timeout_comes_from_settings() -> None:
    settings = Settings(user_center_url="https://users.test/api", invite_code="INVITE", request_timeout=7.5)

    client = UserCenterClient(settings, transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    await client.close()

    assert client._client.timeout.read == 7.5
    assert client._client.timeout.connect == 7.5
