"""Tests for the generateContent HTTP client."""

from __future__ import annotations

import json

import httpx
import pytest

from newspaper.api.gemini_client import (
    GeminiClient,
    GeminiRequestError,
    GeminiTransportError,
    friendly_error_message,
)
from newspaper.config.settings import Settings


@pytest.mark.asyncio
async def test_request_shape_with_reference_image(h5_settings: Settings) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"candidates": []})

    client = GeminiClient(h5_settings, transport=httpx.MockTransport(handler))
    try:
        payload = await client.generate_content(
            "sk-test",
            "draw",
            aspect_ratio="3:2",
            base_image="QUJD",
            base_image_mime_type="image/jpeg",
        )
    finally:
        await client.close()

    assert payload == {"candidates": []}
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.test/v1beta/models/gemini-3-pro-image-preview:generateContent"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert request.headers["Content-Type"] == "application/json"
    body = json.loads(request.content)
    assert body == {
        "contents": [
            {
                "parts": [
                    {"inlineData": {"mimeType": "image/jpeg", "data": "QUJD"}},
                    {"text": "draw"},
                ],
            },
        ],
        "generationConfig": {
            "responseModalities": ["Image"],
            "imageConfig": {"aspectRatio": "3:2", "imageSize": "1K"},
        },
    }


def test_image_part_requires_mime_type(h5_settings: Settings) -> None:
    client = GeminiClient(h5_settings)

    body = client.build_request_body("draw", aspect_ratio="2:3", base_image="QUJD")

    assert body["contents"][0]["parts"] == [{"text": "draw"}]


@pytest.mark.asyncio
async def test_non_2xx_raises_with_status_and_body(h5_settings: Settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(401, text="invalid api key"))
    client = GeminiClient(h5_settings, transport=transport)

    with pytest.raises(GeminiRequestError) as exc_info:
        await client.generate_content("bad", "draw", aspect_ratio="2:3")
    await client.close()

    assert exc_info.value.status_code == 401
    assert "401" in str(exc_info.value)
    assert "invalid api key" in str(exc_info.value)


@pytest.mark.asyncio
async def test_connect_error_becomes_friendly_transport_error(h5_settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = GeminiClient(h5_settings, transport=httpx.MockTransport(handler))

    with pytest.raises(GeminiTransportError) as exc_info:
        await client.generate_content("sk-test", "draw", aspect_ratio="2:3")
    await client.close()

    assert "check your network connection or whether the API key" in str(exc_info.value)


def test_friendly_messages() -> None:
    assert "cross-origin" in friendly_error_message(RuntimeError("blocked by CORS policy"))
    assert friendly_error_message(RuntimeError("NetworkError when attempting")).startswith("Network error")
    assert "API key" in friendly_error_message(RuntimeError("Failed to fetch"))
    assert "too long" in friendly_error_message(httpx.ReadTimeout("timed out"))
    assert friendly_error_message(RuntimeError("quota exhausted")) == "quota exhausted"


def test_network_markers_take_precedence_over_cors() -> None:
    mixed = RuntimeError("NetworkError: request blocked by CORS policy")
    assert friendly_error_message(mixed) == "Network error, please check your network connection."

    request = httpx.Request("POST", "https://api.test/model:generateContent")
    refused = httpx.ConnectError("CORS preflight failed", request=request)
    assert "whether the API key is correct" in friendly_error_message(refused)
