"""Extract an image reference from a generateContent response."""

from __future__ import annotations

import re
from typing import Any, Mapping

# Leading base64 characters of common image formats.
BASE64_SIGNATURES: tuple[tuple[str, str], ...] = (
    ("/9j/", "image/jpeg"),
    ("iVBOR", "image/png"),
    ("R0lGOD", "image/gif"),
    ("UklGR", "image/webp"),
)

_MARKDOWN_IMAGE = re.compile(r"!\[.*?\]\((.*?)\)")
_IMAGE_URL = re.compile(
    r"https?://[^\s\"'<>]+\.(?:png|jpg|jpeg|gif|webp)(?:\?[^\s\"'<>]*)?",
    re.IGNORECASE,
)


def response_parts(payload: Any) -> list[Any]:
    """Return ``candidates[0].content.parts`` or an empty list for other shapes."""

    if not isinstance(payload, Mapping):
        return []
    candidates = payload.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return []
    first = candidates[0]
    if not isinstance(first, Mapping):
        return []
    content = first.get("content") or {}
    if not isinstance(content, Mapping):
        return []
    parts = content.get("parts") or []
    return parts if isinstance(parts, list) else []


def extract_image_from_text(text: str) -> str | None:
    """Look for an image embedded in model text output."""

    if not text:
        return None
    if "data:image" in text:
        return text
    for prefix, mime_type in BASE64_SIGNATURES:
        if text.startswith(prefix):
            return f"data:{mime_type};base64,{text}"
    markdown = _MARKDOWN_IMAGE.search(text)
    if markdown:
        return markdown.group(1)
    url = _IMAGE_URL.search(text)
    if url:
        return url.group(0)
    return None


def extract_image(payload: Any) -> str | None:
    """Return the first image found in the response parts, or ``None``."""

    for part in response_parts(payload):
        if not isinstance(part, Mapping):
            continue
        inline = part.get("inlineData")
        if isinstance(inline, Mapping) and inline.get("data"):
            mime_type = inline.get("mimeType") or "image/png"
            return f"data:{mime_type};base64,{inline['data']}"
        text = part.get("text")
        if isinstance(text, str):
            image = extract_image_from_text(text)
            if image:
                return image
    return None
