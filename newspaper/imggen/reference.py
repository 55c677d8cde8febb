"""Reference image loading for image-to-image requests."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

MAX_REFERENCE_SIDE = 1536


@dataclass(slots=True, frozen=True)
class ReferenceImage:
    """Raw base64 payload plus MIME type, as sent in an inline image part."""

    data: str
    mime_type: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def load_reference_image(source_path: Path, max_side: int = MAX_REFERENCE_SIDE) -> ReferenceImage:
    """Open ``source_path``, shrink it to ``max_side`` and re-encode as JPEG."""

    try:
        with Image.open(source_path) as img:
            img = img.convert("RGB")
            img.thumbnail((max_side, max_side))
            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=90)
    except (FileNotFoundError, UnidentifiedImageError) as exc:
        raise ValueError(f"File {source_path} is not a supported image.") from exc
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return ReferenceImage(data=encoded, mime_type="image/jpeg")
