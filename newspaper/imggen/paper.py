"""Paper presets offered in the settings screen."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ASPECT_RATIO = "2:3"


@dataclass(slots=True, frozen=True)
class PaperSize:
    """Named paper format mapped onto a ratio the image model accepts."""

    name: str
    width_mm: int
    height_mm: int
    aspect_ratio: str


PAPER_SIZES: tuple[PaperSize, ...] = (
    PaperSize("A4", 210, 297, "2:3"),
    PaperSize("A3", 297, 420, "2:3"),
    PaperSize("B5", 176, 250, "3:4"),
    PaperSize("Square", 200, 200, "1:1"),
    PaperSize("Poster", 500, 700, "4:5"),
)


def get_paper_size(index: int) -> PaperSize:
    """Return the preset at ``index``; unknown indices map to the first preset."""

    if 0 <= index < len(PAPER_SIZES):
        return PAPER_SIZES[index]
    return PAPER_SIZES[0]


def resolve_aspect_ratio(index: int, landscape: bool = False) -> str:
    """Return the ``W:H`` ratio for a preset, swapped for landscape sheets."""

    ratio = get_paper_size(index).aspect_ratio
    if not landscape:
        return ratio
    width, height = ratio.split(":", 1)
    return f"{height}:{width}"
