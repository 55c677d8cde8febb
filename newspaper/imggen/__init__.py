"""Prompt building, response parsing and paper presets."""

from .paper import PAPER_SIZES, PaperSize, resolve_aspect_ratio
from .prompt_builder import ImageStyle, PromptBuilder
from .response_parser import extract_image

__all__ = [
    "ImageStyle",
    "PAPER_SIZES",
    "PaperSize",
    "PromptBuilder",
    "extract_image",
    "resolve_aspect_ratio",
]
