"""Text width estimation, measurement and shrink-to-fit."""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from .utils import path_from_env

logger = logging.getLogger("tknotation.text_metrics")

# Average glyph width as a fraction of the font size.
CHAR_WIDTH_FACTOR = 0.6
MIN_FONT_SIZE = 10

FONT_REGULAR_PATH = path_from_env("TKN_FONT_REGULAR")
FONT_BOLD_PATH = path_from_env("TKN_FONT_BOLD")

_FONT_STYLE_PATHS: Dict[str, Optional[Path]] = {
    "regular": FONT_REGULAR_PATH,
    "bold": FONT_BOLD_PATH,
}


def estimate_width(text: str, font_size: int) -> int:
    """Fast width guess usable before any drawing surface exists."""
    if not text:
        return 0
    # Rounding first keeps float noise (13.200000000000001) from adding a pixel.
    return math.ceil(round(len(text) * font_size * CHAR_WIDTH_FACTOR, 6))


@lru_cache(maxsize=64)
def load_font(size: int, style: str = "bold"):
    from PIL import ImageFont

    style = (style or "regular").lower()
    style_sequence = {
        "regular": ["regular"],
        "bold": ["bold", "regular"],
    }.get(style, ["regular"])

    attempted = set()
    for style_key in style_sequence:
        candidate = _FONT_STYLE_PATHS.get(style_key)
        if not candidate or candidate in attempted:
            continue
        attempted.add(candidate)
        if candidate.exists():
            try:
                return ImageFont.truetype(str(candidate), size=size)
            except OSError as exc:
                logger.warning("Failed to load font %s: %s", candidate, exc)
        else:
            logger.debug("Font candidate missing -> %s", candidate)
    return ImageFont.load_default(size=size)


def measure_width(text: str, font_size: int, draw) -> float:
    """Exact rendered width using the drawing context's text measurement."""
    if not text:
        return 0.0
    return draw.textlength(text, font=load_font(font_size, "bold"))


def fit_font_size(text: str, font_size: int, max_width: float, draw, floor: int = MIN_FONT_SIZE) -> int:
    """
    Shrink ``font_size`` one step at a time until ``text`` fits ``max_width``.

    Never goes below ``floor``; text that still overflows at the floor is drawn
    at the floor size and allowed to clip.
    """
    size = font_size
    while size > floor and measure_width(text, size, draw) > max_width:
        size -= 1
    return size


__all__ = [
    "CHAR_WIDTH_FACTOR",
    "MIN_FONT_SIZE",
    "estimate_width",
    "fit_font_size",
    "load_font",
    "measure_width",
]
