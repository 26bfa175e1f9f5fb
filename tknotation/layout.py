"""Canvas geometry computed ahead of drawing."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

from .models import LayoutPlan, ResolvedToken
from .text_metrics import estimate_width

logger = logging.getLogger("tknotation.layout")

START_WIDTH = 110
MIDDLE_WIDTH = 50
END_WIDTH = 10
CANVAS_HEIGHT = 121

NAME_FONT_SIZE = 22
END_TEXT_FONT_SIZE = 18
FALLBACK_FONT_SIZE = 17

# Reserved between name and end text when both are present.
ANNOTATION_GAP = 100
FALLBACK_PADDING = 10
TEXT_EDGE_PADDING = 20

ICON_SIZE = MIDDLE_WIDTH
NARROW_ICON_WIDTH = MIDDLE_WIDTH // 2
ICON_TOP = 55
TEXT_BASELINE = 35
FALLBACK_BASELINE = 88


def token_advance(resolved: ResolvedToken) -> int:
    if resolved.is_icon:
        return NARROW_ICON_WIDTH if resolved.is_narrow else ICON_SIZE
    return estimate_width(resolved.fallback_text, FALLBACK_FONT_SIZE) + FALLBACK_PADDING


def middle_tile_count(span: int, tile_width: int = MIDDLE_WIDTH) -> int:
    if span <= 0:
        return 0
    return math.ceil(span / tile_width)


def plan(resolved_tokens: Sequence[ResolvedToken], name: str = "", end_text: str = "") -> LayoutPlan:
    advances: List[int] = []
    offsets: List[int] = []
    cursor = START_WIDTH
    for resolved in resolved_tokens:
        advance = token_advance(resolved)
        offsets.append(cursor)
        advances.append(advance)
        cursor += advance
    moves_width = sum(advances)

    name_reserve = estimate_width(name, NAME_FONT_SIZE)
    end_text_reserve = estimate_width(end_text, END_TEXT_FONT_SIZE)
    gap = ANNOTATION_GAP if name and end_text else 0

    width = START_WIDTH + moves_width + END_WIDTH + name_reserve + end_text_reserve + gap
    span = width - START_WIDTH - END_WIDTH

    usable = width - 2 * TEXT_EDGE_PADDING
    name_max_width = max(0, usable - (end_text_reserve + gap if end_text else 0))
    end_text_max_width = max(0, usable - (name_reserve + gap if name else 0))

    layout = LayoutPlan(
        width=width,
        height=CANVAS_HEIGHT,
        start_width=START_WIDTH,
        middle_width=MIDDLE_WIDTH,
        middle_count=middle_tile_count(span),
        end_width=END_WIDTH,
        moves_width=moves_width,
        name_reserve=name_reserve,
        end_text_reserve=end_text_reserve,
        gap=gap,
        token_offsets=tuple(offsets),
        token_advances=tuple(advances),
        name_x=TEXT_EDGE_PADDING,
        end_text_x=width - TEXT_EDGE_PADDING,
        name_max_width=name_max_width,
        end_text_max_width=end_text_max_width,
    )
    logger.debug(
        "Layout: %s tokens -> %sx%s (moves=%s middle_count=%s)",
        len(advances),
        layout.width,
        layout.height,
        moves_width,
        layout.middle_count,
    )
    return layout


__all__ = [
    "ANNOTATION_GAP",
    "CANVAS_HEIGHT",
    "END_TEXT_FONT_SIZE",
    "END_WIDTH",
    "FALLBACK_BASELINE",
    "FALLBACK_FONT_SIZE",
    "FALLBACK_PADDING",
    "ICON_SIZE",
    "ICON_TOP",
    "MIDDLE_WIDTH",
    "NAME_FONT_SIZE",
    "NARROW_ICON_WIDTH",
    "START_WIDTH",
    "TEXT_BASELINE",
    "TEXT_EDGE_PADDING",
    "middle_tile_count",
    "plan",
    "token_advance",
]
