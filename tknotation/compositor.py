"""Draw a layout plan onto a Pillow surface."""

from __future__ import annotations

import io
import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .layout import (
    END_TEXT_FONT_SIZE,
    FALLBACK_BASELINE,
    FALLBACK_FONT_SIZE,
    ICON_SIZE,
    ICON_TOP,
    NAME_FONT_SIZE,
    NARROW_ICON_WIDTH,
    TEXT_BASELINE,
)
from .models import LayoutPlan, ResolvedToken
from .text_metrics import fit_font_size, load_font

logger = logging.getLogger("tknotation.compositor")

BACKGROUND_START = "background/start.png"
BACKGROUND_MIDDLE = "background/middle.png"
BACKGROUND_END = "background/end.png"
BACKGROUND_PATHS = (BACKGROUND_START, BACKGROUND_MIDDLE, BACKGROUND_END)

STRIP_FILL: Tuple[int, int, int, int] = (28, 28, 36, 255)
ANNOTATION_COLOR: Tuple[int, int, int, int] = (255, 255, 255, 255)
FALLBACK_COLOR: Tuple[int, int, int, int] = (255, 64, 64, 255)


class NotationError(Exception):
    """Base error for notation rendering."""


class SurfaceUnavailableError(NotationError):
    """Raised when no drawing surface can be obtained; nothing is drawn."""


def create_surface(plan: LayoutPlan):
    try:
        from PIL import Image
    except ImportError as exc:
        raise SurfaceUnavailableError("Pillow is required to render notation images") from exc

    if plan.width <= 0 or plan.height <= 0:
        raise SurfaceUnavailableError(f"Invalid canvas size {plan.width}x{plan.height}")
    try:
        return Image.new("RGBA", (plan.width, plan.height), (0, 0, 0, 0))
    except (ValueError, MemoryError) as exc:
        raise SurfaceUnavailableError(f"Unable to allocate {plan.width}x{plan.height} canvas: {exc}") from exc


def _decode_asset(
    path: str,
    asset_bytes: Mapping[str, bytes],
    decoded: Dict[str, Optional["Image.Image"]],
) -> Optional["Image.Image"]:
    from PIL import Image

    if path in decoded:
        return decoded[path]
    image = None
    data = asset_bytes.get(path)
    if not data:
        logger.warning("Asset %s missing at draw time", path)
    else:
        try:
            with Image.open(io.BytesIO(data)) as source:
                image = source.convert("RGBA")
        except OSError as exc:
            logger.warning("Failed to decode asset %s: %s", path, exc)
    decoded[path] = image
    return image


def _paste_segment(surface, draw, image, box: Tuple[int, int, int, int]) -> None:
    from PIL import Image

    left, top, width, height = box
    if width <= 0:
        return
    if image is None:
        draw.rectangle((left, top, left + width - 1, top + height - 1), fill=STRIP_FILL)
        return
    segment = image.resize((width, height), Image.LANCZOS)
    surface.paste(segment, (left, top), segment)


def _draw_background(surface, draw, plan: LayoutPlan, asset_bytes, decoded) -> None:
    start = _decode_asset(BACKGROUND_START, asset_bytes, decoded)
    _paste_segment(surface, draw, start, (0, 0, plan.start_width, plan.height))

    middle = _decode_asset(BACKGROUND_MIDDLE, asset_bytes, decoded) if plan.middle_count else None
    for index in range(plan.middle_count):
        left = plan.start_width + index * plan.middle_width
        _paste_segment(surface, draw, middle, (left, 0, plan.middle_width, plan.height))

    end = _decode_asset(BACKGROUND_END, asset_bytes, decoded)
    _paste_segment(surface, draw, end, (plan.end_x, 0, plan.end_width, plan.height))


def _draw_annotation(draw, text: str, font_size: int, x: int, max_width: int, anchor: str) -> None:
    size = fit_font_size(text, font_size, max_width, draw)
    if size != font_size:
        logger.debug("Shrunk annotation %r from %s to %s", text, font_size, size)
    draw.text((x, TEXT_BASELINE), text, fill=ANNOTATION_COLOR, font=load_font(size, "bold"), anchor=anchor)


def _draw_fallback(draw, text: str, x: int) -> None:
    draw.text(
        (x, FALLBACK_BASELINE),
        text,
        fill=FALLBACK_COLOR,
        font=load_font(FALLBACK_FONT_SIZE, "bold"),
        anchor="ls",
    )


def render(
    plan: LayoutPlan,
    resolved_tokens: Sequence[ResolvedToken],
    name: str,
    end_text: str,
    surface,
    asset_bytes: Mapping[str, bytes],
) -> None:
    """
    Composite background, annotations and moves onto ``surface``.

    Drawing order is fixed: start, middle tiles, end, name, end text, then
    each token at its planned offset. An icon whose bytes are missing or
    unreadable is drawn as its text in the space already reserved for it.
    """
    try:
        from PIL import Image, ImageDraw
    except ImportError as exc:
        raise SurfaceUnavailableError("Pillow is required to render notation images") from exc

    if surface is None:
        raise SurfaceUnavailableError("No drawing surface provided")
    if len(resolved_tokens) != len(plan.token_offsets):
        raise ValueError(
            f"Plan has {len(plan.token_offsets)} offsets for {len(resolved_tokens)} tokens"
        )

    draw = ImageDraw.Draw(surface)
    decoded: Dict[str, Optional[Image.Image]] = {}

    _draw_background(surface, draw, plan, asset_bytes, decoded)

    if name:
        _draw_annotation(draw, name, NAME_FONT_SIZE, plan.name_x, plan.name_max_width, "ls")
    if end_text:
        _draw_annotation(draw, end_text, END_TEXT_FONT_SIZE, plan.end_text_x, plan.end_text_max_width, "rs")

    for resolved, offset in zip(resolved_tokens, plan.token_offsets):
        if resolved.is_icon:
            icon = _decode_asset(resolved.asset_path, asset_bytes, decoded)
            if icon is not None:
                width = NARROW_ICON_WIDTH if resolved.is_narrow else ICON_SIZE
                icon = icon.resize((width, ICON_SIZE), Image.LANCZOS)
                surface.paste(icon, (offset, ICON_TOP), icon)
                continue
            logger.warning("Drawing %s as text; icon %s unavailable", resolved.token.text, resolved.asset_path)
        _draw_fallback(draw, resolved.fallback_text, offset)


__all__ = [
    "BACKGROUND_END",
    "BACKGROUND_MIDDLE",
    "BACKGROUND_PATHS",
    "BACKGROUND_START",
    "NotationError",
    "SurfaceUnavailableError",
    "create_surface",
    "render",
]
