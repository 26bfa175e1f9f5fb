"""End-to-end notation rendering: parse, resolve, lay out, composite."""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import discord

from .assets import AssetFetcher
from .compositor import BACKGROUND_PATHS, create_surface, render
from .layout import plan
from .models import ResolvedToken, Token
from .parser import parse
from .resolver import resolve_all
from .utils import bool_from_env

logger = logging.getLogger("tknotation.pipeline")

EXPAND_SHORTHAND = bool_from_env("TKN_EXPAND_SHORTHAND", True)


async def _fetch_quietly(fetch: AssetFetcher, path: str) -> Optional[bytes]:
    try:
        return await fetch(path)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Asset fetch raised for %s: %r", path, exc)
        return None


async def fetch_assets(fetch: AssetFetcher, paths: Iterable[str]) -> Dict[str, bytes]:
    """Fetch distinct paths concurrently; failed paths are left out of the result."""
    unique = list(dict.fromkeys(paths))
    results = await asyncio.gather(*(_fetch_quietly(fetch, path) for path in unique))
    return {path: data for path, data in zip(unique, results) if data}


async def resolve_tokens(
    tokens: Sequence[Token],
    fetch: AssetFetcher,
    extra_paths: Iterable[str] = (),
) -> Tuple[List[ResolvedToken], Dict[str, bytes]]:
    """
    Classify every token and fetch its icon. Tokens whose icon could not be
    fetched are turned into text fallbacks before layout sees them.
    """
    classified = resolve_all(tokens)
    icon_paths = [resolved.asset_path for resolved in classified if resolved.is_icon]
    assets = await fetch_assets(fetch, [*extra_paths, *icon_paths])

    resolved_tokens: List[ResolvedToken] = []
    for resolved in classified:
        if resolved.is_icon and resolved.asset_path not in assets:
            logger.info("No icon for %s (%s); using text", resolved.token.text, resolved.asset_path)
            resolved = resolved.as_text()
        resolved_tokens.append(resolved)
    return resolved_tokens, assets


async def render_notation(source: str, fetch: AssetFetcher, expand_shorthand: Optional[bool] = None):
    """Render ``source`` to a new RGBA Pillow image owned by the caller."""
    if expand_shorthand is None:
        expand_shorthand = EXPAND_SHORTHAND
    parsed = parse(source, expand_shorthand_motions=expand_shorthand)
    resolved_tokens, assets = await resolve_tokens(parsed.tokens, fetch, extra_paths=BACKGROUND_PATHS)
    layout = plan(resolved_tokens, parsed.name, parsed.end_text)
    surface = create_surface(layout)
    render(layout, resolved_tokens, parsed.name, parsed.end_text, surface, assets)
    logger.debug("Rendered %r as %sx%s", source, layout.width, layout.height)
    return surface


async def render_notation_png(source: str, fetch: AssetFetcher, expand_shorthand: Optional[bool] = None) -> bytes:
    image = await render_notation(source, fetch, expand_shorthand=expand_shorthand)
    output = io.BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


async def render_notation_file(
    source: str,
    fetch: AssetFetcher,
    filename: str = "tekken-notation.png",
    expand_shorthand: Optional[bool] = None,
) -> discord.File:
    data = await render_notation_png(source, fetch, expand_shorthand=expand_shorthand)
    return discord.File(fp=io.BytesIO(data), filename=filename, description="Tekken notation")


__all__ = [
    "fetch_assets",
    "render_notation",
    "render_notation_file",
    "render_notation_png",
    "resolve_tokens",
]
