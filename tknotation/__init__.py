"""Render Tekken move notation into composited button strips."""

from . import assets, compositor, layout, models, parser, resolver, text_metrics, utils  # noqa: F401

__all__ = [
    "assets",
    "compositor",
    "layout",
    "models",
    "parser",
    "resolver",
    "text_metrics",
    "utils",
]
