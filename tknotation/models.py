"""Dataclasses and shared type definitions for notation rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class IconClass(str, Enum):
    """Asset categories an icon token can belong to."""

    ATTACK = "attack-buttons"
    HOLD = "hold-direction"
    PRESS = "press-direction"
    MISC = "misc"


@dataclass(frozen=True)
class Token:
    raw: str
    text: str


@dataclass(frozen=True)
class ParsedNotation:
    name: str = ""
    end_text: str = ""
    tokens: Tuple[Token, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class IconAsset:
    icon_class: IconClass
    path: str


@dataclass(frozen=True)
class TextFallback:
    text: str


Resolution = Union[IconAsset, TextFallback]


@dataclass(frozen=True)
class ResolvedToken:
    token: Token
    resolution: Resolution

    @property
    def is_icon(self) -> bool:
        return isinstance(self.resolution, IconAsset)

    @property
    def asset_path(self) -> Optional[str]:
        if isinstance(self.resolution, IconAsset):
            return self.resolution.path
        return None

    @property
    def is_narrow(self) -> bool:
        """Misc punctuation icons are drawn at half the tile width."""
        return isinstance(self.resolution, IconAsset) and self.resolution.icon_class is IconClass.MISC

    @property
    def fallback_text(self) -> str:
        if isinstance(self.resolution, TextFallback):
            return self.resolution.text
        return self.token.text

    def as_text(self) -> "ResolvedToken":
        return ResolvedToken(self.token, TextFallback(self.token.text))


@dataclass(frozen=True)
class LayoutPlan:
    """Pre-computed canvas geometry; every field is known before a surface exists."""

    width: int
    height: int
    start_width: int
    middle_width: int
    middle_count: int
    end_width: int
    moves_width: int
    name_reserve: int
    end_text_reserve: int
    gap: int
    token_offsets: Tuple[int, ...]
    token_advances: Tuple[int, ...]
    name_x: int
    end_text_x: int
    name_max_width: int
    end_text_max_width: int

    @property
    def end_x(self) -> int:
        return self.width - self.end_width


__all__ = [
    "IconAsset",
    "IconClass",
    "LayoutPlan",
    "ParsedNotation",
    "Resolution",
    "ResolvedToken",
    "TextFallback",
    "Token",
]
