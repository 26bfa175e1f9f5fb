"""Map move tokens to icon assets or a text fallback."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

from .models import IconAsset, IconClass, Resolution, ResolvedToken, TextFallback, Token

logger = logging.getLogger("tknotation.resolver")

LEGAL_ATTACK_BUTTONS = frozenset(
    {
        "1",
        "2",
        "3",
        "4",
        "1+2",
        "1+3",
        "1+4",
        "2+3",
        "2+4",
        "3+4",
        "1+2+3",
        "1+2+4",
        "1+3+4",
        "2+3+4",
        "1+2+3+4",
    }
)
MISC_SYMBOLS = ("-", "[", "]")

_DIGIT = re.compile(r"\d")
_UPPER = re.compile(r"[A-Z]+")
_LOWER = re.compile(r"[a-z]+")


def asset_path(icon_class: IconClass, key: str) -> str:
    return f"{icon_class.value}/{key}.png"


def is_legal_attack(token: str) -> bool:
    return token in LEGAL_ATTACK_BUTTONS


def resolve(token: str) -> Resolution:
    """
    Classify a single token. Rules are checked in order, first match wins:

    1. any digit -> attack button keyed by the exact token
    2. all upper-case letters -> hold direction keyed by the lower-cased token
    3. all lower-case letters -> press direction keyed by the token
    4. ``-``, ``[`` or ``]`` -> misc symbol
    5. anything else -> the token itself as text
    """
    if _DIGIT.search(token):
        if not is_legal_attack(token):
            logger.debug("Attack token %s is not a canonical button combination", token)
        return IconAsset(IconClass.ATTACK, asset_path(IconClass.ATTACK, token))
    if _UPPER.fullmatch(token):
        return IconAsset(IconClass.HOLD, asset_path(IconClass.HOLD, token.lower()))
    if _LOWER.fullmatch(token):
        return IconAsset(IconClass.PRESS, asset_path(IconClass.PRESS, token))
    if token in MISC_SYMBOLS:
        return IconAsset(IconClass.MISC, asset_path(IconClass.MISC, token))
    logger.debug("Unrecognized move %s; rendering as text", token)
    return TextFallback(token)


def resolve_token(token: Token) -> ResolvedToken:
    return ResolvedToken(token, resolve(token.text))


def resolve_all(tokens: Iterable[Token]) -> List[ResolvedToken]:
    return [resolve_token(token) for token in tokens]


__all__ = [
    "LEGAL_ATTACK_BUTTONS",
    "MISC_SYMBOLS",
    "asset_path",
    "is_legal_attack",
    "resolve",
    "resolve_all",
    "resolve_token",
]
