"""Split raw notation source into annotations and move tokens."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from .models import ParsedNotation, Token

logger = logging.getLogger("tknotation.parser")

QUOTE = '"'
SEPARATOR = ","

SHORTHAND_MOTIONS: Dict[str, Tuple[str, ...]] = {
    "qcf": ("d", "df", "f"),
    "qcb": ("d", "db", "b"),
    "hcf": ("b", "db", "d", "df", "f"),
    "hcb": ("f", "df", "d", "db", "b"),
}


def normalize_move(piece: str) -> str:
    """
    Trim a move and collapse inner whitespace into ``+`` (``"1 2"`` -> ``"1+2"``).

    A whitespace run and any ``+`` touching it become a single ``+``, so
    ``"1 + 2"`` also gives ``"1+2"``.
    """
    parts = piece.split()
    if len(parts) <= 1:
        return piece.strip()
    joined = [parts[0].rstrip("+")]
    for part in parts[1:-1]:
        part = part.strip("+")
        if part:
            joined.append(part)
    joined.append(parts[-1].lstrip("+"))
    return "+".join(joined)


def extract_annotations(source: str) -> Tuple[str, str, str]:
    """
    Peel a leading ``"name"`` and a trailing ``"end text"`` off the source.

    Returns ``(name, end_text, remainder)``. A quoted segment is only consumed
    when both of its quotes are present; otherwise the quote stays literal.
    """
    name = ""
    end_text = ""
    remainder = source.strip()

    if remainder.startswith(QUOTE):
        closing = remainder.find(QUOTE, 1)
        if closing != -1:
            name = remainder[1:closing]
            remainder = remainder[closing + 1:].lstrip()
            if remainder.startswith(SEPARATOR):
                remainder = remainder[1:]
            remainder = remainder.strip()

    if remainder.endswith(QUOTE):
        opening = remainder.rfind(QUOTE, 0, len(remainder) - 1)
        if opening != -1:
            end_text = remainder[opening + 1:-1]
            remainder = remainder[:opening].strip()

    return name, end_text, remainder


def split_moves(remainder: str) -> List[Token]:
    tokens: List[Token] = []
    for piece in remainder.split(SEPARATOR):
        text = normalize_move(piece)
        if not text:
            continue
        tokens.append(Token(raw=piece, text=text))
    return tokens


def expand_shorthand(tokens: Sequence[Token]) -> List[Token]:
    expanded: List[Token] = []
    for token in tokens:
        motion = SHORTHAND_MOTIONS.get(token.text)
        if motion is None:
            expanded.append(token)
            continue
        logger.debug("Expanding shorthand %s -> %s", token.text, ",".join(motion))
        expanded.extend(Token(raw=token.raw, text=step) for step in motion)
    return expanded


def parse(source: str, expand_shorthand_motions: bool = True) -> ParsedNotation:
    name, end_text, remainder = extract_annotations(source or "")
    tokens = split_moves(remainder)
    if expand_shorthand_motions:
        tokens = expand_shorthand(tokens)
    return ParsedNotation(name=name, end_text=end_text, tokens=tuple(tokens))


__all__ = [
    "SHORTHAND_MOTIONS",
    "expand_shorthand",
    "extract_annotations",
    "normalize_move",
    "parse",
    "split_moves",
]
