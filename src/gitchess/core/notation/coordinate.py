"""Coordinate move text (``e2e4``, ``e7e8q``) parsing and serialization."""

from __future__ import annotations

import re

from gitchess.core.errors import FormatError
from gitchess.core.move import Move
from gitchess.core.notation.models import ParsedMove
from gitchess.core.piece import piece_type_from_letter, piece_type_letter
from gitchess.core.types import parse_square, square_name

_MOVE_RE = re.compile(r"([a-h][1-8])([a-h][1-8])([qrbn])?")


def parse_move(text: str) -> ParsedMove:
    """Decode coordinate move text; raises :class:`FormatError` on mismatch."""
    match = _MOVE_RE.fullmatch(text)
    if match is None:
        raise FormatError(f"Invalid move format: {text!r}")
    from_name, to_name, promo = match.groups()
    return ParsedMove(
        from_sq=parse_square(from_name),
        to_sq=parse_square(to_name),
        promotion=piece_type_from_letter(promo) if promo else None,
    )


def move_to_text(move: Move | ParsedMove) -> str:
    """Encode a move back to coordinate text."""
    text = square_name(move.from_sq) + square_name(move.to_sq)
    if move.promotion is not None:
        text += piece_type_letter(move.promotion)
    return text
