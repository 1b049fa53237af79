"""Notation package: FEN, coordinate move text and SAN."""

from gitchess.core.notation.coordinate import move_to_text, parse_move
from gitchess.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from gitchess.core.notation.models import ParsedMove
from gitchess.core.notation.san import move_to_san

__all__ = [
    "STARTING_FEN",
    "ParsedMove",
    "position_from_fen",
    "position_to_fen",
    "parse_move",
    "move_to_text",
    "move_to_san",
]
