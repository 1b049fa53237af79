"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from gitchess.core import Rules, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    played = Rules.play(pos, "e2e4")
    if played is not None:
        move, pos = played
        print(move.notation)
"""

from gitchess.core.board import Board
from gitchess.core.enums import CastlingRights, CastlingSide, Color, GameResult, PieceType
from gitchess.core.errors import ChessError, FormatError, PreconditionError
from gitchess.core.move import Move
from gitchess.core.move_generator import MoveGenerator
from gitchess.core.notation import (
    STARTING_FEN,
    ParsedMove,
    move_to_san,
    move_to_text,
    parse_move,
    position_from_fen,
    position_to_fen,
)
from gitchess.core.piece import Piece
from gitchess.core.position import Position
from gitchess.core.rules import Rules, result_token
from gitchess.core.types import (
    Square,
    file_of,
    indices_to_square,
    make_square,
    parse_square,
    rank_of,
    square_name,
    square_to_indices,
)
from gitchess.core.variants import GameSetup, Variant, chess960_fen, random_chess960_fen

__all__ = [
    # Enums / flags
    "CastlingRights",
    "CastlingSide",
    "Color",
    "GameResult",
    "PieceType",
    # Errors
    "ChessError",
    "FormatError",
    "PreconditionError",
    # Types / helpers
    "Square",
    "file_of",
    "indices_to_square",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "square_to_indices",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "result_token",
    # Notation
    "STARTING_FEN",
    "ParsedMove",
    "move_to_san",
    "move_to_text",
    "parse_move",
    "position_from_fen",
    "position_to_fen",
    # Starting arrangements
    "GameSetup",
    "Variant",
    "chess960_fen",
    "random_chess960_fen",
]
