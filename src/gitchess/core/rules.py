"""High-level chess rules: legality, check, checkmate, stalemate."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitchess.core.enums import Color, GameResult
from gitchess.core.move_generator import MoveGenerator
from gitchess.core.notation.coordinate import parse_move
from gitchess.core.notation.san import move_to_san

if TYPE_CHECKING:
    from gitchess.core.move import Move
    from gitchess.core.position import Position

_LOGGER = logging.getLogger(__name__)

_RESULT_TOKENS: dict[GameResult, str] = {
    GameResult.WHITE_WINS: "1-0",
    GameResult.BLACK_WINS: "0-1",
    GameResult.DRAW: "1/2-1/2",
    GameResult.IN_PROGRESS: "*",
}


def result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a game-record result token."""
    return _RESULT_TOKENS[result]


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Every query leaves the position untouched; repeat calls give the same
    answer.
    """

    # Product policy: only checkmate and stalemate end the game. The
    # half-move clock is tracked but never adjudicated.

    @staticmethod
    def is_legal(position: Position, move: Move) -> bool:
        return MoveGenerator(position).is_valid_move(move)

    @staticmethod
    def legal_moves(position: Position) -> list[Move]:
        return MoveGenerator(position).generate_legal_moves()

    @staticmethod
    def is_in_check(position: Position, color: Color | None = None) -> bool:
        """Is *color* (default: the side to move) in check?"""
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move if color is None else color)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def apply_move(position: Position, move: Move) -> Position:
        """Successor position after a legal *move*."""
        return position.apply_move(move)

    @staticmethod
    def annotate_move(position: Position, move: Move) -> Move:
        """Fill in check / checkmate / stalemate / SAN for a legal *move*."""
        after = position.apply_move(move)
        gen = MoveGenerator(after)
        in_check = gen.is_in_check(after.side_to_move)
        no_moves = not gen.generate_legal_moves()
        return move.annotated(
            check=in_check,
            checkmate=in_check and no_moves,
            stalemate=not in_check and no_moves,
            notation=move_to_san(position, move),
        )

    @staticmethod
    def play(position: Position, text: str) -> tuple[Move, Position] | None:
        """Play coordinate move *text*.

        Returns the annotated move and the successor position, or ``None``
        when the move is illegal. Malformed text raises
        :class:`~gitchess.core.errors.FormatError`.
        """
        parsed = parse_move(text)
        gen = MoveGenerator(position)
        move = gen.resolve_move(parsed.from_sq, parsed.to_sq, parsed.promotion)
        if move is None or not gen.is_valid_move(move):
            _LOGGER.debug("Illegal move %s in position %r", text, position)
            return None
        return Rules.annotate_move(position, move), position.apply_move(move)

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Determine the current game result."""
        gen = MoveGenerator(position)
        if gen.generate_legal_moves():
            return GameResult.IN_PROGRESS
        if gen.is_in_check(position.side_to_move):
            return (
                GameResult.BLACK_WINS
                if position.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        return GameResult.DRAW  # stalemate
