"""SAN (Standard Algebraic Notation) rendering."""

from __future__ import annotations

from gitchess.core.enums import CastlingSide, PieceType
from gitchess.core.errors import PreconditionError
from gitchess.core.move import Move
from gitchess.core.move_generator import MoveGenerator
from gitchess.core.position import Position, implied_castling
from gitchess.core.types import FILES, file_of, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    board = position.board
    piece = board[move.from_sq]
    if piece is None:
        raise PreconditionError(f"No piece on {square_name(move.from_sq)}")

    castling = move.castling
    if castling is None:
        castling = implied_castling(piece, move.from_sq, move.to_sq)

    if castling == CastlingSide.KINGSIDE:
        san = "O-O"
    elif castling == CastlingSide.QUEENSIDE:
        san = "O-O-O"
    else:
        san = ""
        # Unflagged moves still count as captures by what they land on.
        is_capture = move.is_capture or board[move.to_sq] is not None or (
            piece.piece_type == PieceType.PAWN and file_of(move.from_sq) != file_of(move.to_sq)
        )

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += FILES[file_of(move.from_sq)]
        else:
            san += _SAN_PIECE[piece.piece_type]
            san += _disambiguation(position, move, piece.piece_type)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    # Check / checkmate suffix
    after = position.apply_move(move)
    gen_after = MoveGenerator(after)
    if gen_after.is_in_check(after.side_to_move):
        san += "#" if not gen_after.generate_legal_moves() else "+"

    return san


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    """Origin file and/or rank needed to tell *move* apart from its twins."""
    rivals = [
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves()
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and m.piece == piece_type
    ]
    if not rivals:
        return ""

    same_file = any(file_of(sq) == file_of(move.from_sq) for sq in rivals)
    same_rank = any(rank_of(sq) == rank_of(move.from_sq) for sq in rivals)
    if not same_file:
        return FILES[file_of(move.from_sq)]
    if not same_rank:
        return str(rank_of(move.from_sq) + 1)
    return square_name(move.from_sq)
