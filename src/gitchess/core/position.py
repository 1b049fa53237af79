"""Position: complete game state (board + metadata) with move application."""

from __future__ import annotations

import logging

from gitchess.core.board import Board
from gitchess.core.enums import CastlingRights, CastlingSide, Color, PieceType
from gitchess.core.errors import PreconditionError
from gitchess.core.move import Move
from gitchess.core.piece import Piece
from gitchess.core.types import Square, file_of, make_square, rank_of, square_name

_LOGGER = logging.getLogger(__name__)

# Castling geometry: king on the e-file, rooks in the corners.
KING_HOME_FILE = 4
_ROOK_HOME_FILE: dict[CastlingSide, int] = {
    CastlingSide.KINGSIDE: 7,
    CastlingSide.QUEENSIDE: 0,
}
_ROOK_CASTLED_FILE: dict[CastlingSide, int] = {
    CastlingSide.KINGSIDE: 5,
    CastlingSide.QUEENSIDE: 3,
}


def home_rank(color: Color) -> int:
    """Back rank index of *color* (0 for white, 7 for black)."""
    return 0 if color == Color.WHITE else 7


def rook_home_square(color: Color, side: CastlingSide) -> Square:
    return make_square(_ROOK_HOME_FILE[side], home_rank(color))


def implied_castling(piece: Piece, from_sq: Square, to_sq: Square) -> CastlingSide | None:
    """Castling side for a two-file king move along its home rank, else ``None``."""
    if piece.piece_type != PieceType.KING:
        return None
    if rank_of(from_sq) != rank_of(to_sq) or abs(file_of(to_sq) - file_of(from_sq)) != 2:
        return None
    return CastlingSide.KINGSIDE if file_of(to_sq) > file_of(from_sq) else CastlingSide.QUEENSIDE


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Treat a position as a value. :meth:`apply_move` returns a new position;
    the in-place mutators :meth:`set_piece` and :meth:`make_move` are for
    callers that own the instance outright, typically a fresh :meth:`copy`.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number

    # ── Access ───────────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece | None:
        return self.board[sq]

    def set_piece(self, sq: Square, piece: Piece | None) -> None:
        """Place (or remove) a piece in place."""
        self.board[sq] = piece

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> Position:
        """Successor position after *move*; ``self`` is left untouched."""
        successor = self.copy()
        successor.make_move(move)
        return successor

    def make_move(self, move: Move) -> None:
        """Apply *move* in place.

        The move is assumed legal. Castling and en passant are taken from
        the move's flags, or inferred from the geometry when the flags are
        unset.
        """
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            _LOGGER.warning("make_move called with empty source square %s", square_name(move.from_sq))
            raise PreconditionError(f"No piece on {square_name(move.from_sq)}")

        castling_side = move.castling
        if castling_side is None:
            castling_side = implied_castling(piece, move.from_sq, move.to_sq)

        en_passant = move.en_passant or (
            piece.piece_type == PieceType.PAWN
            and file_of(move.from_sq) != file_of(move.to_sq)
            and board[move.to_sq] is None
            and move.to_sq == self.en_passant
        )

        captured = board[move.to_sq]
        if en_passant:
            # The captured pawn sits beside the mover, one rank behind the target.
            victim_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            captured = board[victim_sq]
            board[victim_sq] = None

        # Relocate the piece (handle promotion)
        placed = piece
        if move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        board[move.from_sq] = None
        board[move.to_sq] = placed

        # Slide the rook for castling
        if castling_side is not None:
            r = rank_of(move.from_sq)
            rook_from = make_square(_ROOK_HOME_FILE[castling_side], r)
            rook_to = make_square(_ROOK_CASTLED_FILE[castling_side], r)
            board[rook_to] = board[rook_from]
            board[rook_from] = None

        # En passant target for the opponent
        next_en_passant: Square | None = None
        if piece.piece_type == PieceType.PAWN and abs(rank_of(move.to_sq) - rank_of(move.from_sq)) == 2:
            next_en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        self.en_passant = next_en_passant

        self._update_castling(move, piece)

        # Clocks
        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if piece.color == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = piece.color.opposite

    # ── Castling bookkeeping ─────────────────────────────────────────────

    _ROOK_CORNERS: dict[Square, CastlingRights] = {
        make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
        make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
        make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
        make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
    }

    def _update_castling(self, move: Move, piece: Piece) -> None:
        castling = self.castling
        if piece.piece_type == PieceType.KING:
            castling &= ~CastlingRights.both(piece.color)

        # Leaving a corner, or capturing onto one, ends that corner's right.
        for sq in (move.from_sq, move.to_sq):
            if sq in self._ROOK_CORNERS:
                castling &= ~self._ROOK_CORNERS[sq]

        self.castling = castling

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        from gitchess.core.notation.fen import position_to_fen

        return f"Position({position_to_fen(self)!r})"
