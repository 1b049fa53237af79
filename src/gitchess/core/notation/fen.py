"""FEN parsing and serialization."""

from __future__ import annotations

import logging

from gitchess.core.board import Board
from gitchess.core.enums import CastlingRights, Color
from gitchess.core.errors import FormatError
from gitchess.core.piece import Piece
from gitchess.core.position import Position
from gitchess.core.types import Square, make_square, parse_square, rank_of, square_name

_LOGGER = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Only ASCII 1-8 count as runs of empty squares.
_EMPTY_RUNS = "12345678"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def _reject(message: str) -> FormatError:
    _LOGGER.debug("Rejected FEN: %s", message)
    return FormatError(message)


def position_from_fen(fen: str) -> Position:
    """Parse a six-field FEN string into a :class:`Position`.

    Raises :class:`FormatError` on any malformed field.
    """
    parts = fen.split()
    if len(parts) != 6:
        raise _reject(f"Invalid FEN (need 6 fields, got {len(parts)}): {fen!r}")

    placement, side_part, castling_part, ep_part, halfmove_part, fullmove_part = parts

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise _reject(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in _EMPTY_RUNS:
                file += int(ch)
            elif ch.isdigit():
                raise _reject(f"Invalid FEN digit {ch!r}: {fen!r}")
            else:
                if file >= 8:
                    raise _reject(f"Invalid FEN rank width: {fen!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise _reject(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise _reject(f"Invalid FEN rank width: {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise _reject(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            right = _CASTLING_CHARS.get(ch)
            if right is None or ch in seen:
                raise _reject(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise _reject(f"Invalid FEN en-passant square for side-to-move: {ep_part!r}")

    # 5–6. Clocks
    halfmove = _parse_counter(halfmove_part, "halfmove clock", minimum=0)
    fullmove = _parse_counter(fullmove_part, "fullmove number", minimum=1)

    return Position(board, side, castling, ep, halfmove, fullmove)


def _parse_counter(text: str, label: str, *, minimum: int) -> int:
    if not (text.isascii() and text.isdigit()):
        raise _reject(f"Invalid FEN {label}: {text!r}")
    value = int(text)
    if value < minimum:
        raise _reject(f"Invalid FEN {label}: {text!r}")
    return value


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS.items() if pos.castling & right)
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
