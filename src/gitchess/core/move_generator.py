"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitchess.core.enums import CastlingSide, Color, PieceType
from gitchess.core.move import Move
from gitchess.core.piece import Piece
from gitchess.core.position import (
    KING_HOME_FILE,
    home_rank,
    implied_castling,
    rook_home_square,
)
from gitchess.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from gitchess.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# Forward rank step, pawn start rank and promotion rank per colour.
_PAWN_STEP: tuple[int, int] = (1, -1)
_PAWN_START_RANK: tuple[int, int] = (1, 6)
_PAWN_LAST_RANK: tuple[int, int] = (7, 0)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_attackers() -> tuple[tuple[tuple[Square, ...], ...], ...]:
    """[color][sq] -> squares from which a pawn of *color* captures onto sq."""
    per_color: list[tuple[tuple[Square, ...], ...]] = []
    for color in Color:
        behind = -_PAWN_STEP[int(color)]
        per_square: list[tuple[Square, ...]] = []
        for sq in range(64):
            ar = rank_of(sq) + behind
            origins: list[Square] = []
            if 0 <= ar < 8:
                for df in (-1, 1):
                    af = file_of(sq) + df
                    if 0 <= af < 8:
                        origins.append(make_square(af, ar))
            per_square.append(tuple(origins))
        per_color.append(tuple(per_square))
    return tuple(per_color)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_PAWN_ATTACKERS = _build_pawn_attackers()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS: dict[PieceType, tuple[tuple[tuple[Square, ...], ...], ...]] = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}
_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_ORTHOGONAL_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


class MoveGenerator:
    """Answers legality questions about a single :class:`Position`.

    The generator never mutates the position it was given: every move
    simulation runs on a private copy.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return [move for move in self.generate_pseudo_legal_moves() if self.is_valid_move(move)]

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check).

        Two-square king moves from the home square are included as castling
        candidates; :meth:`is_castling_legal` decides them.
        """
        moves: list[Move] = []
        color = self._pos.side_to_move

        for sq, piece in self._board.occupied():
            if piece.color != color:
                continue
            ptype = piece.piece_type
            if ptype == PieceType.PAWN:
                self._gen_pawn(sq, color, moves)
            elif ptype == PieceType.KNIGHT:
                self._gen_stepping(sq, color, ptype, _KNIGHT_TARGETS[sq], moves)
            elif ptype == PieceType.KING:
                self._gen_stepping(sq, color, ptype, _KING_TARGETS[sq], moves)
                self._gen_castling_candidates(sq, color, moves)
            else:
                self._gen_sliding(sq, color, ptype, _SLIDER_RAYS[ptype][sq], moves)

        return moves

    def resolve_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> Move | None:
        """Build a fully flagged :class:`Move` from coordinates.

        Returns ``None`` when *from_sq* is empty. The result is not checked
        for legality; pass it to :meth:`is_valid_move` for that.
        """
        board = self._board
        piece = board[from_sq]
        if piece is None:
            return None

        target = board[to_sq]
        captured = target.piece_type if target is not None else None
        en_passant = self._is_en_passant_capture(piece, from_sq, to_sq)
        if en_passant:
            captured = PieceType.PAWN

        return Move(
            from_sq,
            to_sq,
            piece.piece_type,
            captured=captured,
            promotion=promotion,
            castling=implied_castling(piece, from_sq, to_sq),
            en_passant=en_passant,
        )

    # -- Legality -----------------------------------------------------------

    def is_valid_move(self, move: Move) -> bool:
        """Is *move* fully legal for the side to move?"""
        board = self._board
        piece = board[move.from_sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return False
        if move.piece != piece.piece_type or move.from_sq == move.to_sq:
            return False

        target = board[move.to_sq]
        if target is not None and target.color == piece.color:
            return False

        if not self._promotion_matches(move, piece):
            return False
        if move.en_passant and not self._is_en_passant_capture(piece, move.from_sq, move.to_sq):
            return False
        if move.castling is not None and move.castling != implied_castling(
            piece, move.from_sq, move.to_sq
        ):
            return False

        if not self.is_pseudo_legal(move):
            return False

        after = self._pos.apply_move(move)
        return not MoveGenerator(after).is_in_check(piece.color)

    def is_pseudo_legal(self, move: Move) -> bool:
        """Does *move* fit its piece's movement geometry?

        Ignores whether the mover's king is left in check. Two-square king
        moves are routed through :meth:`is_castling_legal`.
        """
        piece = self._board[move.from_sq]
        if piece is None:
            return False

        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            return self._is_pawn_move(piece, move.from_sq, move.to_sq)
        if ptype == PieceType.KNIGHT:
            return move.to_sq in _KNIGHT_TARGETS[move.from_sq]
        if ptype == PieceType.KING:
            if move.to_sq in _KING_TARGETS[move.from_sq]:
                return True
            if implied_castling(piece, move.from_sq, move.to_sq) is not None:
                return self.is_castling_legal(move)
            return False
        return self._is_sliding_move(ptype, move.from_sq, move.to_sq)

    def is_castling_legal(self, move: Move) -> bool:
        """Can the king castle with *move* (a two-file king move)?"""
        board = self._board
        king = board[move.from_sq]
        if king is None:
            return False
        side = implied_castling(king, move.from_sq, move.to_sq)
        if side is None:
            return False

        color = king.color
        rank = home_rank(color)
        if move.from_sq != make_square(KING_HOME_FILE, rank):
            return False
        if self.is_in_check(color):
            return False
        if not self._pos.castling.has(color, side):
            return False

        rook_sq = rook_home_square(color, side)
        if board[rook_sq] != Piece(color, PieceType.ROOK):
            return False

        step = 1 if side == CastlingSide.KINGSIDE else -1
        for file in range(KING_HOME_FILE + step, file_of(rook_sq), step):
            if not board.is_empty(make_square(file, rank)):
                return False

        # Walk the king one square at a time; no stop may be attacked.
        for file in range(KING_HOME_FILE, file_of(move.to_sq) + step, step):
            trial = self._pos.copy()
            trial.set_piece(move.from_sq, None)
            trial.set_piece(make_square(file, rank), king)
            if MoveGenerator(trial).is_in_check(color):
                return False

        return True

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent? ``False`` without a king."""
        king_sq = self._board.king_square(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Kings attack only their adjacent squares here; castling never takes
        part in attack detection.
        """
        board = self._board

        pawn = Piece(by_color, PieceType.PAWN)
        for origin in _PAWN_ATTACKERS[int(by_color)][sq]:
            if board[origin] == pawn:
                return True

        knight = Piece(by_color, PieceType.KNIGHT)
        for origin in _KNIGHT_TARGETS[sq]:
            if board[origin] == knight:
                return True

        king = Piece(by_color, PieceType.KING)
        for origin in _KING_TARGETS[sq]:
            if board[origin] == king:
                return True

        if self._ray_attacked(_BISHOP_RAYS[sq], by_color, _DIAGONAL_ATTACKERS):
            return True
        return self._ray_attacked(_ROOK_RAYS[sq], by_color, _ORTHOGONAL_ATTACKERS)

    # -- Geometry checks (private) -----------------------------------------

    def _ray_attacked(
        self,
        rays: tuple[tuple[Square, ...], ...],
        by_color: Color,
        attackers: tuple[PieceType, ...],
    ) -> bool:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in attackers:
                    return True
                break
        return False

    def _is_pawn_move(self, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
        board = self._board
        color_idx = int(piece.color)
        step = _PAWN_STEP[color_idx]
        rank_diff = rank_of(to_sq) - rank_of(from_sq)
        file_diff = abs(file_of(to_sq) - file_of(from_sq))

        if file_diff == 0:
            if rank_diff == step:
                return board.is_empty(to_sq)
            if rank_diff == 2 * step and rank_of(from_sq) == _PAWN_START_RANK[color_idx]:
                middle = make_square(file_of(from_sq), rank_of(from_sq) + step)
                return board.is_empty(middle) and board.is_empty(to_sq)
            return False

        if file_diff == 1 and rank_diff == step:
            target = board[to_sq]
            if target is not None and target.color != piece.color:
                return True
            return to_sq == self._pos.en_passant

        return False

    def _is_sliding_move(self, ptype: PieceType, from_sq: Square, to_sq: Square) -> bool:
        board = self._board
        for ray in _SLIDER_RAYS[ptype][from_sq]:
            if to_sq not in ray:
                continue
            for sq in ray:
                if sq == to_sq:
                    return True
                if not board.is_empty(sq):
                    return False
        return False

    def _is_en_passant_capture(self, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
        return (
            piece.piece_type == PieceType.PAWN
            and to_sq == self._pos.en_passant
            and file_of(from_sq) != file_of(to_sq)
            and self._board.is_empty(to_sq)
        )

    @staticmethod
    def _promotion_matches(move: Move, piece: Piece) -> bool:
        reaches_last_rank = (
            piece.piece_type == PieceType.PAWN
            and rank_of(move.to_sq) == _PAWN_LAST_RANK[int(piece.color)]
        )
        if reaches_last_rank:
            return move.promotion in PROMOTION_TYPES
        return move.promotion is None

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        color_idx = int(color)
        step = _PAWN_STEP[color_idx]
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        next_rank = rank_idx + step
        if not 0 <= next_rank < 8:
            return

        one_step = make_square(file_idx, next_rank)
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, color, None, moves)
            if rank_idx == _PAWN_START_RANK[color_idx]:
                two_step = make_square(file_idx, next_rank + step)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, PieceType.PAWN))

        for df in (-1, 1):
            cap_file = file_idx + df
            if not 0 <= cap_file < 8:
                continue
            cap_sq = make_square(cap_file, next_rank)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, color, target.piece_type, moves)
            elif cap_sq == self._pos.en_passant:
                moves.append(
                    Move(sq, cap_sq, PieceType.PAWN, captured=PieceType.PAWN, en_passant=True)
                )

    @staticmethod
    def _add_pawn_move(
        from_sq: Square,
        to_sq: Square,
        color: Color,
        captured: PieceType | None,
        moves: list[Move],
    ) -> None:
        if rank_of(to_sq) == _PAWN_LAST_RANK[int(color)]:
            for pt in PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, PieceType.PAWN, captured=captured, promotion=pt))
        else:
            moves.append(Move(from_sq, to_sq, PieceType.PAWN, captured=captured))

    def _gen_stepping(
        self,
        sq: Square,
        color: Color,
        ptype: PieceType,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq, ptype))
            elif target.color != color:
                moves.append(Move(sq, to_sq, ptype, captured=target.piece_type))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        ptype: PieceType,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq, ptype))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq, ptype, captured=target.piece_type))
                break

    def _gen_castling_candidates(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        rank = home_rank(color)
        if king_sq != make_square(KING_HOME_FILE, rank):
            return
        for side, to_file in ((CastlingSide.KINGSIDE, 6), (CastlingSide.QUEENSIDE, 2)):
            if self._pos.castling.has(color, side):
                moves.append(
                    Move(king_sq, make_square(to_file, rank), PieceType.KING, castling=side)
                )
