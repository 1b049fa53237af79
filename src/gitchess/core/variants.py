"""Starting arrangements: standard and shuffled (Chess960) back ranks."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import StrEnum

from gitchess.core.board import Board
from gitchess.core.enums import CastlingRights, CastlingSide, Color, PieceType
from gitchess.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from gitchess.core.position import KING_HOME_FILE, Position

_LOGGER = logging.getLogger(__name__)

CHESS960_COUNT = 960
STANDARD_CHESS960_INDEX = 518

# Knight placements over the five squares left after bishops and queen.
_KNIGHT_PATTERNS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (0, 2),
    (0, 3),
    (0, 4),
    (1, 2),
    (1, 3),
    (1, 4),
    (2, 3),
    (2, 4),
    (3, 4),
)


class Variant(StrEnum):
    STANDARD = "standard"
    CHESS960 = "chess960"


def chess960_back_rank(index: int) -> tuple[PieceType, ...]:
    """Back rank (files a–h) for Scharnagl *index* 0–959."""
    if not 0 <= index < CHESS960_COUNT:
        raise ValueError(f"Chess960 index out of range: {index}")

    files: list[PieceType | None] = [None] * 8

    n, light = divmod(index, 4)
    files[2 * light + 1] = PieceType.BISHOP
    n, dark = divmod(n, 4)
    files[2 * dark] = PieceType.BISHOP

    n, queen = divmod(n, 6)
    empty = [f for f in range(8) if files[f] is None]
    files[empty[queen]] = PieceType.QUEEN

    empty = [f for f in range(8) if files[f] is None]
    for slot in _KNIGHT_PATTERNS[n]:
        files[empty[slot]] = PieceType.KNIGHT

    # King always lands between the two rooks.
    empty = [f for f in range(8) if files[f] is None]
    for f, pt in zip(empty, (PieceType.ROOK, PieceType.KING, PieceType.ROOK)):
        files[f] = pt

    return tuple(pt for pt in files if pt is not None)


def _castling_for(back_rank: tuple[PieceType, ...]) -> CastlingRights:
    """Rights only where the standard e-file/corner geometry applies."""
    if back_rank[KING_HOME_FILE] != PieceType.KING:
        return CastlingRights.NONE
    rights = CastlingRights.NONE
    corners = ((CastlingSide.KINGSIDE, 7), (CastlingSide.QUEENSIDE, 0))
    for side, file in corners:
        if back_rank[file] == PieceType.ROOK:
            rights |= CastlingRights.flag(Color.WHITE, side)
            rights |= CastlingRights.flag(Color.BLACK, side)
    return rights


def chess960_position(index: int) -> Position:
    back_rank = chess960_back_rank(index)
    return Position(Board.from_back_rank(back_rank), castling=_castling_for(back_rank))


def chess960_fen(index: int) -> str:
    """FEN of the shuffled start with Scharnagl *index*."""
    return position_to_fen(chess960_position(index))


def random_chess960_fen(rng: random.Random | None = None) -> str:
    """FEN of a uniformly chosen shuffled start."""
    index = (rng or random.Random()).randrange(CHESS960_COUNT)
    _LOGGER.debug("Chose Chess960 arrangement %d", index)
    return chess960_fen(index)


@dataclass(frozen=True, slots=True)
class GameSetup:
    """How a new game's starting position is chosen.

    An explicit *starting_fen* wins over the variant. For Chess960 without
    an index a random arrangement is drawn.
    """

    variant: Variant = Variant.STANDARD
    starting_fen: str | None = None
    chess960_index: int | None = None

    def __post_init__(self) -> None:
        # Accept plain strings from config files ("standard", "chess960").
        object.__setattr__(self, "variant", Variant(self.variant))

    def resolve_fen(self, rng: random.Random | None = None) -> str:
        if self.starting_fen is not None:
            return self.starting_fen
        if self.variant == Variant.CHESS960:
            if self.chess960_index is not None:
                return chess960_fen(self.chess960_index)
            return random_chess960_fen(rng)
        return STARTING_FEN

    def starting_position(self, rng: random.Random | None = None) -> Position:
        return position_from_fen(self.resolve_fen(rng))
