"""Move value object (UCI-style representation plus rule metadata)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from gitchess.core.enums import CastlingSide, PieceType
from gitchess.core.piece import piece_type_letter
from gitchess.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    ``check``, ``checkmate``, ``stalemate`` and ``notation`` are annotations
    filled in after the fact (see :meth:`Rules.annotate_move`); legality
    checks ignore them, and so does equality.
    """

    from_sq: Square
    to_sq: Square
    piece: PieceType
    captured: PieceType | None = None
    promotion: PieceType | None = None
    castling: CastlingSide | None = None
    en_passant: bool = False

    check: bool | None = field(default=None, compare=False)
    checkmate: bool | None = field(default=None, compare=False)
    stalemate: bool | None = field(default=None, compare=False)
    notation: str | None = field(default=None, compare=False)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += piece_type_letter(self.promotion)
        return base

    @property
    def uci(self) -> str:
        """Coordinate notation, e.g. ``e7e8q``."""
        return str(self)

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    # ── Annotation ───────────────────────────────────────────────────────

    def annotated(
        self,
        *,
        check: bool,
        checkmate: bool,
        stalemate: bool,
        notation: str,
    ) -> Move:
        """Copy of this move with the derived annotations filled in."""
        return replace(
            self,
            check=check,
            checkmate=checkmate,
            stalemate=stalemate,
            notation=notation,
        )
