"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from gitchess.core.enums import Color, PieceType
from gitchess.core.errors import FormatError

# Lowercase FEN letter ↔ piece type; case carries the colour.
_TYPE_BY_LETTER: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}
_LETTER_BY_TYPE: dict[PieceType, str] = {v: k for k, v in _TYPE_BY_LETTER.items()}


def piece_type_from_letter(letter: str) -> PieceType:
    """Piece type for a FEN letter of either case, e.g. 'N' or 'n' → KNIGHT."""
    try:
        return _TYPE_BY_LETTER[letter.lower()]
    except KeyError:
        raise FormatError(f"Invalid piece character: {letter!r}") from None


def piece_type_letter(piece_type: PieceType) -> str:
    """Lowercase letter for *piece_type*; knight is 'n', king is 'k'."""
    return _LETTER_BY_TYPE[piece_type]


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _LETTER_BY_TYPE[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        if len(char) != 1 or not char.isalpha():
            raise FormatError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, piece_type_from_letter(char))

    @property
    def letter(self) -> str:
        """Uppercase SAN letter regardless of colour, e.g. 'N'."""
        return _LETTER_BY_TYPE[self.piece_type].upper()
