"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass

from gitchess.core.enums import PieceType
from gitchess.core.types import Square


@dataclass(frozen=True, slots=True)
class ParsedMove:
    """Coordinates decoded from move text such as ``e7e8q``."""

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None
