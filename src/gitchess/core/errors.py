"""Exception types raised by the core."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error the core raises."""


class FormatError(ChessError, ValueError):
    """Malformed position, move or square text."""


class PreconditionError(ChessError, RuntimeError):
    """A caller broke an operation's precondition (e.g. moving from an empty square).

    Distinct from a move being illegal: legality queries return ``False``
    instead of raising.
    """
