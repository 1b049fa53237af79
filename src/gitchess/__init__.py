"""GitChess: position and move-legality core for correspondence chess."""

__version__ = "0.1.0"
