"""
Constants for the Game of the Amazons.

This module defines all the game constants used throughout the Amazons
implementation, including colors, tile states, board geometry, starting
positions and the evaluation sentinel.
"""
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Final


class Color(IntEnum):
    """Enum representing the two sides in Amazons."""
    BLACK = 0
    WHITE = 1

    @property
    def other(self) -> 'Color':
        """The opposing color."""
        return Color.WHITE if self is Color.BLACK else Color.BLACK


def other(color: Color) -> Color:
    """Return the opposing color (an involution)."""
    return color.other


class Tile(IntEnum):
    """
    Enum representing the state of a single board square.

    A square is exactly one of: free, blocked by an arrow, or occupied by
    an amazon of one color.
    """
    FREE = 0
    ARROW = 1
    BLACK = 2
    WHITE = 3

    @classmethod
    def piece(cls, color: Color) -> 'Tile':
        """Get the piece tile for a color."""
        return cls.BLACK if color is Color.BLACK else cls.WHITE

    @property
    def color(self) -> Optional[Color]:
        """Color of the piece on this tile, or None for free/arrow tiles."""
        if self is Tile.BLACK:
            return Color.BLACK
        if self is Tile.WHITE:
            return Color.WHITE
        return None

    @property
    def is_piece(self) -> bool:
        return self is Tile.BLACK or self is Tile.WHITE


# Board geometry
BOARD_SIZE: Final[int] = 10
MIN_COORD: Final[int] = 0
MAX_COORD: Final[int] = BOARD_SIZE - 1
NUM_TILES: Final[int] = BOARD_SIZE * BOARD_SIZE

# Queen directions: 4 orthogonal then 4 diagonal, as (dx, dy) unit steps
DIRECTIONS: Final[List[Tuple[int, int]]] = [
    (0, 1),
    (1, 0),
    (0, -1),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, -1),
    (-1, 1),
]

# Starting squares as (x, y) pairs
STARTING_SQUARES: Final[Dict[Color, List[Tuple[int, int]]]] = {
    Color.BLACK: [(3, 0), (6, 0), (0, 3), (9, 3)],
    Color.WHITE: [(0, 6), (9, 6), (3, 9), (6, 9)],
}

PIECES_PER_COLOR: Final[int] = 4

# Static evaluation returned for a side with no legal moves. Far outside the
# range of any mobility difference on a 10x10 board.
LOSS_VALUE: Final[int] = -10_000

# Column letters for algebraic notation (a-j)
FILES: Final[str] = "abcdefghij"

# Plain characters for text rendering
TILE_CHARS: Final[Dict[Tile, str]] = {
    Tile.FREE: ".",
    Tile.ARROW: "x",
    Tile.BLACK: "B",
    Tile.WHITE: "W",
}

# Unicode symbols for tiles (for terminal display)
TILE_SYMBOLS: Final[Dict[Tile, str]] = {
    Tile.FREE: "·",
    Tile.ARROW: "🔥",
    Tile.BLACK: "⚫",
    Tile.WHITE: "⚪",
}

# Search defaults
DEFAULT_SEARCH_BUDGET: Final[int] = 100
DEFAULT_SEARCH_DEPTH: Final[int] = 3
DEFAULT_SEARCH_WORKERS: Final[int] = 4
