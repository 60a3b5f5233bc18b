"""
Board representation for the Game of the Amazons.

This module defines the Coordinate and Board types. A Board is an immutable
snapshot: every update returns a new Board and leaves the original intact,
so sibling search branches can hold on to earlier positions safely.
"""
from __future__ import annotations
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, Iterable, List, Mapping, NamedTuple, Tuple, Union

import numpy as np

from amazons_ai.core.constants import (
    BOARD_SIZE, MIN_COORD, MAX_COORD, NUM_TILES, FILES,
    STARTING_SQUARES, TILE_CHARS, Color, Tile
)
from amazons_ai.core.errors import OutOfBounds


class Coordinate(NamedTuple):
    """
    A square on the board, addressed by column ``x`` and row ``y``.

    Constructing a Coordinate does not validate it; out-of-range coordinates
    are representable so that the rules engine can reject them explicitly.
    """
    x: int
    y: int

    @property
    def index(self) -> int:
        """Linear index of this square (``y * 10 + x``)."""
        return self.y * BOARD_SIZE + self.x

    @classmethod
    def from_index(cls, index: int) -> Coordinate:
        """Inverse of :attr:`index`."""
        return cls(index % BOARD_SIZE, index // BOARD_SIZE)

    def in_bounds(self) -> bool:
        return MIN_COORD <= self.x <= MAX_COORD and MIN_COORD <= self.y <= MAX_COORD

    def offset(self, dx: int, dy: int) -> Coordinate:
        return Coordinate(self.x + dx, self.y + dy)

    @property
    def algebraic(self) -> str:
        """Algebraic name of the square, e.g. ``d1`` for (3, 0)."""
        if self.in_bounds():
            return f"{FILES[self.x]}{self.y + 1}"
        return f"({self.x},{self.y})"

    @classmethod
    def from_algebraic(cls, text: str) -> Coordinate:
        """
        Parse a square name such as ``d1`` or ``j10``.

        Raises:
            ValueError: If the text is not a file letter followed by a rank
        """
        text = text.strip().lower()
        if len(text) < 2 or text[0] not in FILES or not text[1:].isdigit():
            raise ValueError(f"Not a square name: {text!r}")
        return cls(FILES.index(text[0]), int(text[1:]) - 1)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> Coordinate:
        return cls(int(data["x"]), int(data["y"]))

    def __str__(self) -> str:
        return self.algebraic


# Every valid coordinate in index order
ALL_COORDINATES: Tuple[Coordinate, ...] = tuple(
    Coordinate.from_index(i) for i in range(NUM_TILES)
)


@dataclass(frozen=True, eq=False)
class Board:
    """
    Total mapping from the 100 board squares to their tiles.

    The tiles are held in a flat, read-only numpy array indexed by
    :attr:`Coordinate.index`.
    """
    cells: np.ndarray

    def __post_init__(self):
        cells = np.array(self.cells, dtype=np.int8).reshape(NUM_TILES)
        cells.setflags(write=False)
        object.__setattr__(self, "cells", cells)

    def __setstate__(self, state):
        # Unpickled arrays come back writable
        self.__dict__.update(state)
        self.cells.setflags(write=False)

    @cached_property
    def tiles(self) -> Tuple[int, ...]:
        """Tile codes as a plain tuple, for fast scalar lookups."""
        return tuple(self.cells.tolist())

    def get(self, coord: Coordinate) -> Union[Tile, OutOfBounds]:
        """
        Look up the tile at a coordinate.

        Returns:
            The tile, or OutOfBounds if the coordinate is not on the board
        """
        if not coord.in_bounds():
            return OutOfBounds(coord)
        return Tile(self.tiles[coord.index])

    def set(self, coord: Coordinate, tile: Tile) -> Union[Board, OutOfBounds]:
        """
        Return a new board differing from this one only at ``coord``.

        Returns:
            The new board, or OutOfBounds if the coordinate is not on the board
        """
        return self.with_tiles([(coord, tile)])

    def with_tiles(
        self, updates: Iterable[Tuple[Coordinate, Tile]]
    ) -> Union[Board, OutOfBounds]:
        """
        Apply several tile updates in order, producing a single new board.

        Later updates to the same square win.
        """
        cells = self.cells.copy()
        for coord, tile in updates:
            if not coord.in_bounds():
                return OutOfBounds(coord)
            cells[coord.index] = tile
        return Board(cells)

    def count(self, tile: Tile) -> int:
        """Count the squares holding a given tile."""
        return int(np.count_nonzero(self.cells == tile))

    def pieces(self, color: Color) -> List[Coordinate]:
        """Squares holding a piece of ``color``, in index order."""
        indices = np.flatnonzero(self.cells == Tile.piece(color))
        return [ALL_COORDINATES[i] for i in indices.tolist()]

    def to_array(self) -> np.ndarray:
        """Writable 10x10 copy of the board; row ``y``, column ``x``."""
        return self.cells.reshape(BOARD_SIZE, BOARD_SIZE).copy()

    def to_list(self) -> List[int]:
        return list(self.tiles)

    @classmethod
    def from_list(cls, tiles: Iterable[int]) -> Board:
        return cls(np.fromiter((Tile(t) for t in tiles), dtype=np.int8))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.cells, other.cells))

    def __hash__(self) -> int:
        return hash(self.cells.tobytes())

    def __str__(self) -> str:
        lines = []
        for y in range(MAX_COORD, MIN_COORD - 1, -1):
            row = " ".join(
                TILE_CHARS[Tile(self.tiles[y * BOARD_SIZE + x])]
                for x in range(BOARD_SIZE)
            )
            lines.append(f"{y + 1:>2} {row}")
        lines.append("   " + " ".join(FILES))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"Board(black={self.count(Tile.BLACK)}, "
                f"white={self.count(Tile.WHITE)}, "
                f"arrows={self.count(Tile.ARROW)})")


def empty_board() -> Board:
    """A board with every square free."""
    return Board(np.zeros(NUM_TILES, dtype=np.int8))


def initial_board() -> Board:
    """
    Set up the standard starting position.

    Black holds (3,0), (6,0), (0,3), (9,3); white holds (0,6), (9,6),
    (3,9), (6,9). The other 92 squares are free.
    """
    cells = np.zeros(NUM_TILES, dtype=np.int8)
    for color, squares in STARTING_SQUARES.items():
        for x, y in squares:
            cells[Coordinate(x, y).index] = Tile.piece(color)
    return Board(cells)
