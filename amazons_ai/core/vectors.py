"""
Vector and path validation for queen-style moves.

A vector is an ordered (start, end) pair of coordinates. Legal vectors run
along a row, a column or a 45 degree diagonal and have non-zero length.
"""
from __future__ import annotations
from typing import List, NamedTuple, Tuple, Union

from amazons_ai.core.constants import Tile
from amazons_ai.core.board import Board, Coordinate
from amazons_ai.core.errors import (
    OutOfBounds, IllegalVector, OccupiedVectorPath, is_violation
)


class Vector(NamedTuple):
    """A candidate straight-line move from ``start`` to ``end``."""
    start: Coordinate
    end: Coordinate

    @property
    def delta(self) -> Tuple[int, int]:
        return self.end.x - self.start.x, self.end.y - self.start.y

    @property
    def length(self) -> int:
        """Number of unit steps from start to end."""
        dx, dy = self.delta
        return max(abs(dx), abs(dy))

    @property
    def step(self) -> Tuple[int, int]:
        """Unit step direction (sign of each delta)."""
        dx, dy = self.delta
        return _sign(dx), _sign(dy)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def validate_coordinate(coord: Coordinate) -> Union[Coordinate, OutOfBounds]:
    """Accept a coordinate only if both axes lie in 0..9."""
    if coord.in_bounds():
        return coord
    return OutOfBounds(coord)


def validate_vector(vector: Vector) -> Union[Vector, OutOfBounds, IllegalVector]:
    """
    Check that a vector is a legal queen line on the board.

    Args:
        vector: Vector to check

    Returns:
        The vector unchanged, OutOfBounds for an off-board endpoint, or
        IllegalVector for a zero-length or non-queen line
    """
    for coord in vector:
        checked = validate_coordinate(coord)
        if is_violation(checked):
            return checked

    dx, dy = vector.delta
    if dx == 0 and dy == 0:
        return IllegalVector(vector)
    if dx != 0 and dy != 0 and abs(dx) != abs(dy):
        return IllegalVector(vector)
    return vector


def vector_path(
    board: Board, vector: Vector
) -> Union[List[Tuple[Coordinate, Tile]], IllegalVector]:
    """
    Walk a validated vector one square at a time.

    Returns:
        Ordered (coordinate, tile) pairs from start to end inclusive, or
        IllegalVector if a square along the way cannot be resolved
    """
    step_x, step_y = vector.step
    path = []
    for i in range(vector.length + 1):
        coord = vector.start.offset(step_x * i, step_y * i)
        tile = board.get(coord)
        if is_violation(tile):
            return IllegalVector(vector)
        path.append((coord, tile))
    return path


def vector_path_check_free(
    board: Board, vector: Vector
) -> Union[Vector, IllegalVector, OccupiedVectorPath]:
    """
    Check that every square strictly between start and end is free.

    The endpoints themselves are not inspected; their occupancy is judged by
    the move validator.
    """
    path = vector_path(board, vector)
    if is_violation(path):
        return path
    for _, tile in path[1:-1]:
        if tile is not Tile.FREE:
            return OccupiedVectorPath(vector)
    return vector
