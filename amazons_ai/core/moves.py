"""
Moves for the Game of the Amazons.

A move relocates one of the mover's amazons along a queen line and then
shoots an arrow from the landing square along another queen line. This
module defines the Move type, the move validator, the move generator and
move application.

Both the generator and the validator judge the arrow's flight on the board
as it stood before the move, with one exception: the square the amazon just
left is always a legal arrow target. Arrows that would fly *through* the
vacated square are therefore neither generated nor accepted.
"""
from __future__ import annotations
from typing import Dict, List, Mapping, NamedTuple, Sequence, Tuple, Union

from amazons_ai.core.constants import DIRECTIONS, Color, Tile
from amazons_ai.core.board import ALL_COORDINATES, Board, Coordinate
from amazons_ai.core.errors import (
    RuleViolation, OccupiedTile, is_violation
)
from amazons_ai.core.vectors import (
    Vector, validate_vector, vector_path_check_free
)


class Move(NamedTuple):
    """Move the amazon on ``start`` to ``end``, then shoot an arrow at ``shoot``."""
    start: Coordinate
    end: Coordinate
    shoot: Coordinate

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        """Convert to dictionary representation."""
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "shoot": self.shoot.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, int]]) -> Move:
        """Create from dictionary representation."""
        return cls(
            Coordinate.from_dict(data["start"]),
            Coordinate.from_dict(data["end"]),
            Coordinate.from_dict(data["shoot"]),
        )

    @classmethod
    def from_notation(cls, text: str) -> Move:
        """
        Parse a move written as ``d1-e2/f3``.

        Raises:
            ValueError: If the text is malformed
        """
        try:
            squares, shoot = text.split("/")
            start, end = squares.split("-")
        except ValueError:
            raise ValueError(f"Not a move: {text!r}") from None
        return cls(
            Coordinate.from_algebraic(start),
            Coordinate.from_algebraic(end),
            Coordinate.from_algebraic(shoot),
        )

    def __str__(self) -> str:
        return f"{self.start}-{self.end}/{self.shoot}"


def _build_rays() -> Tuple[Tuple[Tuple[int, ...], ...], ...]:
    rays = []
    for coord in ALL_COORDINATES:
        per_direction = []
        for dx, dy in DIRECTIONS:
            line = []
            current = coord.offset(dx, dy)
            while current.in_bounds():
                line.append(current.index)
                current = current.offset(dx, dy)
            per_direction.append(tuple(line))
        rays.append(tuple(per_direction))
    return tuple(rays)


# RAYS[i][d] lists the square indices met walking from square i in direction d
RAYS = _build_rays()

_FREE = int(Tile.FREE)


def reachable_indices(tiles: Sequence[int], index: int) -> List[int]:
    """
    Indices of all squares a queen on ``index`` can reach.

    Each ray stops before the first non-free square.
    """
    reachable = []
    for ray in RAYS[index]:
        for i in ray:
            if tiles[i] != _FREE:
                break
            reachable.append(i)
    return reachable


def validate_move(
    board: Board, move: Move, color: Color
) -> Union[Move, RuleViolation]:
    """
    Check a move against the rules, reporting the first violated rule.

    The checks run in this order:
    1. start -> end is a legal vector
    2. end -> shoot is a legal vector
    3. end is free
    4. shoot is free, or is the vacated start square
    5. start holds an amazon of ``color``
    6. the start -> end path is clear
    7. the end -> shoot path is clear

    Args:
        board: Position the move is played in
        move: Move to check
        color: Color of the side making the move

    Returns:
        The move unchanged if it is legal, otherwise the first violation
    """
    start, end, shoot = move

    checked = validate_vector(Vector(start, end))
    if is_violation(checked):
        return checked

    checked = validate_vector(Vector(end, shoot))
    if is_violation(checked):
        return checked

    tile = board.get(end)
    if is_violation(tile):
        return tile
    if tile is not Tile.FREE:
        return OccupiedTile(end)

    tile = board.get(shoot)
    if is_violation(tile):
        return tile
    if tile is not Tile.FREE and shoot != start:
        return OccupiedTile(shoot)

    tile = board.get(start)
    if is_violation(tile):
        return tile
    if tile is not Tile.piece(color):
        return OccupiedTile(start)

    checked = vector_path_check_free(board, Vector(start, end))
    if is_violation(checked):
        return checked

    checked = vector_path_check_free(board, Vector(end, shoot))
    if is_violation(checked):
        return checked

    return move


def possible_vectors_from(board: Board, coord: Coordinate) -> List[Vector]:
    """
    All clear queen vectors starting at ``coord``.

    Walks outward in each of the eight directions until the edge of the
    board or the first occupied square, so every returned vector is clear
    by construction.
    """
    if not coord.in_bounds():
        return []
    return [
        Vector(coord, ALL_COORDINATES[i])
        for i in reachable_indices(board.tiles, coord.index)
    ]


def possible_moves_from(board: Board, coord: Coordinate) -> List[Move]:
    """
    All legal moves for the amazon standing on ``coord``.

    For every reachable landing square the move shooting back at the vacated
    origin comes first, followed by one move per square reachable from the
    landing square on the unmodified board.
    """
    if not coord.in_bounds():
        return []

    tiles = board.tiles
    moves = []
    for end_index in reachable_indices(tiles, coord.index):
        end = ALL_COORDINATES[end_index]
        moves.append(Move(coord, end, coord))
        for shoot_index in reachable_indices(tiles, end_index):
            moves.append(Move(coord, end, ALL_COORDINATES[shoot_index]))
    return moves


def possible_moves(board: Board, color: Color) -> List[Move]:
    """
    All legal moves for ``color``, piece by piece in board index order.

    Every returned move passes :func:`validate_move`.
    """
    moves = []
    for coord in board.pieces(color):
        moves.extend(possible_moves_from(board, coord))
    return moves


def play_move(board: Board, move: Move, color: Color) -> Union[Board, RuleViolation]:
    """
    Validate and apply a move.

    Args:
        board: Position the move is played in
        move: Move to play
        color: Color of the side making the move

    Returns:
        A new board with the start square freed, the amazon on the end
        square and an arrow on the shoot square; or the validator's
        violation, in which case ``board`` is untouched
    """
    checked = validate_move(board, move, color)
    if is_violation(checked):
        return checked

    return board.with_tiles([
        (move.start, Tile.FREE),
        (move.end, Tile.piece(color)),
        (move.shoot, Tile.ARROW),
    ])
