"""
Rule violations for the Amazons rules engine.

Every validating operation in the rules engine returns either a valid
successor value or exactly one of the violation kinds defined here. They
are plain frozen values, not exceptions, so they can be returned, compared,
logged and serialized like any other result.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from amazons_ai.core.board import Coordinate
    from amazons_ai.core.moves import Move
    from amazons_ai.core.vectors import Vector


class RuleViolation:
    """Base class for all rule violation kinds."""

    def describe(self) -> str:
        return str(self)


@dataclass(frozen=True)
class OutOfBounds(RuleViolation):
    """A coordinate lies outside the board."""
    coordinate: Coordinate

    def __str__(self) -> str:
        return f"Coordinate {tuple(self.coordinate)} is out of bounds"


@dataclass(frozen=True)
class IllegalVector(RuleViolation):
    """A vector is not a straight or diagonal line, or has zero length."""
    vector: Vector

    def __str__(self) -> str:
        start, end = self.vector
        return f"Illegal vector {tuple(start)} -> {tuple(end)}"


@dataclass(frozen=True)
class IllegalMove(RuleViolation):
    """
    A move was rejected as a whole (e.g. played out of turn).

    ``reason`` keeps the rules engine's violation when there was one; it
    does not take part in comparisons.
    """
    move: Move
    reason: Optional[RuleViolation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.reason is None:
            return f"Illegal move {self.move}"
        return f"Illegal move {self.move}: {self.reason}"


@dataclass(frozen=True)
class OccupiedTile(RuleViolation):
    """A tile that must be free (or own a piece) does not."""
    coordinate: Coordinate

    def __str__(self) -> str:
        return f"Tile {tuple(self.coordinate)} is occupied"


@dataclass(frozen=True)
class OccupiedVectorPath(RuleViolation):
    """Something blocks the interior of a vector's path."""
    vector: Vector

    def __str__(self) -> str:
        start, end = self.vector
        return f"Path {tuple(start)} -> {tuple(end)} is blocked"


@dataclass(frozen=True)
class NoAvailableMoves(RuleViolation):
    """The side to move has no legal moves."""

    def __str__(self) -> str:
        return "No available moves"


def is_violation(value: Any) -> bool:
    """Check whether a result value is a rule violation."""
    return isinstance(value, RuleViolation)
