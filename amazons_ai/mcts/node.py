"""
Search tree node for the Amazons tree search.

This module defines the SearchNode class, a node in the search tree. Each
node owns a board snapshot, the move that produced it, its value statistics
and its children. The tree is strictly parent-owned: nodes hold no
reference to their parent, and traversal always runs root to leaf.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import math

from amazons_ai.core.board import Board, Coordinate
from amazons_ai.core.moves import Move

# The root was not reached by any move; it carries a self-move placeholder
ROOT_MOVE = Move(Coordinate(0, 0), Coordinate(0, 0), Coordinate(0, 0))


def round_score(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    rounded = math.floor(abs(value) + 0.5)
    return rounded if value >= 0 else -rounded


class SearchNode:
    """
    A node in the search tree.

    ``value`` is the sum of values over this node's subtree, ``static_value``
    is the node's own signed evaluation and ``n`` its visit count. A node is
    a leaf until it is expanded, which happens at most once.
    """

    def __init__(
        self,
        board: Board,
        move: Move = ROOT_MOVE,
        static_value: float = 0.0,
    ):
        """
        Initialize a search node.

        Args:
            board: Position this node represents
            move: Move that led to this position (ROOT_MOVE for the root)
            static_value: Signed static evaluation of the position
        """
        self.board = board
        self.move = move
        self.static_value = static_value

        # Node statistics
        self.value = static_value
        self.n = 1
        self.terminal = False
        self.children: Dict[int, SearchNode] = {}

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def average(self) -> float:
        """Average value over this node's visits."""
        return self.value / self.n

    def mark_terminal(self, value: float) -> None:
        """
        Record that the side to move here has no legal moves.

        Args:
            value: Signed loss value for this depth
        """
        self.terminal = True
        self.static_value = value
        self.value = value
        self.n = 1
        self.children = {}

    def set_children(self, children: Dict[int, SearchNode]) -> None:
        """
        Attach freshly evaluated children, turning this leaf interior.

        Raises:
            ValueError: If the node has already been expanded
        """
        if self.children:
            raise ValueError("Node has already been expanded")
        self.children = children
        self.value = sum(child.value for child in children.values()) + self.static_value
        self.n = len(children) + 1

    def refresh(self) -> None:
        """Recompute value and visit count from the children."""
        self.value = sum(child.value for child in self.children.values()) + self.static_value
        self.n = sum(child.n for child in self.children.values()) + 1

    def selection_score(self, child: SearchNode, exploration_weight: float = 1.0) -> float:
        """
        Calculate the selection score for a child node.

        score = average + exploration_weight * sqrt(sqrt(parent.n) / child.n)

        Args:
            child: Child node to score
            exploration_weight: Multiplier on the exploration bonus

        Returns:
            Selection score
        """
        exploration = math.sqrt(math.sqrt(self.n) / child.n)
        return child.average + exploration_weight * exploration

    def select_child(self, exploration_weight: float = 1.0) -> int:
        """
        Pick the child with the highest selection score.

        Ties keep the earliest child in enumeration order.

        Returns:
            Key of the selected child

        Raises:
            ValueError: If the node has no children
        """
        if not self.children:
            raise ValueError("Cannot select child from node with no children")

        best_key = None
        best_score = -math.inf
        for key, child in self.children.items():
            score = self.selection_score(child, exploration_weight)
            if best_key is None or score > best_score:
                best_key, best_score = key, score
        return best_key

    def best_child(self) -> Optional[SearchNode]:
        """
        The child with the highest average value (no exploration bonus).

        Ties keep the earliest child. Returns None for a leaf.
        """
        best = None
        for child in self.children.values():
            if best is None or child.average > best.average:
                best = child
        return best

    def best_move(self) -> Optional[Tuple[Move, int]]:
        """
        The move of the best child and its average value, rounded with
        :func:`round_score`.

        Returns:
            Tuple of (move, score), or None if there are no children
        """
        best = self.best_child()
        if best is None:
            return None
        return best.move, round_score(best.average)

    def ranked_children(self) -> List[SearchNode]:
        """Children by descending average, ties in enumeration order."""
        return sorted(self.children.values(), key=lambda c: c.average, reverse=True)

    def __str__(self) -> str:
        return (f"SearchNode(move={self.move}, "
                f"n={self.n}, "
                f"value={self.value:.2f}, "
                f"static={self.static_value:.2f}, "
                f"children={len(self.children)}"
                f"{', terminal' if self.terminal else ''})")
