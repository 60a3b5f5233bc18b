"""
Budgeted tree search for the Game of the Amazons.

Each exploration pass walks from the root to a frontier node:
1. Selection: in an expanded node, descend into the child with the highest
   selection score (average value plus an exploration bonus)
2. Expansion: a leaf is expanded once into one child per legal move; the
   children are evaluated in parallel
3. Backpropagation: on the way back up, each node recomputes its value and
   visit count from its children

All values are judged from the perspective of the color the search is run
for; moves at odd depths belong to the opponent and are scored negated.
Once the budget is spent, the root child with the best average value is
chosen.
"""
from __future__ import annotations
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from contextlib import contextmanager
from itertools import repeat
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
import logging
import time

from amazons_ai.core.constants import LOSS_VALUE, Color
from amazons_ai.core.board import Board
from amazons_ai.core.errors import NoAvailableMoves, RuleViolation, is_violation
from amazons_ai.core.evaluation import evaluate
from amazons_ai.core.moves import Move, possible_moves, play_move
from amazons_ai.mcts.node import SearchNode
from amazons_ai.mcts.config import MCTSConfig

logger = logging.getLogger(__name__)

SearchResult = Union[Tuple[Move, int], NoAvailableMoves]


def depth_sign(depth: int) -> int:
    """+1 at even depths (the searching side moves), -1 at odd depths."""
    return 1 if depth % 2 == 0 else -1


def side_to_move(color: Color, depth: int) -> Color:
    """The color whose move it is at ``depth`` below a root where ``color`` moves."""
    return color if depth % 2 == 0 else color.other


def evaluate_candidate(
    board: Board,
    move: Move,
    mover: Color,
    perspective: Color,
    sign: int,
) -> Union[Tuple[Board, int], RuleViolation]:
    """
    Apply one candidate move and score the resulting position.

    This is the unit of work fanned out during expansion. It only reads its
    arguments, so it is safe to run in a worker thread or process.

    Returns:
        Tuple of (new board, signed evaluation), or the violation if the
        move was rejected
    """
    child_board = play_move(board, move, mover)
    if is_violation(child_board):
        return child_board
    return child_board, evaluate(child_board, perspective) * sign


def expand_node(
    node: SearchNode,
    moves: List[Move],
    mover: Color,
    perspective: Color,
    depth: int,
    executor: Optional[Executor] = None,
    parallel_threshold: int = 0,
) -> SearchNode:
    """
    Expand a leaf into one child per move.

    The candidate moves are evaluated independently, in parallel when an
    executor is given and there are at least ``parallel_threshold`` of them.
    All results are collected before the children are attached.

    Args:
        node: Leaf to expand
        moves: Legal moves for ``mover`` in the node's position
        mover: Color making the moves
        perspective: Color whose point of view values are judged from
        depth: Depth of ``node`` below the root
        executor: Optional executor for the fan-out
        parallel_threshold: Minimum number of moves worth fanning out

    Returns:
        The expanded node
    """
    sign = depth_sign(depth)
    count = len(moves)
    args = (repeat(node.board, count), moves, repeat(mover, count),
            repeat(perspective, count), repeat(sign, count))

    if executor is not None and count >= parallel_threshold:
        chunksize = max(1, count // 64)
        results = list(executor.map(evaluate_candidate, *args, chunksize=chunksize))
    else:
        results = list(map(evaluate_candidate, *args))

    children = {}
    for key, (move, result) in enumerate(zip(moves, results)):
        if is_violation(result):
            # The generator only produces legal moves; this is a bug upstream
            logger.error("Generated move %s for %s was rejected: %s", move, mover.name, result)
            continue
        child_board, value = result
        children[key] = SearchNode(board=child_board, move=move, static_value=value)

    node.set_children(children)
    return node


def exploration_pass(
    node: SearchNode,
    color: Color,
    depth: int,
    max_depth: int,
    executor: Optional[Executor] = None,
    exploration_weight: float = 1.0,
    parallel_threshold: int = 0,
) -> SearchNode:
    """
    Run one exploration pass from ``node``.

    A leaf is either confirmed terminal (no legal moves for the side to
    move) or expanded. An interior node above ``max_depth`` descends into
    its best-scoring child and then recomputes its statistics.

    Args:
        node: Node to explore from
        color: Color the whole search is judged for
        depth: Depth of ``node`` below the root
        max_depth: Depth at which interior nodes stop descending
        executor: Optional executor for parallel expansion
        exploration_weight: Multiplier on the selection exploration bonus
        parallel_threshold: Minimum number of moves worth fanning out

    Returns:
        The updated node
    """
    if node.is_leaf:
        mover = side_to_move(color, depth)
        moves = possible_moves(node.board, mover)
        if not moves:
            node.mark_terminal(LOSS_VALUE * depth_sign(depth))
            return node
        return expand_node(node, moves, mover, color, depth, executor, parallel_threshold)

    if depth >= max_depth:
        return node

    key = node.select_child(exploration_weight)
    node.children[key] = exploration_pass(
        node.children[key], color, depth + 1, max_depth,
        executor, exploration_weight, parallel_threshold
    )
    node.refresh()
    return node


@contextmanager
def expansion_executor(config: MCTSConfig) -> Iterator[Optional[Executor]]:
    """
    Provide the executor used for parallel expansion during one search.

    Yields None when the search is configured to run with a single worker.
    """
    if config.num_workers <= 1:
        yield None
        return

    executor_cls = ThreadPoolExecutor if config.parallel_backend == "thread" else ProcessPoolExecutor
    with executor_cls(max_workers=config.num_workers) as executor:
        yield executor


def build_tree(
    board: Board,
    color: Color,
    config: Optional[MCTSConfig] = None
) -> Tuple[SearchNode, Dict[str, Any]]:
    """
    Grow a search tree for ``color`` to move on ``board``.

    Args:
        board: Position to decide a move in
        color: Color to move
        config: Search configuration parameters

    Returns:
        Tuple of (root node, search statistics)
    """
    if config is None:
        config = MCTSConfig()

    root = SearchNode(board=board, static_value=evaluate(board, color) * depth_sign(0))

    stats: Dict[str, Any] = {
        "passes": 0,
        "stopped_early": False,
    }

    start_time = time.time()

    with expansion_executor(config) as executor:
        for i in range(config.budget):
            if config.time_limit is not None and time.time() - start_time > config.time_limit:
                stats["stopped_early"] = True
                break

            root = exploration_pass(
                root, color, 0, config.max_depth,
                executor, config.exploration_weight, config.parallel_threshold
            )
            stats["passes"] += 1
            logger.debug("Pass %d/%d: root n=%d, value=%.1f",
                         i + 1, config.budget, root.n, root.value)

    stats["time_elapsed"] = time.time() - start_time
    stats["passes_per_second"] = stats["passes"] / max(0.001, stats["time_elapsed"])
    stats["node_count"] = count_nodes(root)
    stats["tree_depth"] = tree_depth(root)
    stats["root_visits"] = root.n

    logger.info("Searched %d passes for %s: %d nodes, depth %d, %.2fs",
                stats["passes"], color.name, stats["node_count"],
                stats["tree_depth"], stats["time_elapsed"])
    return root, stats


def decide(root: SearchNode) -> SearchResult:
    """
    Commit to the root child with the best average value.

    Returns:
        Tuple of (move, rounded score), or NoAvailableMoves if the root was
        never expanded
    """
    best = root.best_move()
    if best is None:
        return NoAvailableMoves()
    return best


def mcts_search(
    board: Board,
    color: Color,
    config: Optional[MCTSConfig] = None
) -> Tuple[SearchResult, Dict[str, Any]]:
    """
    Run the tree search and pick a move.

    Args:
        board: Position to decide a move in
        color: Color to move
        config: Search configuration parameters

    Returns:
        Tuple of ((move, score) or NoAvailableMoves, search statistics)
    """
    root, stats = build_tree(board, color, config)
    result = decide(root)

    stats["move_values"] = {}
    stats["move_visits"] = {}
    for child in root.children.values():
        stats["move_values"][str(child.move)] = child.average
        stats["move_visits"][str(child.move)] = child.n

    return result, stats


def choose_move(
    board: Board,
    color: Color,
    budget: int,
    max_depth: int,
    config: Optional[MCTSConfig] = None
) -> SearchResult:
    """
    Pick a move for ``color`` with a budget of exploration passes.

    Args:
        board: Position to decide a move in
        color: Color to move
        budget: Number of exploration passes
        max_depth: Depth at which passes stop descending
        config: Optional base configuration for the remaining parameters

    Returns:
        Tuple of (move, score), or NoAvailableMoves. The score is the chosen
        child's average value rounded half away from zero

    Raises:
        ValueError: If ``budget`` is not positive or ``max_depth`` is
            negative (or ``config`` is otherwise invalid)
    """
    params = config.to_dict() if config is not None else {}
    params.update(budget=budget, max_depth=max_depth)
    result, _ = mcts_search(board, color, MCTSConfig.from_dict(params))
    return result


def count_nodes(node: SearchNode) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        node: Root node of the tree

    Returns:
        Total number of nodes
    """
    count = 1
    for child in node.children.values():
        count += count_nodes(child)
    return count


def tree_depth(node: SearchNode) -> int:
    """Length of the longest root-to-leaf path."""
    if not node.children:
        return 0
    return 1 + max(tree_depth(child) for child in node.children.values())


def get_principal_variation(root: SearchNode, max_depth: int = 10) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (best-average path) from the root.

    This is useful for analysis and debugging.

    Args:
        root: Root node of the search tree
        max_depth: Maximum depth to follow

    Returns:
        List of (move, average value) pairs
    """
    result = []
    current = root

    while current.children and len(result) < max_depth:
        current = current.best_child()
        result.append((current.move, current.average))

    return result


def get_action_statistics(
    root: SearchNode, exploration_weight: float = 1.0
) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for every move from the root.

    Args:
        root: Root node of the search tree
        exploration_weight: Weight used to report the selection score

    Returns:
        Dictionary mapping move strings to statistics
    """
    return {
        str(child.move): {
            "visits": child.n,
            "value": child.value,
            "average": child.average,
            "static": child.static_value,
            "selection": root.selection_score(child, exploration_weight),
        }
        for child in root.children.values()
    }
