"""
Static evaluation of Amazons positions.

The evaluator scores a board by mobility: the number of (move, shoot) pairs
each side has available. It counts moves with the same board-walking rules
as the move generator (shots from a landing square are counted on the
unmodified board, plus one shot back at the vacated origin), so
``mobility(board, color) == len(possible_moves(board, color))``.

Known divergence: neither the count nor the generator re-opens the vacated
origin for arrows flying *through* it, so both undercount the moves a
player could make under the full rules of the game. The search was tuned
against this count; keep it as is.
"""
from amazons_ai.core.constants import LOSS_VALUE, Color
from amazons_ai.core.board import Board
from amazons_ai.core.moves import reachable_indices


def mobility(board: Board, color: Color) -> int:
    """
    Count the (move, shoot) pairs available to ``color``.

    For each amazon, every reachable landing square contributes one for the
    shot back at the origin plus the number of squares reachable from the
    landing square.
    """
    tiles = board.tiles
    total = 0
    for coord in board.pieces(color):
        for end_index in reachable_indices(tiles, coord.index):
            total += 1 + len(reachable_indices(tiles, end_index))
    return total


def evaluate(board: Board, color: Color) -> int:
    """
    Score a position from ``color``'s point of view.

    Returns:
        LOSS_VALUE if ``color`` cannot move, otherwise the difference
        between its mobility and the opponent's
    """
    own = mobility(board, color)
    if own == 0:
        return LOSS_VALUE
    return own - mobility(board, color.other)
