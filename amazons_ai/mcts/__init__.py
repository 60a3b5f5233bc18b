"""
Budgeted tree search for the Game of the Amazons.

This package provides a search agent that needs no training. Every
exploration pass works in three steps:

1. Selection: starting from the root, descend into the child with the best
   selection score (average value plus an exploration bonus) until a leaf
   or the depth limit is reached.
2. Expansion: turn the leaf into one child per legal move, scoring every
   child with the static mobility evaluation in parallel.
3. Backpropagation: recompute value sums and visit counts on the way back
   to the root.

After the budget is spent, the root child with the best average value is
played.
"""

from amazons_ai.mcts.node import SearchNode, ROOT_MOVE
from amazons_ai.mcts.agent import MCTSAgent, MCTSAgentFactory, RandomAgent
from amazons_ai.mcts.search import (
    mcts_search,
    choose_move,
    build_tree,
    exploration_pass,
    expand_node,
    decide,
)
from amazons_ai.mcts.config import MCTSConfig

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'RandomAgent',
    'SearchNode',
    'ROOT_MOVE',
    'MCTSConfig',
    'mcts_search',
    'choose_move',
    'build_tree',
    'exploration_pass',
    'expand_node',
    'decide',
]
