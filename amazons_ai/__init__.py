"""
Amazons AI - A rules engine and tree search player for the Game of the Amazons.

This package provides a complete implementation of the Amazons rules on a
10x10 board, along with AI agents that choose moves with a budgeted,
parallel tree search.
"""

__version__ = "0.1.0"
__author__ = "Amazons AI Team"

# Make key components available at package level
from amazons_ai.core.board import Board, Coordinate, initial_board
from amazons_ai.core.constants import Color, Tile
from amazons_ai.core.moves import Move, possible_moves, play_move
from amazons_ai.mcts.search import choose_move

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

__all__ = [
    'Board', 'Coordinate', 'initial_board',
    'Color', 'Tile',
    'Move', 'possible_moves', 'play_move',
    'choose_move',
]
