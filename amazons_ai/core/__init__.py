"""
Amazons AI Core Package

This package contains the rules engine for the Game of the Amazons:
- Coordinates and the immutable board
- Vector and path validation
- Move validation, generation and application
- Static evaluation
- The game loop built on top of them

All core components can be imported directly from this package.
"""

# Constants
from amazons_ai.core.constants import (
    Color, Tile, other,
    BOARD_SIZE, NUM_TILES, DIRECTIONS, STARTING_SQUARES, LOSS_VALUE
)

# Rule violations
from amazons_ai.core.errors import (
    RuleViolation, OutOfBounds, IllegalVector, IllegalMove,
    OccupiedTile, OccupiedVectorPath, NoAvailableMoves, is_violation
)

# Board
from amazons_ai.core.board import (
    Board, Coordinate, ALL_COORDINATES, empty_board, initial_board
)

# Vectors
from amazons_ai.core.vectors import (
    Vector, validate_coordinate, validate_vector,
    vector_path, vector_path_check_free
)

# Moves
from amazons_ai.core.moves import (
    Move, validate_move, possible_vectors_from,
    possible_moves_from, possible_moves, play_move
)

# Evaluation
from amazons_ai.core.evaluation import mobility, evaluate

# Game
from amazons_ai.core.game import (
    Game, GameState, GameResult, create_game, simulate_random_game
)

__all__ = [
    # Constants
    'Color', 'Tile', 'other',
    'BOARD_SIZE', 'NUM_TILES', 'DIRECTIONS', 'STARTING_SQUARES', 'LOSS_VALUE',

    # Rule violations
    'RuleViolation', 'OutOfBounds', 'IllegalVector', 'IllegalMove',
    'OccupiedTile', 'OccupiedVectorPath', 'NoAvailableMoves', 'is_violation',

    # Board
    'Board', 'Coordinate', 'ALL_COORDINATES', 'empty_board', 'initial_board',

    # Vectors
    'Vector', 'validate_coordinate', 'validate_vector',
    'vector_path', 'vector_path_check_free',

    # Moves
    'Move', 'validate_move', 'possible_vectors_from',
    'possible_moves_from', 'possible_moves', 'play_move',

    # Evaluation
    'mobility', 'evaluate',

    # Game
    'Game', 'GameState', 'GameResult', 'create_game', 'simulate_random_game',
]
