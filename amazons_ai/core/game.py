"""
Game state and flow management for the Game of the Amazons.

This module defines the game-loop layer that sits on top of the rules
engine:
- GameState: the current board, side to move and move history
- Game: manager for turn order, agents and the end of the game
- Helper functions for creating and simulating games

Black moves first. A side that has no legal move on its turn loses.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import logging
import random
import time
from enum import Enum, auto

from amazons_ai.core.constants import Color, Tile
from amazons_ai.core.board import Board, initial_board
from amazons_ai.core.errors import (
    RuleViolation, IllegalMove, NoAvailableMoves, is_violation
)
from amazons_ai.core.moves import Move, possible_moves, play_move

logger = logging.getLogger(__name__)

# An agent callback receives the state and its own color and returns a move
AgentCallback = Callable[["GameState", Color], Union[Move, NoAvailableMoves]]


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()


@dataclass
class GameState:
    """
    Complete representation of an Amazons game in progress.

    The board itself is an immutable value; applying a move replaces it.
    """
    board: Board = field(default_factory=initial_board)
    current_color: Color = Color.BLACK

    # Game state
    turn_count: int = 0
    history: List[Tuple[Color, Move]] = field(default_factory=list)
    game_over: bool = False
    winner: Optional[Color] = None
    result: GameResult = GameResult.IN_PROGRESS

    # Statistics
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    def get_valid_moves(self, color: Optional[Color] = None) -> List[Move]:
        """
        Get all legal moves for a color (default: the side to move).

        Args:
            color: Color to generate moves for

        Returns:
            List of legal moves
        """
        return possible_moves(self.board, self.current_color if color is None else color)

    def apply_move(self, color: Color, move: Move) -> Union[Board, RuleViolation]:
        """
        Apply a move to the game state.

        Args:
            color: Color of the side making the move
            move: Move to apply

        Returns:
            The new board, or the violation that prevented the move. Moving
            out of turn or after the game ended is an IllegalMove.
        """
        if self.game_over or color is not self.current_color:
            return IllegalMove(move)

        board = play_move(self.board, move, color)
        if is_violation(board):
            return board

        self.board = board
        self.history.append((color, move))
        return board

    def check_game_end(self) -> bool:
        """
        End the game if the side to move has no legal moves.

        Returns:
            True if the game is over
        """
        if not self.game_over and not self.get_valid_moves():
            self.end_game(self.current_color.other)
        return self.game_over

    def end_game(self, winner: Color) -> None:
        self.game_over = True
        self.winner = winner
        self.result = GameResult.WINNER
        self.end_time = time.time()
        logger.info("Game over after %d moves: %s wins", len(self.history), winner.name)

    def next_turn(self) -> Color:
        """
        Pass the move to the other side.

        Returns:
            The new side to move
        """
        self.current_color = self.current_color.other

        # A full round is one move by each side
        if self.current_color is Color.BLACK:
            self.turn_count += 1

        return self.current_color

    def clone(self) -> GameState:
        """Copy the game state; the board is shared since it is immutable."""
        return GameState(
            board=self.board,
            current_color=self.current_color,
            turn_count=self.turn_count,
            history=list(self.history),
            game_over=self.game_over,
            winner=self.winner,
            result=self.result,
            start_time=self.start_time,
            end_time=self.end_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to plain values.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "board": self.board.to_list(),
            "current_color": int(self.current_color),
            "turn_count": self.turn_count,
            "history": [(int(color), move.to_dict()) for color, move in self.history],
            "game_over": self.game_over,
            "winner": None if self.winner is None else int(self.winner),
            "result": self.result.name,
        }


class Game:
    """
    Manager for Amazons game flow.

    This class handles turn management and lets agents (or a caller
    supplying moves directly) drive the game.
    """
    def __init__(self, board: Optional[Board] = None, first: Color = Color.BLACK):
        """
        Initialize a new game.

        Args:
            board: Starting position (defaults to the standard setup)
            first: Color that moves first
        """
        self._initial_board = board if board is not None else initial_board()
        self._first = first
        self.state = self._setup_game()

        # Map from color to agent callback
        self.agent_callbacks: Dict[Color, AgentCallback] = {}

    def _setup_game(self) -> GameState:
        return GameState(board=self._initial_board, current_color=self._first)

    def reset(self) -> GameState:
        """
        Reset the game to its starting position.

        Returns:
            New game state
        """
        self.state = self._setup_game()
        return self.state

    def register_agent(self, color: Color, agent_callback: AgentCallback) -> None:
        """
        Register an agent for a color.

        Args:
            color: Color the agent plays
            agent_callback: Function that selects a move given the game state
        """
        self.agent_callbacks[color] = agent_callback

    def step(
        self, move: Optional[Move] = None
    ) -> Union[Tuple[GameState, bool], IllegalMove]:
        """
        Advance the game by one move.

        If a move is provided it is played; otherwise the agent registered
        for the side to move picks one.

        Args:
            move: Optional move to play

        Returns:
            Tuple of (game state, whether the game is over), or IllegalMove
            if the move was rejected (the state is unchanged). Its ``reason``
            holds the violation reported by the rules engine.
        """
        if self.state.check_game_end():
            return self.state, True

        color = self.state.current_color

        if move is None:
            if color not in self.agent_callbacks:
                raise ValueError(f"No move provided and no agent registered for {color.name}")
            move = self.agent_callbacks[color](self.state, color)
            if is_violation(move):
                self.state.end_game(color.other)
                return self.state, True

        result = self.state.apply_move(color, move)
        if is_violation(result):
            logger.warning("%s tried %s: %s", color.name, move, result)
            if isinstance(result, IllegalMove):
                return result
            return IllegalMove(move, reason=result)

        self.state.next_turn()
        return self.state, self.state.check_game_end()

    def run_game(self, max_turns: int = 100) -> GameState:
        """
        Run the game until completion or max turns.

        This method requires both colors to have agents registered.

        Args:
            max_turns: Maximum number of full rounds to play

        Returns:
            Final game state
        """
        for color in Color:
            if color not in self.agent_callbacks:
                raise ValueError(f"No agent registered for {color.name}")

        while not self.state.game_over and self.state.turn_count < max_turns:
            outcome = self.step()
            if is_violation(outcome):
                raise ValueError(f"Agent produced an illegal move: {outcome}")

        return self.state

    def get_winner(self) -> Optional[Color]:
        """
        Get the winning color, if the game is over.

        Returns:
            The winner, or None while the game is in progress
        """
        if not self.state.game_over:
            return None
        return self.state.winner

    def __str__(self) -> str:
        state = self.state
        result = f"Amazons (Move {len(state.history) + 1}, {state.current_color.name} to move)\n"
        result += f"{state.board}\n"
        result += (f"Arrows: {state.board.count(Tile.ARROW)}, "
                   f"free squares: {state.board.count(Tile.FREE)}\n")
        if state.game_over:
            result += f"Game Over - Winner: {state.winner.name}\n"
        return result


def create_game(board: Optional[Board] = None, first: Color = Color.BLACK) -> Game:
    """
    Create a new game.

    Args:
        board: Starting position (defaults to the standard setup)
        first: Color that moves first

    Returns:
        Game object
    """
    return Game(board=board, first=first)


def simulate_random_game(
    max_turns: int = 100,
    random_seed: Optional[int] = None
) -> Tuple[GameState, Optional[Color]]:
    """
    Simulate a game between two uniformly random players.

    Args:
        max_turns: Maximum number of full rounds
        random_seed: Random seed for reproducibility

    Returns:
        Tuple of (final game state, winner or None)
    """
    rng = random.Random(random_seed)
    game = create_game()

    for color in Color:
        game.register_agent(color, lambda state, c: rng.choice(state.get_valid_moves(c)))

    final_state = game.run_game(max_turns=max_turns)
    return final_state, game.get_winner()
