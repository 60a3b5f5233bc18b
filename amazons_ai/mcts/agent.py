"""
Agents for playing the Game of the Amazons.

This module provides the MCTSAgent class, a ready-to-use player that picks
its moves with the budgeted tree search, and a RandomAgent baseline used
for smoke testing. Both plug into a Game through ``get_action_callback``.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import json
import random
import time

from amazons_ai.core.constants import Color
from amazons_ai.core.errors import NoAvailableMoves, is_violation
from amazons_ai.core.game import Game, GameState
from amazons_ai.core.moves import Move, possible_moves
from amazons_ai.mcts.node import SearchNode
from amazons_ai.mcts.config import MCTSConfig
from amazons_ai.mcts.search import (
    build_tree, decide, get_action_statistics, get_principal_variation
)

MoveCallback = Callable[[GameState, Color], Union[Move, NoAvailableMoves]]


class MCTSAgent:
    """
    Tree search agent for playing Amazons.

    This agent runs the budgeted tree search for every decision and keeps
    statistics about its searches.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: Search configuration parameters
            name: Name of the agent
            verbose: Whether to print a summary after each search
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all chosen moves and their statistics
        self.move_history: List[Tuple[Move, Dict[str, Any]]] = []

        # Root node of the last search
        self.last_root: Optional[SearchNode] = None

    def select_action(self, state: GameState, color: Color) -> Union[Move, NoAvailableMoves]:
        """
        Select a move using the tree search.

        Args:
            state: Current game state
            color: Color the agent plays

        Returns:
            Selected move, or NoAvailableMoves
        """
        if state.current_color is not color:
            raise ValueError(f"Not {color.name}'s turn")

        start_time = time.time()
        root, stats = build_tree(state.board, color, self.config)
        result = decide(root)
        stats["total_time"] = time.time() - start_time

        self.last_root = root
        self.last_stats = stats

        if is_violation(result):
            return result

        move, score = result
        stats["score"] = score
        self.move_history.append((move, stats))

        if self.verbose:
            self._print_search_info(move, stats)

        return move

    def _print_search_info(self, move: Move, stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            move: Selected move
            stats: Search statistics
        """
        print(f"\n{self.name} selected: {move} (score {stats['score']})")
        print(f"Passes: {stats['passes']}")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['passes_per_second']:.1f} passes/s)")
        print(f"Nodes: {stats['node_count']}")
        print(f"Tree depth: {stats['tree_depth']}")

        variation = self.get_principal_variation()
        if variation:
            line = " ".join(str(m) for m, _ in variation)
            print(f"Principal variation: {line}")

    def get_action_callback(self) -> MoveCallback:
        """
        Get a callback function for selecting moves.

        This is useful for registering the agent with a Game object.
        """
        return lambda state, color: self.select_action(state, color)

    def register_with_game(self, game: Game, color: Color) -> None:
        """
        Register this agent with a game.

        Args:
            game: Game object
            color: Color to play
        """
        game.register_agent(color, self.get_action_callback())

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[Move, float]]:
        """
        Get the principal variation from the last search.

        Returns:
            List of (move, average value) pairs
        """
        if self.last_root is None:
            return []

        return get_principal_variation(self.last_root)

    def get_action_statistics(self) -> Dict[str, Dict[str, float]]:
        """
        Get statistics for all root moves from the last search.

        Returns:
            Dictionary mapping move strings to statistics
        """
        if self.last_root is None:
            return {}

        return get_action_statistics(self.last_root, self.config.exploration_weight)

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.move_history = []
        self.last_root = None

    def save_statistics(self, filename: str) -> None:
        """
        Save the move history and its statistics to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for move, stats in self.move_history:
            history.append({
                "move": move.to_dict(),
                "stats": {k: v for k, v in stats.items() if not isinstance(v, dict)}
            })

        data = {
            "agent_name": self.name,
            "config": self.config.to_dict(),
            "history": history,
            "total_moves": len(self.move_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.budget} passes, depth {self.config.max_depth})"


class RandomAgent:
    """
    Agent that plays uniformly random legal moves.

    This agent serves as a baseline and for smoke-testing the rules engine.
    """

    def __init__(self, name: str = "Random Agent", seed: Optional[int] = None):
        self.name = name
        self.rng = random.Random(seed)

    def select_action(self, state: GameState, color: Color) -> Union[Move, NoAvailableMoves]:
        """
        Select a random legal move.

        Returns:
            Randomly selected move, or NoAvailableMoves
        """
        moves = possible_moves(state.board, color)
        if not moves:
            return NoAvailableMoves()
        return self.rng.choice(moves)

    def get_action_callback(self) -> MoveCallback:
        return lambda state, color: self.select_action(state, color)

    def __str__(self) -> str:
        return self.name


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.
    """

    @staticmethod
    def create_fast() -> MCTSAgent:
        """
        Create a fast agent with a small, shallow budget.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS")

    @staticmethod
    def create_standard() -> MCTSAgent:
        """
        Create a standard agent with balanced parameters.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS")

    @staticmethod
    def create_strong() -> MCTSAgent:
        """
        Create a strong agent with a large, deep budget.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS")

    @staticmethod
    def create_custom(
        budget: int = 100,
        max_depth: int = 3,
        num_workers: int = 4,
        time_limit: Optional[float] = None,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            budget: Number of exploration passes per move
            max_depth: Depth at which passes stop descending
            num_workers: Number of parallel expansion workers
            time_limit: Optional time limit in seconds
            name: Name of the agent

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            budget=budget,
            max_depth=max_depth,
            num_workers=num_workers,
            time_limit=time_limit
        )
        return MCTSAgent(config=config, name=name)
