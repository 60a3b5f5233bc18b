#!/usr/bin/env python
"""
Command-line match runner for Amazons agents.

Plays one or more games between two agents and shows the board after every
move (single game) or a progress bar and a results table (several games).

Example usage:
    # Watch the search play black against a random white player
    amazons-play --black mcts --white random --budget 20 --max-depth 2

    # Play ten quick games between two search agents
    amazons-play --black mcts --white mcts --games 10 --budget 5
"""
import argparse
import logging
from collections import Counter
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text
from tqdm import tqdm

from amazons_ai.core.board import Board, Coordinate
from amazons_ai.core.constants import BOARD_SIZE, FILES, TILE_SYMBOLS, Color, Tile
from amazons_ai.core.errors import is_violation
from amazons_ai.core.game import Game
from amazons_ai.core.moves import Move
from amazons_ai.mcts.agent import MCTSAgent, RandomAgent
from amazons_ai.mcts.config import MCTSConfig

console = Console()

TILE_STYLES = {
    Tile.FREE: "dim",
    Tile.ARROW: "red",
    Tile.BLACK: "bold",
    Tile.WHITE: "bold",
}


def parse_args():
    """Parse command-line arguments for the match."""
    parser = argparse.ArgumentParser(description="Play Amazons between AI agents")

    parser.add_argument("--black", type=str, default="mcts", choices=["mcts", "random"],
                        help="Agent playing black")
    parser.add_argument("--white", type=str, default="random", choices=["mcts", "random"],
                        help="Agent playing white")

    # Search configuration
    parser.add_argument("--budget", type=int, default=20,
                        help="Exploration passes per move (for MCTS agents)")
    parser.add_argument("--max-depth", type=int, default=2,
                        help="Search depth limit (for MCTS agents)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Parallel expansion workers")
    parser.add_argument("--backend", type=str, default="thread", choices=MCTSConfig.BACKENDS,
                        help="Executor used for parallel expansion")

    # Match configuration
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument("--max-turns", type=int, default=100, help="Maximum rounds per game")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", action="store_true",
                        help="Print search summaries")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug logging")

    return parser.parse_args()


def create_agent(kind: str, color: Color, args) -> Union[MCTSAgent, RandomAgent]:
    """Create an agent from command-line arguments."""
    name = f"{kind.upper()} ({color.name.lower()})"
    if kind == "random":
        seed = None if args.seed is None else args.seed + int(color)
        return RandomAgent(name=name, seed=seed)

    params = {
        "budget": args.budget,
        "max_depth": args.max_depth,
        "parallel_backend": args.backend,
    }
    if args.workers is not None:
        params["num_workers"] = args.workers
    return MCTSAgent(config=MCTSConfig.from_dict(params), name=name, verbose=args.verbose)


def render_board(board: Board, last_move: Optional[Move] = None) -> Table:
    """
    Render a board as a rich table, rank 10 at the top.

    Squares touched by the last move are highlighted.
    """
    highlighted = set(last_move) if last_move is not None else set()

    table = Table(show_header=True, show_edge=False, box=None, padding=(0, 1))
    table.add_column("")
    for file in FILES:
        table.add_column(file, justify="center")

    array = board.to_array()
    for y in range(BOARD_SIZE - 1, -1, -1):
        cells = []
        for x in range(BOARD_SIZE):
            tile = Tile(int(array[y, x]))
            style = TILE_STYLES[tile]
            if Coordinate(x, y) in highlighted:
                style += " on yellow"
            cells.append(Text(TILE_SYMBOLS[tile], style=style))
        table.add_row(str(y + 1), *cells)

    return table


def play_single_game(game: Game, max_turns: int) -> None:
    """Play one game, showing the board after every move."""
    console.print(render_board(game.state.board))

    while not game.state.game_over and game.state.turn_count < max_turns:
        color = game.state.current_color
        outcome = game.step()
        if is_violation(outcome):
            console.print(f"[red]{color.name} produced an illegal move: {outcome}[/red]")
            return

        state, _ = outcome
        if state.history and state.history[-1][0] is color:
            move = state.history[-1][1]
            console.rule(f"Move {len(state.history)}: {color.name} {move}")
            console.print(render_board(state.board, move))

    if game.state.game_over:
        console.print(f"\n[bold green]{game.state.winner.name} wins "
                      f"after {len(game.state.history)} moves[/bold green]")
    else:
        console.print("\n[yellow]Turn limit reached[/yellow]")


def main():
    """Run the match with command-line arguments."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    agents = {
        Color.BLACK: create_agent(args.black, Color.BLACK, args),
        Color.WHITE: create_agent(args.white, Color.WHITE, args),
    }

    if args.games == 1:
        game = Game()
        for color, agent in agents.items():
            game.register_agent(color, agent.get_action_callback())
        play_single_game(game, args.max_turns)
        return

    results = Counter()
    lengths = []
    for _ in tqdm(range(args.games), desc="Games"):
        game = Game()
        for color, agent in agents.items():
            game.register_agent(color, agent.get_action_callback())
        state = game.run_game(max_turns=args.max_turns)
        results[state.winner.name if state.game_over else "UNFINISHED"] += 1
        lengths.append(len(state.history))

    table = Table(title="Match Results")
    table.add_column("Side")
    table.add_column("Agent")
    table.add_column("Wins", justify="right")
    for color, agent in agents.items():
        table.add_row(color.name, str(agent), str(results[color.name]))
    if results["UNFINISHED"]:
        table.add_row("-", "unfinished", str(results["UNFINISHED"]))
    console.print(table)
    console.print(f"Average game length: {sum(lengths) / len(lengths):.1f} moves")


if __name__ == "__main__":
    main()
