#!/usr/bin/env python
"""
Tests for the Amazons tree search.

Most tests run on small, mostly walled-in positions so that every
expansion stays cheap and the expected values can be worked out by hand.
"""
import json
import os
import tempfile
import unittest
from unittest import mock

from amazons_ai.core.constants import LOSS_VALUE, Color, Tile
from amazons_ai.core.board import ALL_COORDINATES, Board, Coordinate, empty_board, initial_board
from amazons_ai.core.errors import NoAvailableMoves, is_violation
from amazons_ai.core.evaluation import evaluate
from amazons_ai.core.game import GameState
from amazons_ai.core.moves import Move, possible_moves, play_move
from amazons_ai.mcts.agent import MCTSAgent, MCTSAgentFactory, RandomAgent
from amazons_ai.mcts.config import MCTSConfig
from amazons_ai.mcts.node import ROOT_MOVE, SearchNode, round_score
from amazons_ai.mcts.search import (
    build_tree, choose_move, decide, depth_sign, expand_node, exploration_pass,
    get_action_statistics, get_principal_variation, mcts_search, side_to_move
)


def C(x: int, y: int) -> Coordinate:
    return Coordinate(x, y)


def walled_board(free, pieces) -> Board:
    """Arrows everywhere except the given free squares and pieces."""
    updates = [(coord, Tile.ARROW) for coord in ALL_COORDINATES]
    updates.extend((coord, Tile.FREE) for coord in free)
    updates.extend((coord, Tile.piece(color)) for coord, color in pieces)
    return empty_board().with_tiles(updates)


def corridor_board() -> Board:
    """Black on a1 and white on e1, with b1-d1 free between them."""
    return walled_board(
        free=[C(1, 0), C(2, 0), C(3, 0)],
        pieces=[(C(0, 0), Color.BLACK), (C(4, 0), Color.WHITE)],
    )


def pocket_board() -> Board:
    """A 4x4 open pocket in the corner with black on a1 and white on d4."""
    return walled_board(
        free=[C(x, y) for x in range(4) for y in range(4)],
        pieces=[(C(0, 0), Color.BLACK), (C(3, 3), Color.WHITE)],
    )


def trapped_board() -> Board:
    """Black on a1 is boxed in; white on f6 moves freely."""
    board = empty_board().with_tiles([
        (C(0, 0), Tile.BLACK),
        (C(1, 0), Tile.ARROW),
        (C(0, 1), Tile.ARROW),
        (C(1, 1), Tile.ARROW),
        (C(5, 5), Tile.WHITE),
    ])
    return board


# Black's winning reply in the corridor: a1-c1, arrow on d1, walls in white
CORRIDOR_WIN = Move(C(0, 0), C(2, 0), C(3, 0))


def inline_config(**kwargs) -> MCTSConfig:
    params = {"num_workers": 1}
    params.update(kwargs)
    return MCTSConfig(**params)


class TestMCTSConfig(unittest.TestCase):
    """Test case for the search configuration."""

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("AMAZONS_SEARCH_WORKERS", None)
            config = MCTSConfig()
        self.assertEqual(config.budget, 100)
        self.assertEqual(config.max_depth, 3)
        self.assertEqual(config.exploration_weight, 1.0)
        self.assertIsNone(config.time_limit)
        self.assertEqual(config.num_workers, 4)
        self.assertEqual(config.parallel_backend, "thread")

    def test_workers_from_environment(self):
        with mock.patch.dict(os.environ, {"AMAZONS_SEARCH_WORKERS": "2"}):
            self.assertEqual(MCTSConfig().num_workers, 2)

    def test_validation(self):
        with self.assertRaises(ValueError):
            MCTSConfig(budget=0)
        with self.assertRaises(ValueError):
            MCTSConfig(max_depth=-1)
        with self.assertRaises(ValueError):
            MCTSConfig(num_workers=0)
        with self.assertRaises(ValueError):
            MCTSConfig(time_limit=0)
        with self.assertRaises(ValueError):
            MCTSConfig(parallel_backend="gpu")

    def test_dict_round_trip(self):
        config = MCTSConfig(budget=7, max_depth=2, num_workers=3)
        self.assertEqual(MCTSConfig.from_dict(config.to_dict()), config)
        self.assertNotIn("BACKENDS", config.to_dict())

    def test_from_dict_ignores_unknown_keys(self):
        config = MCTSConfig.from_dict({"budget": 5, "temperature": 0.5})
        self.assertEqual(config.budget, 5)

    def test_presets(self):
        self.assertEqual(MCTSConfig.fast().budget, 10)
        self.assertEqual(MCTSConfig.fast().max_depth, 1)
        self.assertEqual(MCTSConfig.deep().parallel_backend, "process")


class TestSearchNode(unittest.TestCase):
    """Test case for search tree nodes."""

    def setUp(self):
        self.board = corridor_board()

    def make_parent(self, *values) -> SearchNode:
        parent = SearchNode(self.board)
        parent.set_children({
            i: SearchNode(self.board, static_value=value) for i, value in enumerate(values)
        })
        return parent

    def test_new_node(self):
        node = SearchNode(self.board, static_value=3.0)
        self.assertTrue(node.is_leaf)
        self.assertEqual(node.move, ROOT_MOVE)
        self.assertEqual(node.n, 1)
        self.assertEqual(node.value, 3.0)
        self.assertFalse(node.terminal)

    def test_set_children(self):
        parent = self.make_parent(1, 2, 3)
        self.assertFalse(parent.is_leaf)
        self.assertEqual(parent.n, 4)
        self.assertEqual(parent.value, 6)

        with self.assertRaises(ValueError):
            parent.set_children({0: SearchNode(self.board)})

    def test_refresh(self):
        parent = self.make_parent(1, 2)
        child = parent.children[0]
        child.value, child.n = 10, 3

        parent.refresh()

        self.assertEqual(parent.n, 5)
        self.assertEqual(parent.value, 12)

    def test_selection_score(self):
        parent = self.make_parent(1, 2, 3)
        child = parent.children[0]
        expected = 1 + 2.0 * (4 ** 0.5 / 1) ** 0.5
        self.assertAlmostEqual(parent.selection_score(child, 2.0), expected)

    def test_select_child_prefers_higher_score(self):
        self.assertEqual(self.make_parent(1, 3, 2).select_child(), 1)

    def test_select_child_tie_keeps_first(self):
        self.assertEqual(self.make_parent(2, 5, 5).select_child(), 1)

    def test_select_child_on_leaf(self):
        with self.assertRaises(ValueError):
            SearchNode(self.board).select_child()

    def test_best_move(self):
        parent = self.make_parent(2, 7, 7)
        parent.children[2].value = 7.6
        move, score = parent.best_move()
        self.assertIs(parent.best_child(), parent.children[2])
        self.assertEqual(score, 8)
        self.assertIsNone(SearchNode(self.board).best_move())

    def test_round_score_halves_away_from_zero(self):
        self.assertEqual(round_score(2.5), 3)
        self.assertEqual(round_score(-2.5), -3)
        self.assertEqual(round_score(0.5), 1)
        self.assertEqual(round_score(2.4), 2)
        self.assertEqual(round_score(-2.6), -3)
        self.assertEqual(round_score(0), 0)

    def test_best_move_rounds_half_up(self):
        parent = self.make_parent(1, 0)
        child = parent.children[1]
        child.value, child.n = 5, 2
        self.assertEqual(parent.best_move(), (child.move, 3))

        child.value = -5
        parent.children[0].value = -7
        parent.children[0].n = 2
        self.assertEqual(parent.best_move(), (child.move, -3))

    def test_mark_terminal(self):
        node = SearchNode(self.board, static_value=5)
        node.mark_terminal(LOSS_VALUE)
        self.assertTrue(node.terminal)
        self.assertEqual(node.value, LOSS_VALUE)
        self.assertEqual(node.n, 1)


class TestExpansion(unittest.TestCase):
    """Test case for expansion and single exploration passes."""

    def test_depth_helpers(self):
        self.assertEqual([depth_sign(d) for d in range(4)], [1, -1, 1, -1])
        self.assertIs(side_to_move(Color.BLACK, 0), Color.BLACK)
        self.assertIs(side_to_move(Color.BLACK, 1), Color.WHITE)
        self.assertIs(side_to_move(Color.WHITE, 2), Color.WHITE)

    def test_expand_root_of_corridor(self):
        board = corridor_board()
        root = SearchNode(board)
        moves = possible_moves(board, Color.BLACK)

        expand_node(root, moves, Color.BLACK, Color.BLACK, 0)

        self.assertEqual(len(root.children), 9)
        self.assertEqual(root.n, 10)
        values = [child.static_value for child in root.children.values()]
        self.assertEqual(values, [0, 0, 2, 1, 4, 0, 4, LOSS_VALUE, 1])
        self.assertEqual([child.move for child in root.children.values()], moves)

    def test_odd_depth_values_are_negated(self):
        board = corridor_board()
        node = SearchNode(board)
        moves = possible_moves(board, Color.BLACK)

        # Judged for white, black's replies one ply down are negated
        expand_node(node, moves, Color.BLACK, Color.WHITE, 1)

        for child in node.children.values():
            self.assertEqual(child.static_value, -evaluate(child.board, Color.WHITE))

    def test_rejected_moves_are_logged_and_dropped(self):
        board = corridor_board()
        node = SearchNode(board)
        moves = [
            Move(C(0, 0), C(1, 0), C(0, 0)),
            Move(C(0, 0), C(5, 5), C(5, 6)),
            CORRIDOR_WIN,
        ]

        with self.assertLogs("amazons_ai.mcts.search", level="ERROR"):
            expand_node(node, moves, Color.BLACK, Color.BLACK, 0)

        self.assertEqual(list(node.children), [0, 2])
        self.assertEqual(node.children[2].move, CORRIDOR_WIN)

    def test_terminal_for_searching_side(self):
        node = exploration_pass(SearchNode(trapped_board()), Color.BLACK, 0, 3)
        self.assertTrue(node.terminal)
        self.assertEqual(node.value, LOSS_VALUE)
        self.assertEqual(node.n, 1)

    def test_terminal_for_opponent(self):
        board = play_move(corridor_board(), CORRIDOR_WIN, Color.BLACK)
        self.assertEqual(possible_moves(board, Color.WHITE), [])

        node = exploration_pass(SearchNode(board), Color.BLACK, 1, 3)

        self.assertTrue(node.terminal)
        self.assertEqual(node.value, -LOSS_VALUE)

    def test_pass_stops_at_max_depth(self):
        board = corridor_board()
        root = exploration_pass(SearchNode(board), Color.BLACK, 0, 0)
        self.assertEqual(root.n, 10)

        # Already expanded at the depth limit: nothing changes
        exploration_pass(root, Color.BLACK, 0, 0)
        self.assertEqual(root.n, 10)
        self.assertTrue(all(child.is_leaf for child in root.children.values()))


class TestSearch(unittest.TestCase):
    """Test case for whole searches and the final decision."""

    def test_single_pass_picks_best_static_move(self):
        result = choose_move(corridor_board(), Color.BLACK, 1, 1)
        self.assertEqual(result, (CORRIDOR_WIN, 4))

    def test_second_pass_finds_win(self):
        result = choose_move(corridor_board(), Color.BLACK, 2, 1)
        self.assertEqual(result, (CORRIDOR_WIN, -LOSS_VALUE))

    def test_invalid_budget_raises(self):
        with self.assertRaises(ValueError):
            choose_move(corridor_board(), Color.BLACK, 0, 1)
        with self.assertRaises(ValueError):
            choose_move(corridor_board(), Color.BLACK, 1, -1)

    def test_no_moves(self):
        result = choose_move(trapped_board(), Color.BLACK, 5, 2)
        self.assertEqual(result, NoAvailableMoves())

        root, stats = build_tree(trapped_board(), Color.BLACK, inline_config(budget=3))
        self.assertTrue(root.terminal)
        self.assertEqual(decide(root), NoAvailableMoves())
        self.assertEqual(stats["passes"], 3)

    def test_initial_position(self):
        board = initial_board()
        result = choose_move(board, Color.BLACK, 1, 1)

        self.assertFalse(is_violation(result))
        move, score = result
        self.assertIn(move, possible_moves(board, Color.BLACK))
        self.assertIsInstance(score, int)

    def test_deterministic(self):
        board = pocket_board()
        first = choose_move(board, Color.BLACK, 6, 2, inline_config())
        second = choose_move(board, Color.BLACK, 6, 2, inline_config())
        self.assertEqual(first, second)
        self.assertIn(first[0], possible_moves(board, Color.BLACK))

    def test_thread_pool_matches_inline(self):
        board = pocket_board()
        inline, inline_stats = mcts_search(board, Color.WHITE, inline_config(budget=6, max_depth=2))
        threaded, threaded_stats = mcts_search(
            board, Color.WHITE,
            MCTSConfig(budget=6, max_depth=2, num_workers=3, parallel_threshold=0)
        )
        self.assertEqual(inline, threaded)
        self.assertEqual(inline_stats["move_values"], threaded_stats["move_values"])
        self.assertEqual(inline_stats["move_visits"], threaded_stats["move_visits"])

    def test_process_pool_matches_inline(self):
        board = pocket_board()
        inline = choose_move(board, Color.BLACK, 4, 2, inline_config())
        config = MCTSConfig(num_workers=2, parallel_backend="process", parallel_threshold=0)
        self.assertEqual(choose_move(board, Color.BLACK, 4, 2, config), inline)

    def test_statistics(self):
        root, stats = build_tree(pocket_board(), Color.BLACK, inline_config(budget=5, max_depth=2))

        self.assertEqual(stats["passes"], 5)
        self.assertFalse(stats["stopped_early"])
        self.assertEqual(stats["root_visits"], root.n)
        self.assertGreater(stats["node_count"], len(root.children))
        self.assertGreaterEqual(stats["tree_depth"], 1)

        variation = get_principal_variation(root)
        self.assertEqual(variation[0][0], root.best_child().move)

        actions = get_action_statistics(root)
        self.assertEqual(len(actions), len(root.children))
        for entry in actions.values():
            self.assertIn("selection", entry)

    def test_time_limit_stops_early(self):
        config = inline_config(budget=1000, max_depth=2, time_limit=1e-9)
        root, stats = build_tree(pocket_board(), Color.BLACK, config)
        self.assertTrue(stats["stopped_early"])
        self.assertLess(stats["passes"], 1000)


class TestAgents(unittest.TestCase):
    """Test case for the search and random agents."""

    def test_mcts_agent(self):
        agent = MCTSAgent(config=inline_config(budget=2, max_depth=1))
        state = GameState(board=corridor_board())

        self.assertEqual(agent.select_action(state, Color.BLACK), CORRIDOR_WIN)
        self.assertEqual(agent.get_last_statistics()["score"], -LOSS_VALUE)
        self.assertEqual(agent.get_principal_variation()[0][0], CORRIDOR_WIN)
        self.assertEqual(len(agent.get_action_statistics()), 9)
        self.assertEqual(len(agent.move_history), 1)

    def test_mcts_agent_out_of_turn(self):
        agent = MCTSAgent(config=inline_config(budget=1, max_depth=1))
        state = GameState(board=corridor_board())
        with self.assertRaises(ValueError):
            agent.select_action(state, Color.WHITE)

    def test_mcts_agent_without_moves(self):
        agent = MCTSAgent(config=inline_config(budget=1, max_depth=1))
        state = GameState(board=trapped_board())
        self.assertEqual(agent.select_action(state, Color.BLACK), NoAvailableMoves())
        self.assertEqual(agent.move_history, [])

    def test_save_statistics(self):
        agent = MCTSAgent(config=inline_config(budget=1, max_depth=1), name="Tester")
        agent.select_action(GameState(board=corridor_board()), Color.BLACK)

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "stats.json")
            agent.save_statistics(path)
            with open(path) as f:
                data = json.load(f)

        self.assertEqual(data["agent_name"], "Tester")
        self.assertEqual(data["total_moves"], 1)
        self.assertEqual(Move.from_dict(data["history"][0]["move"]), CORRIDOR_WIN)

        agent.reset_statistics()
        self.assertEqual(agent.get_principal_variation(), [])

    def test_random_agent(self):
        board = pocket_board()
        agent = RandomAgent(seed=11)
        state = GameState(board=board)
        move = agent.select_action(state, Color.BLACK)
        self.assertIn(move, possible_moves(board, Color.BLACK))

        again = RandomAgent(seed=11).select_action(state, Color.BLACK)
        self.assertEqual(move, again)

    def test_random_agent_without_moves(self):
        state = GameState(board=trapped_board())
        self.assertEqual(RandomAgent().select_action(state, Color.BLACK), NoAvailableMoves())

    def test_factory(self):
        self.assertEqual(MCTSAgentFactory.create_fast().config.budget, 10)
        custom = MCTSAgentFactory.create_custom(budget=3, max_depth=1, num_workers=1)
        self.assertEqual(custom.config.budget, 3)
        self.assertEqual(custom.config.num_workers, 1)


if __name__ == "__main__":
    unittest.main()
