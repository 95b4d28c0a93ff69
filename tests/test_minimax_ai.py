"""Tests for alpha-beta search and MinimaxAI."""

import pytest

from quorum.ai.heuristics import LinearCombinationHeuristic, MaterialHeuristic
from quorum.ai.minimax_ai import (
    MAX_VALUATION,
    MIN_VALUATION,
    MinimaxAI,
    SearchEngine,
    best_move,
    evaluate,
)
from quorum.ai.transposition_table import TranspositionTable
from quorum.config import SearchConfig
from quorum.errors import InvalidStateError, SearchError
from quorum.models import Color

TEST_TABLE_BUCKETS = 1 << 12
ZERO = LinearCombinationHeuristic([])


@pytest.fixture
def stuck_board(board_factory):
    """Nobody connected, White has no leap and no reserve."""
    return board_factory(white=[(0, 0), (8, 8)], black=[(4, 4), (4, 6)])


class TestEvaluate:
    """Tests for evaluate()."""

    def test_depth_zero_is_heuristic(self, near_win_board, material, table) -> None:
        assert evaluate(near_win_board, 0, material, MIN_VALUATION, MAX_VALUATION, table) == 1

    def test_depth_zero_ignores_winner(self, board_factory, material, table) -> None:
        """The heuristic is returned before the winner check at the horizon."""
        board = board_factory(white=[(0, 0), (0, 1)], black=[(5, 5), (7, 7), (2, 7)])
        assert evaluate(board, 0, material, MIN_VALUATION, MAX_VALUATION, table) == -1

    def test_white_connected_is_max(self, board_factory, material, table) -> None:
        board = board_factory(white=[(0, 0), (0, 1)], black=[(5, 5), (7, 7)])
        assert evaluate(board, 1, material, MIN_VALUATION, MAX_VALUATION, table) == MAX_VALUATION

    def test_black_connected_is_min(self, board_factory, material, table) -> None:
        board = board_factory(white=[(0, 0), (2, 2)], black=[(5, 5), (5, 6)])
        assert evaluate(board, 1, material, MIN_VALUATION, MAX_VALUATION, table) == MIN_VALUATION

    def test_both_connected_black_wins(self, board_factory, material, table) -> None:
        board = board_factory(white=[(0, 0), (0, 1)], black=[(5, 5), (5, 6)])
        assert evaluate(board, 3, material, MIN_VALUATION, MAX_VALUATION, table) == MIN_VALUATION

    def test_forced_win_found_at_depth_two(self, near_win_board, material, table) -> None:
        assert evaluate(near_win_board, 2, material, MIN_VALUATION, MAX_VALUATION, table) == MAX_VALUATION

    def test_negative_depth_rejected(self, start_board, material, table) -> None:
        with pytest.raises(SearchError):
            evaluate(start_board, -1, material, MIN_VALUATION, MAX_VALUATION, table)

    def test_no_moves_without_winner(self, stuck_board, material, table) -> None:
        assert stuck_board.winner() is None
        assert stuck_board.moves() == []
        with pytest.raises(InvalidStateError):
            evaluate(stuck_board, 1, material, MIN_VALUATION, MAX_VALUATION, table)


class TestTranspositionTableUse:
    """How the search reads and writes the shared table."""

    def test_interior_node_is_stored(self, near_win_board, material, table) -> None:
        value = evaluate(near_win_board, 2, material, MIN_VALUATION, MAX_VALUATION, table)
        assert table.lookup(near_win_board.zobrist_hash) == value

    def test_leaves_are_not_stored(self, start_board, material, table) -> None:
        evaluate(start_board, 0, material, MIN_VALUATION, MAX_VALUATION, table)
        assert len(table) == 0

    def test_cached_value_short_circuits(self, start_board, material, table) -> None:
        """A table hit wins over both the heuristic and the search."""
        table.insert(start_board.zobrist_hash, 12345)
        assert evaluate(start_board, 0, material, MIN_VALUATION, MAX_VALUATION, table) == 12345
        assert evaluate(start_board, 2, material, MIN_VALUATION, MAX_VALUATION, table) == 12345

    def test_cached_position_visits_one_node(self, near_win_board, material, table) -> None:
        engine = SearchEngine(material, table)
        engine.evaluate(near_win_board, 2)
        first = engine.nodes_visited
        engine.nodes_visited = 0
        engine.evaluate(near_win_board, 2)
        assert first > 1
        assert engine.nodes_visited == 1


class TestBestMove:
    """Tests for best_move()."""

    def test_white_takes_the_win(self, near_win_board, material, table) -> None:
        move = best_move(near_win_board, 2, material, table)
        assert move is not None
        assert near_win_board.apply(move).winner() is Color.WHITE

    def test_black_takes_the_win(self, board_factory, material, table) -> None:
        board = board_factory(
            white=[(6, 6), (8, 8), (6, 8)],
            black=[(0, 0), (0, 1), (1, 2), (2, 2)],
            whose_move=Color.BLACK,
        )
        move = best_move(board, 2, material, table)
        assert move is not None
        assert move.color is Color.BLACK
        assert board.apply(move).winner() is Color.BLACK

    def test_ties_keep_first_move(self, near_win_board, table) -> None:
        """With a flat heuristic every child scores 0 at depth 1."""
        assert best_move(near_win_board, 1, ZERO, table) == near_win_board.moves()[0]

    def test_depth_below_one_rejected(self, start_board, material, table) -> None:
        with pytest.raises(SearchError):
            best_move(start_board, 0, material, table)

    def test_no_moves_returns_none(self, stuck_board, material, table) -> None:
        assert best_move(stuck_board, 1, material, table) is None

    def test_returned_move_is_legal(self, start_board, material, table) -> None:
        move = best_move(start_board, 1, material, table)
        assert move is not None
        assert start_board.valid_move(move) is None


class TestMinimaxAI:
    """Tests for the MinimaxAI player."""

    @pytest.fixture
    def config(self) -> SearchConfig:
        return SearchConfig(depth=2, tt_buckets=TEST_TABLE_BUCKETS)

    def test_select_move_wins(self, near_win_board, config) -> None:
        ai = MinimaxAI(Color.WHITE, config, heuristic=MaterialHeuristic())
        move = ai.select_move(near_win_board)
        assert move is not None
        assert near_win_board.apply(move).winner() is Color.WHITE
        assert ai.move_count == 1
        assert ai.nodes_visited > 0
        assert ai.last_search_seconds >= 0.0

    def test_wrong_turn_rejected(self, near_win_board, config) -> None:
        ai = MinimaxAI(Color.BLACK, config, heuristic=MaterialHeuristic())
        with pytest.raises(SearchError):
            ai.select_move(near_win_board)

    def test_table_reset_between_searches(self, near_win_board, config) -> None:
        table = TranspositionTable(TEST_TABLE_BUCKETS)
        table.insert(near_win_board.zobrist_hash, 7)
        ai = MinimaxAI(Color.WHITE, config, heuristic=MaterialHeuristic(), table=table)
        ai.select_move(near_win_board)
        assert table.lookup(near_win_board.zobrist_hash) != 7

    def test_table_kept_when_configured(self, near_win_board, config) -> None:
        table = TranspositionTable(TEST_TABLE_BUCKETS)
        table.insert(12345, 7)
        ai = MinimaxAI(
            Color.WHITE,
            config.with_overrides(reset_table_per_search=False),
            heuristic=MaterialHeuristic(),
            table=table,
        )
        ai.select_move(near_win_board)
        assert table.lookup(12345) == 7

    def test_default_heuristic_from_profile(self, config) -> None:
        ai = MinimaxAI(Color.WHITE, config)
        assert [w for w, _ in ai.heuristic.terms] == [1, 1, 5]
        assert ai.transposition_table.num_buckets == TEST_TABLE_BUCKETS

    def test_evaluate_position_perspective(self, near_win_board, config) -> None:
        white = MinimaxAI(Color.WHITE, config, heuristic=MaterialHeuristic())
        black = MinimaxAI(Color.BLACK, config, heuristic=MaterialHeuristic())
        assert white.evaluate_position(near_win_board) == 1
        assert black.evaluate_position(near_win_board) == -1

    def test_no_moves_returns_none(self, stuck_board, config) -> None:
        ai = MinimaxAI(Color.WHITE, config, heuristic=MaterialHeuristic())
        assert ai.select_move(stuck_board) is None
        assert ai.move_count == 0
