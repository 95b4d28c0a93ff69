"""
Shared pytest fixtures for Quorum tests.

Board fixtures are function-scoped values; boards are immutable, so sharing
them would be safe, but function scope keeps each test self-describing.
"""

from typing import Callable, Iterable, Tuple

import pytest

from quorum.ai.heuristics import MaterialHeuristic
from quorum.ai.transposition_table import TranspositionTable
from quorum.board import Board
from quorum.models import Color, Coord

# Small enough to allocate per test, large enough to keep buckets short.
TEST_TABLE_BUCKETS = 1 << 12


def coords(pairs: Iterable[Tuple[int, int]]) -> list:
    return [Coord(x, y) for x, y in pairs]


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def board_factory() -> Callable[..., Board]:
    """Factory for boards built from (x, y) pairs."""

    def _create_board(
        white: Iterable[Tuple[int, int]] = (),
        black: Iterable[Tuple[int, int]] = (),
        size: int = 9,
        whose_move: Color = Color.WHITE,
        white_reserve: int = 0,
        black_reserve: int = 0,
    ) -> Board:
        return Board.from_position(
            size,
            whose_move,
            coords(white),
            coords(black),
            white_reserve=white_reserve,
            black_reserve=black_reserve,
        )

    return _create_board


# =============================================================================
# BOARD FIXTURES
# =============================================================================


@pytest.fixture
def start_board() -> Board:
    """Standard 9x9 opening, White to move."""
    return Board.start_position(9)


@pytest.fixture
def placement_board(start_board) -> Board:
    """Opening with one piece of each color moved to its reserve."""
    return Board.from_position(
        9,
        Color.WHITE,
        start_board.white - {Coord(3, 0)},
        start_board.black - {Coord(5, 0)},
        white_reserve=1,
        black_reserve=1,
    )


@pytest.fixture
def capture_board(board_factory) -> Board:
    """Black landing on (3, 3) from (3, 5) surrounds (2, 2) and (3, 2)."""
    return board_factory(
        white=[(2, 2), (2, 3), (3, 2), (4, 1)],
        black=[(1, 1), (1, 2), (1, 3), (2, 1), (3, 1), (3, 4), (3, 5), (4, 2), (4, 3)],
    )


@pytest.fixture
def conversion_board(board_factory) -> Board:
    """Black landing on (5, 5) from (7, 5) flanks (4, 4) and (5, 4)."""
    return board_factory(
        white=[(4, 4), (5, 4), (4, 5)],
        black=[(3, 3), (5, 3), (7, 5), (6, 5)],
    )


@pytest.fixture
def near_win_board(board_factory) -> Board:
    """White to move; leaping (0, 0) over (0, 1) to (0, 2) joins every
    White piece into one group."""
    return board_factory(
        white=[(0, 0), (0, 1), (1, 2), (2, 2)],
        black=[(6, 6), (8, 8), (6, 8)],
    )


# =============================================================================
# AI FIXTURES
# =============================================================================


@pytest.fixture
def table() -> TranspositionTable:
    return TranspositionTable(TEST_TABLE_BUCKETS)


@pytest.fixture
def material() -> MaterialHeuristic:
    return MaterialHeuristic()
