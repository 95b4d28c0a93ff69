"""Minimax AI implementation for Quorum.

Depth-limited minimax with alpha-beta pruning over :class:`~quorum.board.Board`
values, sharing a :class:`~quorum.ai.transposition_table.TranspositionTable`
keyed by Zobrist hash.

White maximizes and Black minimizes a single White-positive valuation, so a
node never has to know which side the AI itself plays. A decided position
scores :data:`MAX_VALUATION` (White connected) or :data:`MIN_VALUATION`
(Black connected) regardless of remaining depth.

Every non-leaf value is cached unconditionally, without its depth or the
alpha-beta window that produced it. A later lookup returns it even when it
was computed shallower or was only a bound. Keep one depth per table
lifetime, or reset the table between searches (the default for
:class:`MinimaxAI`), to get exact results.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import Optional

from ..board import Board
from ..config import SearchConfig
from ..errors import InvalidStateError, SearchError
from ..metrics import SEARCH_NODES, observe_search
from ..models import Color, Move
from .base import BaseAI
from .heuristic_weights import build_heuristic
from .heuristics import Heuristic, MaterialHeuristic, Valuation
from .transposition_table import TranspositionTable

logger = logging.getLogger(__name__)

MAX_VALUATION: Valuation = 2**31 - 1
MIN_VALUATION: Valuation = -(2**31)

# Children are ordered by material regardless of the leaf heuristic.
_ORDERING_HEURISTIC = MaterialHeuristic()


class SearchEngine:
    """Alpha-beta search over one heuristic and one table.

    Tracks how many positions each call visits in :attr:`nodes_visited`.
    The engine holds no per-position state, so several engines may share
    a table from different threads.
    """

    def __init__(self, heuristic: Heuristic, table: TranspositionTable) -> None:
        self.heuristic = heuristic
        self.table = table
        self.nodes_visited = 0
        self._nodes_by_color: Counter = Counter()

    def evaluate(
        self,
        board: Board,
        depth: int,
        alpha: Valuation = MIN_VALUATION,
        beta: Valuation = MAX_VALUATION,
    ) -> Valuation:
        """Minimax value of ``board`` searched ``depth`` plies deep.

        Raises:
            SearchError: if ``depth`` is negative.
            InvalidStateError: if a position with no winner has no legal
                moves.
        """
        if depth < 0:
            raise SearchError(f"Search depth must be >= 0, got {depth}")
        try:
            return self._minimax(board, depth, alpha, beta)
        finally:
            self._flush_node_counts()

    def best_move(self, board: Board, depth: int) -> Optional[Move]:
        """Best move for the side to move, or None if it has no moves.

        Each root child gets a full window; ties keep the first move in
        enumeration order.
        """
        if depth < 1:
            raise SearchError(f"best_move needs depth >= 1, got {depth}")
        maximizing = board.whose_move is Color.WHITE
        best: Optional[Move] = None
        best_value: Optional[Valuation] = None
        try:
            for move in board.moves():
                value = self._minimax(
                    board.apply(move), depth - 1, MIN_VALUATION, MAX_VALUATION
                )
                if (
                    best_value is None
                    or (maximizing and value > best_value)
                    or (not maximizing and value < best_value)
                ):
                    best, best_value = move, value
        finally:
            self._flush_node_counts()
        if best is not None:
            logger.debug(
                f"best_move({board.whose_move.value}, depth={depth}): "
                f"{best.sort_key()} value={best_value}"
            )
        return best

    def _ordered_moves(self, board: Board) -> list[Move]:
        moves = board.moves()
        if board.whose_move is Color.WHITE:
            key = lambda m: _ORDERING_HEURISTIC.evaluate(board.apply(m))  # noqa: E731
        else:
            key = lambda m: -_ORDERING_HEURISTIC.evaluate(board.apply(m))  # noqa: E731
        return sorted(moves, key=key)

    def _minimax(
        self,
        board: Board,
        depth: int,
        alpha: Valuation,
        beta: Valuation,
    ) -> Valuation:
        self.nodes_visited += 1
        self._nodes_by_color[board.whose_move] += 1

        cached = self.table.lookup(board.zobrist_hash)
        if cached is not None:
            return cached
        if depth == 0:
            return self.heuristic.evaluate(board)
        winner = board.winner()
        if winner is Color.WHITE:
            return MAX_VALUATION
        if winner is Color.BLACK:
            return MIN_VALUATION

        moves = self._ordered_moves(board)
        if not moves:
            raise InvalidStateError(
                f"No winner and no legal moves for {board.whose_move.value}",
                context={
                    "white": len(board.white),
                    "black": len(board.black),
                    "white_reserve": board.white_reserve,
                    "black_reserve": board.black_reserve,
                },
            )

        if board.whose_move is Color.WHITE:
            value = MIN_VALUATION
            for move in moves:
                value = max(value, self._minimax(board.apply(move), depth - 1, alpha, beta))
                if value >= beta:
                    break
                alpha = max(alpha, value)
        else:
            value = MAX_VALUATION
            for move in moves:
                value = min(value, self._minimax(board.apply(move), depth - 1, alpha, beta))
                if value <= alpha:
                    break
                beta = min(beta, value)

        self.table.insert(board.zobrist_hash, value)
        return value

    def _flush_node_counts(self) -> None:
        for color, count in self._nodes_by_color.items():
            SEARCH_NODES.labels(color=color.value).inc(count)
        self._nodes_by_color.clear()


def evaluate(
    board: Board,
    depth: int,
    heuristic: Heuristic,
    alpha: Valuation,
    beta: Valuation,
    table: TranspositionTable,
) -> Valuation:
    """Alpha-beta value of ``board`` (see :meth:`SearchEngine.evaluate`)."""
    return SearchEngine(heuristic, table).evaluate(board, depth, alpha, beta)


def best_move(
    board: Board,
    depth: int,
    heuristic: Heuristic,
    table: TranspositionTable,
) -> Optional[Move]:
    """Best move at ``depth`` plies (see :meth:`SearchEngine.best_move`)."""
    return SearchEngine(heuristic, table).best_move(board, depth)


class MinimaxAI(BaseAI):
    """AI that uses minimax with alpha-beta pruning.

    Search depth, heuristic profile and table reset policy come from the
    :class:`~quorum.config.SearchConfig`. With ``reset_table_per_search``
    (the default) each :meth:`select_move` starts from an empty table, so
    repeated calls on the same board return the same move.
    """

    def __init__(
        self,
        color: Color,
        config: Optional[SearchConfig] = None,
        heuristic: Optional[Heuristic] = None,
        table: Optional[TranspositionTable] = None,
    ) -> None:
        super().__init__(color, config)
        self.heuristic = heuristic or build_heuristic(self.config.profile)
        self.transposition_table = table or TranspositionTable(self.config.tt_buckets)
        self.engine = SearchEngine(self.heuristic, self.transposition_table)
        self.last_search_seconds = 0.0

    @property
    def nodes_visited(self) -> int:
        return self.engine.nodes_visited

    def evaluate_position(self, board: Board) -> Valuation:
        value = self.heuristic.evaluate(board)
        return value if self.color is Color.WHITE else -value

    def select_move(self, board: Board) -> Optional[Move]:
        """Search ``config.depth`` plies and return the best move.

        Returns:
            The selected :class:`Move`, or ``None`` if there are no legal
            moves for the side to move.

        Raises:
            SearchError: if it is not this AI's turn on ``board``.
        """
        if board.whose_move is not self.color:
            raise SearchError(
                f"MinimaxAI plays {self.color.value} but it is "
                f"{board.whose_move.value}'s turn"
            )
        if self.config.reset_table_per_search:
            self.transposition_table.reset()
        self.engine.nodes_visited = 0

        start = time.perf_counter()
        move = self.engine.best_move(board, self.config.depth)
        self.last_search_seconds = time.perf_counter() - start
        observe_search(self.config.depth, self.last_search_seconds)

        stats = self.transposition_table.stats()
        logger.info(
            f"MinimaxAI({self.color.value}): depth={self.config.depth} "
            f"nodes={self.engine.nodes_visited} "
            f"time={self.last_search_seconds:.3f}s "
            f"tt_entries={stats['entries']} tt_hit_rate={stats['hit_rate']:.2%}"
        )
        if move is not None:
            self.move_count += 1
        return move


__all__ = [
    "MAX_VALUATION",
    "MIN_VALUATION",
    "MinimaxAI",
    "SearchEngine",
    "best_move",
    "evaluate",
]
