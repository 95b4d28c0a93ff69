"""
Static evaluation for Quorum positions.

Every heuristic scores a board from White's point of view: positive values
favour White (the maximizing side), negative values favour Black. Scores
are plain ints so that weighted sums, cache entries and the win sentinels
in :mod:`quorum.ai.minimax_ai` compare exactly.

Available evaluators:

- :class:`MaterialHeuristic`: piece count difference.
- :class:`MobilityHeuristic`: legal move count difference.
- :class:`CentroidDistanceHeuristic`: how tightly each color is clustered
  around its own centre of mass.
- :class:`ConnectedComponentsHeuristic`: group count difference.
- :class:`NthLargestGroupHeuristic`: size of the n-th largest group.
- :class:`LinearCombinationHeuristic`: weighted sum of the above, nestable.

:class:`HeuristicAI` picks the move whose child scores best one ply deep.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Optional

import numpy as np

from ..board import Board
from ..config import SearchConfig
from ..models import Color, Move
from .base import BaseAI

logger = logging.getLogger(__name__)

Valuation = int

# Centroid distances are floats; scaled before truncation so small
# differences in shape survive the int conversion.
CENTROID_SCALE = 1000.0


class Heuristic(ABC):
    """Static evaluator interface."""

    @abstractmethod
    def evaluate(self, board: Board) -> Valuation:
        """Score ``board``; positive favours White."""

    def __call__(self, board: Board) -> Valuation:
        return self.evaluate(board)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class MaterialHeuristic(Heuristic):
    """White pieces on the board minus Black pieces on the board."""

    def evaluate(self, board: Board) -> Valuation:
        return len(board.white) - len(board.black)


class MobilityHeuristic(Heuristic):
    """White legal moves minus Black legal moves.

    Expensive: enumerates both move lists, including placements.
    """

    def evaluate(self, board: Board) -> Valuation:
        return len(board.moves_of(Color.WHITE)) - len(board.moves_of(Color.BLACK))


def _spread(pieces: Iterable, power: float) -> float:
    coords = np.array([(c.x, c.y) for c in pieces], dtype=np.float64)
    if coords.size == 0:
        return 0.0
    centroid = coords.mean(axis=0)
    distances = np.abs(coords - centroid).sum(axis=1)
    return float(np.power(distances, power).sum())


class CentroidDistanceHeuristic(Heuristic):
    """Compactness of each color around its own centroid.

    For each color, sums ``(L1 distance to the centroid) ** power`` over its
    pieces. The result is ``black_sum - white_sum`` scaled by 1000 and
    truncated toward zero, so a tighter White formation scores higher.
    """

    def __init__(self, power: float = 2.0) -> None:
        self.power = power

    def evaluate(self, board: Board) -> Valuation:
        white_spread = _spread(board.white, self.power)
        black_spread = _spread(board.black, self.power)
        return int((black_spread - white_spread) * CENTROID_SCALE)

    def __repr__(self) -> str:
        return f"CentroidDistanceHeuristic(power={self.power})"


class ConnectedComponentsHeuristic(Heuristic):
    """Black group count minus White group count.

    Fewer groups is closer to a win, so White is ahead when Black has more.
    """

    def evaluate(self, board: Board) -> Valuation:
        return (
            len(board.connected_components(Color.BLACK))
            - len(board.connected_components(Color.WHITE))
        )


class NthLargestGroupHeuristic(Heuristic):
    """Size of each color's n-th largest group, Black minus White.

    ``n`` is 1-based; a color with fewer than ``n`` groups contributes 0.
    """

    def __init__(self, n: int = 1) -> None:
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        self.n = n

    def _nth_size(self, board: Board, color: Color) -> int:
        sizes = sorted(
            (len(group) for group in board.connected_components(color)),
            reverse=True,
        )
        return sizes[self.n - 1] if len(sizes) >= self.n else 0

    def evaluate(self, board: Board) -> Valuation:
        return self._nth_size(board, Color.BLACK) - self._nth_size(board, Color.WHITE)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n={self.n})"


# Historical name; it has always returned the n-th *largest* group.
NthSmallestStringHeuristic = NthLargestGroupHeuristic


class LinearCombinationHeuristic(Heuristic):
    """Weighted sum of sub-heuristics.

    Terms are ``(weight, heuristic)`` pairs; a term may itself be a
    ``LinearCombinationHeuristic``.
    """

    def __init__(self, terms: Sequence[tuple[int, Heuristic]]) -> None:
        self.terms: list[tuple[int, Heuristic]] = list(terms)

    def evaluate(self, board: Board) -> Valuation:
        return sum(weight * heuristic.evaluate(board) for weight, heuristic in self.terms)

    def __repr__(self) -> str:
        inner = ", ".join(f"({w}, {h!r})" for w, h in self.terms)
        return f"LinearCombinationHeuristic([{inner}])"


def greedy_order(
    board: Board,
    moves: Sequence[Move],
    heuristic: Heuristic,
    color: Optional[Color] = None,
) -> list[Move]:
    """Sort ``moves`` best-first for ``color`` (default: side to move).

    White prefers high child scores, Black low ones. Ties keep input order.
    """
    color = color or board.whose_move
    goal = 1 if color is Color.WHITE else -1
    return sorted(moves, key=lambda m: -goal * heuristic.evaluate(board.apply(m)))


class HeuristicAI(BaseAI):
    """One-ply greedy player: plays the move whose child scores best."""

    def __init__(
        self,
        color: Color,
        heuristic: Heuristic,
        config: Optional[SearchConfig] = None,
    ) -> None:
        super().__init__(color, config)
        self.heuristic = heuristic

    def evaluate_position(self, board: Board) -> Valuation:
        value = self.heuristic.evaluate(board)
        return value if self.color is Color.WHITE else -value

    def select_move(self, board: Board) -> Optional[Move]:
        moves = self.get_valid_moves(board)
        if not moves:
            return None
        best = greedy_order(board, moves, self.heuristic, self.color)[0]
        self.move_count += 1
        logger.debug(f"HeuristicAI({self.color.value}) picked {best.sort_key()}")
        return best


__all__ = [
    "CentroidDistanceHeuristic",
    "ConnectedComponentsHeuristic",
    "Heuristic",
    "HeuristicAI",
    "LinearCombinationHeuristic",
    "MaterialHeuristic",
    "MobilityHeuristic",
    "NthLargestGroupHeuristic",
    "NthSmallestStringHeuristic",
    "Valuation",
    "greedy_order",
]
