"""Greedy heuristic self-play for Quorum.

Both sides are played by a :class:`~quorum.ai.heuristics.HeuristicAI`
sharing one heuristic, each picking the child that scores best for itself
one ply deep. Used to smoke-test heuristics and to generate games.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..board import Board
from ..errors import InvalidStateError
from ..models import Color
from .heuristics import Heuristic, HeuristicAI

logger = logging.getLogger(__name__)

DEFAULT_MAX_PLIES = 1000


@dataclass(frozen=True)
class PlayoutResult:
    """Outcome of :func:`playout`.

    ``winner`` is None when the ply limit was hit first.
    """

    winner: Optional[Color]
    plies: int
    board: Board


def playout(
    heuristic: Heuristic,
    root: Board,
    max_plies: int = DEFAULT_MAX_PLIES,
) -> PlayoutResult:
    """Play greedily from ``root`` until a color connects.

    Stops early once more than ``max_plies`` plies have been played.

    Raises:
        InvalidStateError: if the side to move has no legal moves and
            nobody has won.
    """
    players = {
        Color.WHITE: HeuristicAI(Color.WHITE, heuristic),
        Color.BLACK: HeuristicAI(Color.BLACK, heuristic),
    }
    board = root
    ply = 0
    while board.winner() is None:
        move = players[board.whose_move].select_move(board)
        if move is None:
            raise InvalidStateError(
                f"Board with no winner and no moves on {board.whose_move.value}'s turn",
                context={"ply": ply, "max_gap": board.max_gap},
            )
        board = board.apply(move)
        ply += 1
        logger.debug(f"Turn {ply} heuristic {heuristic.evaluate(board)}\n{board}")
        if ply > max_plies:
            logger.info(f"Playout stopped at ply limit {max_plies}")
            break

    winner = board.winner()
    logger.info(
        f"Playout finished after {ply} plies, winner: "
        f"{winner.value if winner else 'none'}"
    )
    return PlayoutResult(winner=winner, plies=ply, board=board)


__all__ = ["DEFAULT_MAX_PLIES", "PlayoutResult", "playout"]
