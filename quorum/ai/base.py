"""
Base AI Player class for Quorum
Abstract base class that all AI implementations inherit from
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..board import Board
from ..config import SearchConfig
from ..models import Color, Move


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    def __init__(self, color: Color, config: Optional[SearchConfig] = None):
        """
        Initialize AI player

        Args:
            color: The color this AI plays
            config: Search settings; defaults to ``SearchConfig()``
        """
        self.color = color
        self.config = config or SearchConfig()
        self.move_count = 0

    @abstractmethod
    def select_move(self, board: Board) -> Optional[Move]:
        """
        Select the best move for the side to move on ``board``

        Args:
            board: Current position

        Returns:
            Selected move or None if no valid moves
        """

    @abstractmethod
    def evaluate_position(self, board: Board) -> int:
        """
        Evaluate a position from this AI's perspective

        Args:
            board: Current position

        Returns:
            Evaluation score (positive = good for this AI, negative = bad)
        """

    def get_evaluation_breakdown(self, board: Board) -> Dict[str, int]:
        """Detailed breakdown of position evaluation."""
        return {"total": self.evaluate_position(board)}

    def get_valid_moves(self, board: Board) -> List[Move]:
        """All legal moves for this AI's color on ``board``."""
        return board.moves_of(self.color)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(color={self.color.value}, "
            f"depth={self.config.depth})"
        )
