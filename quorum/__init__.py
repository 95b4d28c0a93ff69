"""Quorum: rules engine and minimax search for a leap-and-connect board game."""

__version__ = "0.1.0"

from quorum.board import Board, render_board
from quorum.errors import (
    ConfigurationError,
    InvalidMoveError,
    InvalidStateError,
    NotationError,
    QuorumError,
)
from quorum.models import Color, Coord, IllegalMoveReason, Move, MoveType

__all__ = [
    "Board",
    "Color",
    "ConfigurationError",
    "Coord",
    "IllegalMoveReason",
    "InvalidMoveError",
    "InvalidStateError",
    "Move",
    "MoveType",
    "NotationError",
    "QuorumError",
    "render_board",
]
