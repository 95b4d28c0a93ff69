"""
Quorum Error Hierarchy

Unified exception hierarchy for the rules engine and the search AI.
All custom exceptions inherit from QuorumError for easy catching and filtering.

Two kinds of failure exist in the engine:

- Rejected input. ``Board.valid_move`` reports an ``IllegalMoveReason``
  instead of raising, so callers (the notation parser, a UI) can react.
- Invariant violations. Applying an illegal move, building a board with
  pieces off the grid, or reaching a position with neither a winner nor a
  legal move raise one of the errors below. They are never swallowed.

Usage:
    from quorum.errors import InvalidMoveError

    try:
        board = board.apply(move)
    except InvalidMoveError as e:
        logger.error(f"Illegal move: {e.message}, reason: {e.reason}")
"""

from typing import Any

__all__ = [
    "ConfigurationError",
    "InvalidMoveError",
    "InvalidStateError",
    "NotationError",
    # Base error
    "QuorumError",
    # Game rules errors
    "RulesViolationError",
    "SearchError",
]


class QuorumError(Exception):
    """Base exception for all Quorum errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "QUORUM_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"


# =============================================================================
# Game Rules Errors
# =============================================================================


class RulesViolationError(QuorumError):
    """Invalid move per game rules.

    Attributes:
        reason: The ``IllegalMoveReason`` value name, when known
    """
    code: str = "RULES_VIOLATION"

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.reason = reason
        if reason:
            self.context["reason"] = reason


class InvalidMoveError(RulesViolationError):
    """Move that cannot be applied to the current board.

    Raised by ``Board.apply`` when ``valid_move`` rejects the move. Reaching
    this is a defect in the caller, since legal moves come from
    ``Board.moves`` or from a validated notation parse.
    """
    code: str = "INVALID_MOVE"


class InvalidStateError(QuorumError):
    """Corrupted or unexpected board state.

    Raised when a board is built with pieces out of bounds or overlapping,
    or when search reaches a position with no winner and no legal moves.
    """
    code: str = "INVALID_STATE"


# =============================================================================
# Collaborator Errors
# =============================================================================


class NotationError(QuorumError):
    """Move or game record text that cannot be parsed.

    Attributes:
        text: The offending input fragment
    """
    code: str = "NOTATION_ERROR"

    def __init__(
        self,
        message: str,
        text: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.text = text
        if text is not None:
            self.context["text"] = text


class SearchError(QuorumError):
    """Search was asked to do something it cannot (e.g. depth < 1)."""
    code: str = "SEARCH_ERROR"


class ConfigurationError(QuorumError):
    """Invalid configuration.

    Raised for malformed ``QUORUM_*`` environment values or unknown
    heuristic profile ids.

    Attributes:
        key: The configuration key that failed, when known
    """
    code: str = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        key: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.key = key
        if key:
            self.context["key"] = key
