"""
Core value types for Quorum: colors, coordinates, moves and move deltas.

``Move`` is a frozen Pydantic model so that values handed over by the
notation parser or a caller are validated once at construction. ``Coord``
and ``MoveDelta`` sit on the search hot path and are plain slotted
dataclasses to avoid validation overhead on every flood fill and apply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class Color(str, Enum):
    """Player color. WHITE moves first and is the maximizing side."""
    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class MoveType(str, Enum):
    """Move type enumeration"""
    MOVEMENT = "movement"
    PLACEMENT = "placement"


class IllegalMoveReason(str, Enum):
    """Why ``Board.valid_move`` rejected a move."""
    ACTIVE_NOT_OWNED = "active_not_owned"
    PIVOT_NOT_OWNED = "pivot_not_owned"
    DEST_NOT_EMPTY = "dest_not_empty"
    DEST_NOT_IN_BOUNDS = "dest_not_in_bounds"
    GAP_TOO_BIG = "gap_too_big"
    EMPTY_RESERVE = "empty_reserve"
    TRIED_CONVERT_CAPTURE = "tried_convert_capture"


@dataclass(frozen=True, slots=True, order=True)
class Coord:
    """Board square as (file, rank), zero-based."""

    x: int
    y: int

    def __repr__(self) -> str:
        return f"Coord({self.x}, {self.y})"


class Move(BaseModel):
    """Move representation.

    A tagged value:
    - ``MOVEMENT``: ``active`` leaps over ``pivot`` and lands on
      :meth:`dest`. ``conversions`` lists the flanked opponent squares the
      mover pays reserve to flip instead of just capturing.
    - ``PLACEMENT``: a reserve piece is dropped on ``at``.

    Use :meth:`movement` and :meth:`placement` rather than the raw
    constructor.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: MoveType
    color: Color
    active: Optional[Coord] = None
    pivot: Optional[Coord] = None
    conversions: Tuple[Coord, ...] = ()
    at: Optional[Coord] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "Move":
        if self.type == MoveType.MOVEMENT:
            if self.active is None or self.pivot is None:
                raise ValueError("movement requires active and pivot")
            if self.active == self.pivot:
                raise ValueError("active and pivot must differ")
            if self.at is not None:
                raise ValueError("movement does not take 'at'")
        else:
            if self.at is None:
                raise ValueError("placement requires 'at'")
            if self.active is not None or self.pivot is not None or self.conversions:
                raise ValueError("placement only takes 'at'")
        return self

    @classmethod
    def movement(
        cls,
        color: Color,
        active: Coord,
        pivot: Coord,
        conversions: Tuple[Coord, ...] = (),
    ) -> "Move":
        return cls(
            type=MoveType.MOVEMENT,
            color=color,
            active=active,
            pivot=pivot,
            conversions=tuple(conversions),
        )

    @classmethod
    def placement(cls, color: Color, at: Coord) -> "Move":
        return cls(type=MoveType.PLACEMENT, color=color, at=at)

    @property
    def is_movement(self) -> bool:
        return self.type == MoveType.MOVEMENT

    def dest(self) -> Coord:
        """Landing square: ``active`` reflected through ``pivot``."""
        if self.type == MoveType.PLACEMENT:
            return self.at
        dx = self.pivot.x - self.active.x
        dy = self.pivot.y - self.active.y
        return Coord(self.pivot.x + dx, self.pivot.y + dy)

    def gap(self) -> int:
        """Number of squares skipped between active and pivot."""
        if self.type == MoveType.PLACEMENT:
            return 0
        return max(
            abs(self.active.x - self.pivot.x) - 1,
            abs(self.active.y - self.pivot.y) - 1,
        )

    def sort_key(self) -> tuple:
        """Total order used when a deterministic listing is needed."""
        if self.type == MoveType.PLACEMENT:
            return (self.color.value, 1, self.at, (), ())
        return (
            self.color.value,
            0,
            self.active,
            self.pivot,
            tuple(sorted(self.conversions)),
        )


@dataclass(slots=True)
class MoveDelta:
    """Squares gained/lost and reserve changes produced by one move.

    Built once per apply and consumed twice: to update the piece sets and
    reserves, and to update the position hash. Both read the same record,
    so they cannot drift apart.
    """

    white_minus: list[Coord] = field(default_factory=list)
    white_plus: list[Coord] = field(default_factory=list)
    black_minus: list[Coord] = field(default_factory=list)
    black_plus: list[Coord] = field(default_factory=list)
    white_reserve: int = 0
    black_reserve: int = 0

    def plus_of(self, color: Color) -> list[Coord]:
        return self.white_plus if color is Color.WHITE else self.black_plus

    def minus_of(self, color: Color) -> list[Coord]:
        return self.white_minus if color is Color.WHITE else self.black_minus

    def add_reserve(self, color: Color, amount: int) -> None:
        if color is Color.WHITE:
            self.white_reserve += amount
        else:
            self.black_reserve += amount
