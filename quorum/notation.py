"""Text notation for Quorum moves and game records.

A square is written as its file digit (``1``-``9``) followed by its rank
as a CJK numeral (``一``-``九``); both are one-based in text and zero-based
in :class:`~quorum.models.Coord`. ``1一`` is ``Coord(0, 0)``.

Moves:

- movement: ``<active><dest>[*]<conversions...>``, e.g. ``3二3六*`` or
  ``3二7四*7五``. The pivot is the midpoint of active and dest, so both
  deltas must be even.
- placement: ``-><square>``, e.g. ``->4六``.

A game record is one numbered line per full turn followed by an optional
result line::

    1. 1一5三 1九3五
    2. 1二3四 2九2五
    1-0
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from pydantic import ValidationError

from .board import Board
from .errors import NotationError
from .models import Color, Coord, Move

logger = logging.getLogger(__name__)

FILES = "123456789"
RANKS = "一二三四五六七八九"

RESULT_WHITE_WINS = "1-0"
RESULT_BLACK_WINS = "0-1"

_SQUARE = f"[{FILES}][{RANKS}]"
_MOVEMENT_RE = re.compile(
    rf"(?P<active>{_SQUARE})(?P<dest>{_SQUARE})\*?(?P<conversions>(?:{_SQUARE})*)"
)
_PLACEMENT_RE = re.compile(rf"->(?P<at>{_SQUARE})")
_LINE_RE = re.compile(r"(?P<number>[1-9][0-9]*)\.\s*(?P<white>\S+)\s+(?P<black>\S+)")
_RESULT_RE = re.compile(r"1-0|0-1")


@dataclass(frozen=True)
class Turn:
    """One numbered line: a White move and Black's reply."""

    number: int
    white: Move
    black: Move


@dataclass(frozen=True)
class GameRecord:
    """Parsed game: turns in order and the result, if recorded."""

    turns: list[Turn] = field(default_factory=list)
    result: Optional[str] = None

    def moves(self) -> list[Move]:
        return [move for turn in self.turns for move in (turn.white, turn.black)]

    @property
    def winner(self) -> Optional[Color]:
        if self.result == RESULT_WHITE_WINS:
            return Color.WHITE
        if self.result == RESULT_BLACK_WINS:
            return Color.BLACK
        return None


def parse_coord(text: str) -> Coord:
    """Parse a two-character square such as ``3五``."""
    if len(text) != 2 or text[0] not in FILES or text[1] not in RANKS:
        raise NotationError(f"Malformed square {text!r}", text=text)
    return Coord(FILES.index(text[0]), RANKS.index(text[1]))


def format_coord(coord: Coord) -> str:
    if not (0 <= coord.x < len(FILES) and 0 <= coord.y < len(RANKS)):
        raise NotationError(f"{coord!r} has no notation", text=repr(coord))
    return FILES[coord.x] + RANKS[coord.y]


def _squares(text: str) -> list[Coord]:
    return [parse_coord(text[i:i + 2]) for i in range(0, len(text), 2)]


def _pivot(active: Coord, dest: Coord, text: str) -> Coord:
    dx = dest.x - active.x
    dy = dest.y - active.y
    if dx % 2 or dy % 2:
        raise NotationError(
            f"{active!r} cannot move to {dest!r} because the pivot would "
            "not align to the grid",
            text=text,
        )
    return Coord(active.x + dx // 2, active.y + dy // 2)


def parse_move(text: str, color: Color) -> Move:
    """Parse one move for ``color``.

    Raises:
        NotationError: if ``text`` is not a well-formed move.
    """
    text = text.strip()
    try:
        placement = _PLACEMENT_RE.fullmatch(text)
        if placement:
            return Move.placement(color, parse_coord(placement["at"]))
        movement = _MOVEMENT_RE.fullmatch(text)
        if movement:
            active = parse_coord(movement["active"])
            dest = parse_coord(movement["dest"])
            conversions = tuple(_squares(movement["conversions"]))
            return Move.movement(color, active, _pivot(active, dest, text), conversions)
    except ValidationError as e:
        raise NotationError(f"Invalid move {text!r}", text=text) from e
    raise NotationError(f"Unrecognized move {text!r}", text=text)


def parse_white_move(text: str) -> Move:
    return parse_move(text, Color.WHITE)


def parse_black_move(text: str) -> Move:
    return parse_move(text, Color.BLACK)


def format_move(move: Move) -> str:
    """Inverse of :func:`parse_move` (the color is not written)."""
    if not move.is_movement:
        return "->" + format_coord(move.at)
    text = format_coord(move.active) + format_coord(move.dest())
    if move.conversions:
        text += "*" + "".join(format_coord(c) for c in move.conversions)
    return text


def parse_game(text: str) -> GameRecord:
    """Parse a numbered game record.

    Blank lines are ignored. A result, if present, must be the last
    non-blank line.

    Raises:
        NotationError: on a malformed line or a result before the last line.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    turns: list[Turn] = []
    result: Optional[str] = None
    for index, line in enumerate(lines):
        if _RESULT_RE.fullmatch(line):
            if index != len(lines) - 1:
                raise NotationError("Result must be the last line", text=line)
            result = line
            continue
        match = _LINE_RE.fullmatch(line)
        if not match:
            raise NotationError(f"Malformed line {index + 1}", text=line)
        turns.append(
            Turn(
                number=int(match["number"]),
                white=parse_white_move(match["white"]),
                black=parse_black_move(match["black"]),
            )
        )
    logger.debug(f"Parsed {len(turns)} turns, result={result}")
    return GameRecord(turns=turns, result=result)


def format_game(record: GameRecord) -> str:
    lines = [
        f"{turn.number}. {format_move(turn.white)} {format_move(turn.black)}"
        for turn in record.turns
    ]
    if record.result:
        lines.append(record.result)
    return "\n".join(lines)


def replay(record: GameRecord, size: int = 9) -> Board:
    """Apply every move of ``record`` to the start position.

    Raises:
        InvalidMoveError: if a recorded move is illegal where it is played.
    """
    board = Board.start_position(size)
    for turn in record.turns:
        board = board.apply(turn.white)
        board = board.apply(turn.black)
        logger.debug(
            f"After turn {turn.number}: white reserve {board.white_reserve}, "
            f"black reserve {board.black_reserve}"
        )
    return board


__all__ = [
    "FILES",
    "GameRecord",
    "RANKS",
    "RESULT_BLACK_WINS",
    "RESULT_WHITE_WINS",
    "Turn",
    "format_coord",
    "format_game",
    "format_move",
    "parse_black_move",
    "parse_coord",
    "parse_game",
    "parse_move",
    "parse_white_move",
    "replay",
]
