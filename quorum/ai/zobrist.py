"""Zobrist hashing constants for Quorum positions.

Three tables are drawn once, at import time, from a fixed-seed
``numpy.random.default_rng`` stream so every process builds identical keys:

- one 64-bit key per (color, file, rank) for boards up to
  :data:`MAX_BOARD_SIZE`;
- one key per (color, reserve level) for levels ``0..MAX_RESERVE_LEVEL - 1``;
- one key per color for the side to move.

The draw order is pieces, then reserves, then turns. Changing the seed or
the table shapes changes every hash.

:func:`hash_position` hashes a position from scratch. ``Board`` keeps its
hash up to date incrementally and must always agree with it.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from ..models import Color, Coord

ZOBRIST_SEED = 0x82F8527E93236F2D
MAX_BOARD_SIZE = 19
MAX_RESERVE_LEVEL = 20

_COLOR_INDEX = {Color.BLACK: 0, Color.WHITE: 1}


def _make_tables(seed: int = ZOBRIST_SEED) -> tuple[list, list, list]:
    rng = np.random.default_rng(seed)
    high = np.iinfo(np.uint64).max
    pieces = rng.integers(
        0, high, size=(2, MAX_BOARD_SIZE, MAX_BOARD_SIZE),
        dtype=np.uint64, endpoint=True,
    )
    reserves = rng.integers(
        0, high, size=(2, MAX_RESERVE_LEVEL), dtype=np.uint64, endpoint=True,
    )
    turns = rng.integers(0, high, size=2, dtype=np.uint64, endpoint=True)
    # Python ints XOR much faster than numpy scalars in the search loop
    return pieces.tolist(), reserves.tolist(), turns.tolist()


PIECE_HASHES, RESERVE_HASHES, TURN_HASHES = _make_tables()


def piece_hash(color: Color, coord: Coord) -> int:
    if not (0 <= coord.x < MAX_BOARD_SIZE and 0 <= coord.y < MAX_BOARD_SIZE):
        raise ValueError(f"No piece hash for {coord!r}")
    return PIECE_HASHES[_COLOR_INDEX[color]][coord.x][coord.y]


def reserve_hash(color: Color, reserve: int) -> int:
    if not 0 <= reserve < MAX_RESERVE_LEVEL:
        raise ValueError(f"No reserve hash for level {reserve}")
    return RESERVE_HASHES[_COLOR_INDEX[color]][reserve]


def turn_hash(color: Color) -> int:
    return TURN_HASHES[_COLOR_INDEX[color]]


def hash_position(
    white: Iterable[Coord],
    black: Iterable[Coord],
    white_reserve: int,
    black_reserve: int,
    whose_move: Color,
) -> int:
    """Hash a position from scratch."""
    h = 0
    for coord in white:
        h ^= piece_hash(Color.WHITE, coord)
    for coord in black:
        h ^= piece_hash(Color.BLACK, coord)
    h ^= reserve_hash(Color.WHITE, white_reserve)
    h ^= reserve_hash(Color.BLACK, black_reserve)
    h ^= turn_hash(whose_move)
    return h


__all__ = [
    "MAX_BOARD_SIZE",
    "MAX_RESERVE_LEVEL",
    "hash_position",
    "piece_hash",
    "reserve_hash",
    "turn_hash",
]
