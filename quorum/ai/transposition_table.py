"""Bucketed transposition table shared by minimax searches.

Entries are ``(zobrist_hash, valuation)`` pairs stored in a fixed number of
append-only buckets indexed by ``hash % num_buckets``. Entries are never
replaced or evicted during a session; :meth:`TranspositionTable.reset` is
the only way to drop them.

Lookups trust the 64-bit hash alone. Two different positions that collide
share a cached value. Values are stored without a depth or bound tag, so
a table is only sound when every search that touches it uses the same
depth.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from ..metrics import TT_INSERTS, TT_LOOKUPS

TRANSPOSITION_TABLE_SIZE = 1 << 20

Valuation = int


class ReadWriteLock:
    """Many concurrent readers, one exclusive writer.

    A writer waits for active readers to drain. New readers wait while a
    writer is active or queued.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class TranspositionTable:
    """Append-only hash-bucket table keyed by Zobrist hash."""

    def __init__(self, num_buckets: int = TRANSPOSITION_TABLE_SIZE) -> None:
        """Initialize the transposition table.

        Args:
            num_buckets: Number of buckets; a hash lands in
                ``hash % num_buckets``.
        """
        if num_buckets <= 0:
            raise ValueError("num_buckets must be positive")
        self.num_buckets = num_buckets
        # Buckets are allocated on first insert; a missing index is an empty bucket.
        self._buckets: dict[int, list[tuple[int, Valuation]]] = {}
        self._lock = ReadWriteLock()
        # Lookups run concurrently under the read lock, so the counters
        # need their own mutex.
        self._stats_lock = threading.Lock()
        self._entries = 0
        self.hits = 0
        self.misses = 0

    def lookup(self, zobrist_hash: int) -> Optional[Valuation]:
        """Return the first valuation stored under ``zobrist_hash``.

        Args:
            zobrist_hash: Full 64-bit position hash

        Returns:
            The cached valuation, or None on a miss
        """
        with self._lock.read_locked():
            bucket = self._buckets.get(zobrist_hash % self.num_buckets, ())
            value = next(
                (v for h, v in bucket if h == zobrist_hash),
                None,
            )
        with self._stats_lock:
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
        TT_LOOKUPS.labels(outcome="miss" if value is None else "hit").inc()
        return value

    def insert(self, zobrist_hash: int, value: Valuation) -> None:
        """Append an entry. Duplicates are kept; lookup returns the oldest."""
        with self._lock.write_locked():
            self._buckets.setdefault(zobrist_hash % self.num_buckets, []).append(
                (zobrist_hash, value)
            )
            self._entries += 1
        TT_INSERTS.inc()

    def reset(self) -> None:
        """Drop every entry and reset stats."""
        with self._lock.write_locked():
            self._buckets.clear()
            self._entries = 0
            with self._stats_lock:
                self.hits = 0
                self.misses = 0

    def __contains__(self, zobrist_hash: int) -> bool:
        with self._lock.read_locked():
            bucket = self._buckets.get(zobrist_hash % self.num_buckets, ())
            return any(h == zobrist_hash for h, _ in bucket)

    def __len__(self) -> int:
        """Return number of entries in table, duplicates included."""
        return self._entries

    def stats(self) -> dict:
        """Return usage statistics.

        Returns:
            Dictionary with entries, buckets, hits, misses and hit_rate.
        """
        with self._stats_lock:
            hits, misses = self.hits, self.misses
        total_lookups = hits + misses
        hit_rate = hits / total_lookups if total_lookups > 0 else 0.0
        return {
            "entries": self._entries,
            "buckets": self.num_buckets,
            "hits": hits,
            "misses": misses,
            "hit_rate": hit_rate,
        }


_default_table: Optional[TranspositionTable] = None
_default_table_lock = threading.Lock()


def get_default_table() -> TranspositionTable:
    """Process-wide table for command-line use. Library callers should
    pass their own table to the search."""
    global _default_table
    with _default_table_lock:
        if _default_table is None:
            _default_table = TranspositionTable()
        return _default_table
