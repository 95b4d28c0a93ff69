"""Prometheus metrics for the Quorum search engine.

This module centralises counters and histograms so that the transposition
table and the minimax search can record lightweight telemetry without each
caller managing its own metric instances. Nothing here is exported over
HTTP; embedders that want scraping can mount ``prometheus_client``'s
default registry themselves.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram


TT_LOOKUPS: Final[Counter] = Counter(
    "quorum_tt_lookups_total",
    "Total transposition table lookups, labeled by outcome (hit/miss).",
    labelnames=("outcome",),
)

TT_INSERTS: Final[Counter] = Counter(
    "quorum_tt_inserts_total",
    "Total transposition table inserts.",
)

SEARCH_NODES: Final[Counter] = Counter(
    "quorum_search_nodes_total",
    "Total positions visited by minimax, labeled by side to move.",
    labelnames=("color",),
)

SEARCH_LATENCY: Final[Histogram] = Histogram(
    "quorum_search_latency_seconds",
    "Wall-clock time of best_move calls in seconds, labeled by depth.",
    labelnames=("depth",),
    buckets=(
        0.01,
        0.05,
        0.1,
        0.5,
        1.0,
        5.0,
        30.0,
        120.0,
    ),
)


def observe_search(depth: int, seconds: float) -> None:
    """Record one completed best_move call."""
    SEARCH_LATENCY.labels(depth=str(depth)).observe(seconds)


__all__ = [
    "SEARCH_LATENCY",
    "SEARCH_NODES",
    "TT_INSERTS",
    "TT_LOOKUPS",
    "observe_search",
]
