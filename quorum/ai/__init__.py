"""Search AI for Quorum.

    from quorum.ai import MinimaxAI, best_move, build_heuristic

Architecture:
- zobrist.py: position hash tables
- transposition_table.py: shared valuation cache behind a reader/writer lock
- heuristics.py: static evaluators and their weighted combination
- heuristic_weights.py: named weight profiles
- minimax_ai.py: alpha-beta search, best_move, MinimaxAI
- playout.py: greedy heuristic self-play
- base.py: BaseAI abstract base class
"""

# quorum.board imports quorum.ai.zobrist, so nothing here may import the
# board eagerly. Everything is resolved on first attribute access.
_EXPORTS = {
    "BaseAI": "quorum.ai.base",
    "TranspositionTable": "quorum.ai.transposition_table",
    "ReadWriteLock": "quorum.ai.transposition_table",
    "Heuristic": "quorum.ai.heuristics",
    "MaterialHeuristic": "quorum.ai.heuristics",
    "MobilityHeuristic": "quorum.ai.heuristics",
    "CentroidDistanceHeuristic": "quorum.ai.heuristics",
    "ConnectedComponentsHeuristic": "quorum.ai.heuristics",
    "NthLargestGroupHeuristic": "quorum.ai.heuristics",
    "NthSmallestStringHeuristic": "quorum.ai.heuristics",
    "LinearCombinationHeuristic": "quorum.ai.heuristics",
    "HEURISTIC_WEIGHT_PROFILES": "quorum.ai.heuristic_weights",
    "build_heuristic": "quorum.ai.heuristic_weights",
    "MAX_VALUATION": "quorum.ai.minimax_ai",
    "MIN_VALUATION": "quorum.ai.minimax_ai",
    "evaluate": "quorum.ai.minimax_ai",
    "best_move": "quorum.ai.minimax_ai",
    "MinimaxAI": "quorum.ai.minimax_ai",
    "SearchEngine": "quorum.ai.minimax_ai",
    "HeuristicAI": "quorum.ai.heuristics",
    "PlayoutResult": "quorum.ai.playout",
    "playout": "quorum.ai.playout",
}


def __getattr__(name: str):
    """Lazy loading for AI classes and functions."""
    if name in _EXPORTS:
        import importlib
        module = importlib.import_module(_EXPORTS[name])
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = sorted(_EXPORTS)
