"""Command-line interface for Quorum.

Usage:
    quorum best-move --depth 2 --profile quorum_v1_balanced
    quorum playout --size 9 --max-plies 200
    quorum replay game.txt
    quorum bench --depth 2
"""

from quorum.cli.main import build_parser, main, setup_logging

__all__ = ["build_parser", "main", "setup_logging"]
