"""Entry point for the ``quorum`` console script."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from quorum.ai.heuristic_weights import HEURISTIC_WEIGHT_PROFILES, build_heuristic
from quorum.ai.minimax_ai import MinimaxAI, SearchEngine
from quorum.ai.playout import DEFAULT_MAX_PLIES, playout
from quorum.ai.transposition_table import get_default_table
from quorum.board import Board
from quorum.config import LOG_LEVEL, SearchConfig
from quorum.errors import QuorumError
from quorum.notation import format_move, parse_game, replay

logger = logging.getLogger("quorum.cli")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _describe_move(move, board_size: int) -> str:
    # Notation only covers files and ranks 1-9.
    if board_size <= 9:
        return format_move(move)
    return repr(move.sort_key())


def cmd_best_move(args: argparse.Namespace) -> int:
    """Search the start position (or a replayed game) and print the move."""
    config = SearchConfig.from_env().with_overrides(
        depth=args.depth, board_size=args.size, profile=args.profile
    )
    if args.game:
        board = replay(parse_game(Path(args.game).read_text(encoding="utf-8")), config.board_size)
    else:
        board = Board.start_position(config.board_size)

    ai = MinimaxAI(board.whose_move, config)
    move = ai.select_move(board)
    if move is None:
        print(f"No legal move for {board.whose_move.value}")
        return 1
    print(_describe_move(move, config.board_size))
    print(f"nodes={ai.nodes_visited} time={ai.last_search_seconds:.3f}s")
    return 0


def cmd_playout(args: argparse.Namespace) -> int:
    """Greedy self-play from the start position."""
    config = SearchConfig.from_env().with_overrides(
        board_size=args.size, profile=args.profile
    )
    heuristic = build_heuristic(config.profile)
    result = playout(heuristic, Board.start_position(config.board_size), args.max_plies)
    print(result.board)
    winner = result.winner.value if result.winner else "none"
    print(f"plies={result.plies} winner={winner}")
    return 0


def cmd_replay(args: argparse.Namespace) -> int:
    """Replay a game record and print the final board."""
    record = parse_game(Path(args.file).read_text(encoding="utf-8"))
    board = replay(record, args.size)
    print(board)
    winner = board.winner()
    print(
        f"turns={len(record.turns)} white_reserve={board.white_reserve} "
        f"black_reserve={board.black_reserve} "
        f"winner={winner.value if winner else 'none'}"
    )
    if record.result is not None and record.winner is not winner:
        logger.warning(
            f"Recorded result {record.result} does not match the final position"
        )
    return 0


def cmd_bench(args: argparse.Namespace) -> int:
    """Time best_move on the start position."""
    config = SearchConfig.from_env().with_overrides(
        depth=args.depth, board_size=args.size, profile=args.profile
    )
    board = Board.start_position(config.board_size)
    table = get_default_table()
    engine = SearchEngine(build_heuristic(config.profile), table)

    timings = []
    for i in range(max(args.iterations, 1)):
        table.reset()
        engine.nodes_visited = 0
        start = time.perf_counter()
        move = engine.best_move(board, config.depth)
        elapsed = time.perf_counter() - start
        timings.append(elapsed)
        print(
            f"iteration {i + 1}: {elapsed:.3f}s nodes={engine.nodes_visited} "
            f"move={_describe_move(move, config.board_size) if move else None}"
        )
    print(f"mean={sum(timings) / len(timings):.3f}s min={min(timings):.3f}s")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quorum",
        description="Quorum rules engine and minimax search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s best-move --depth 2
  %(prog)s playout --max-plies 200
  %(prog)s replay game.txt
  %(prog)s bench --depth 2 --iterations 3
        """,
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    profiles = sorted(HEURISTIC_WEIGHT_PROFILES)

    best_parser = subparsers.add_parser("best-move", help="Search for the best move")
    best_parser.add_argument("--size", type=int, help="Board size (default: QUORUM_BOARD_SIZE)")
    best_parser.add_argument("--depth", type=int, help="Search depth (default: QUORUM_SEARCH_DEPTH)")
    best_parser.add_argument("--profile", choices=profiles, help="Heuristic profile")
    best_parser.add_argument("--game", help="Game record to replay before searching")

    playout_parser = subparsers.add_parser("playout", help="Greedy self-play")
    playout_parser.add_argument("--size", type=int, help="Board size")
    playout_parser.add_argument("--profile", choices=profiles, help="Heuristic profile")
    playout_parser.add_argument(
        "--max-plies", type=int, default=DEFAULT_MAX_PLIES,
        help=f"Stop after this many plies (default: {DEFAULT_MAX_PLIES})",
    )

    replay_parser = subparsers.add_parser("replay", help="Replay a game record")
    replay_parser.add_argument("file", help="Game record file")
    replay_parser.add_argument("--size", type=int, default=9, help="Board size (default: 9)")

    bench_parser = subparsers.add_parser("bench", help="Benchmark best_move")
    bench_parser.add_argument("--size", type=int, help="Board size")
    bench_parser.add_argument("--depth", type=int, help="Search depth")
    bench_parser.add_argument("--profile", choices=profiles, help="Heuristic profile")
    bench_parser.add_argument(
        "--iterations", type=int, default=1, help="Timed runs (default: 1)",
    )
    return parser


COMMANDS = {
    "best-move": cmd_best_move,
    "playout": cmd_playout,
    "replay": cmd_replay,
    "bench": cmd_bench,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose)
    handler = COMMANDS[args.command]
    try:
        return handler(args)
    except QuorumError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Cannot read input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
