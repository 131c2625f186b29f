"""CLI entrypoint for the crossword autofill engine."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from pathlib import Path
from typing import List

from xword.core.constants import DEFAULT_LAYOUT, FillStatus
from xword.data.lexicon import Lexicon, LexiconConfig
from xword.engine.grid import Grid
from xword.engine.session import FillConfig, FillResult, FillSession
from xword.engine.solver import apply_solution, solve_grid
from xword.engine.validator import GridValidator
from xword.utils.logger import configure_logging
from xword.utils.pretty import format_clues, pretty_print_grid, print_fill_stats


def parse_layout_file(path: Path) -> List[str]:
    """Read layout rows from a file. Blank lines and # comments are skipped."""
    rows: List[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.rstrip("\n")
        if not line.strip() or line.startswith("# "):
            continue
        rows.append(line.strip())
    return rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fill a crossword grid with words from a word list",
    )
    parser.add_argument(
        "--words",
        type=Path,
        required=True,
        help="Word list, one word per line (TSV files use the first column)",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", type=Path, help="Serialized grid document (JSON)")
    source.add_argument(
        "--layout",
        type=Path,
        help="Text layout, one row per line, '#', 'X' or '*' for blocks",
    )
    source.add_argument("--size", type=int, help="Start from an empty N x N grid")
    parser.add_argument(
        "--solver",
        type=str,
        choices=["backtrack", "cpsat"],
        default="backtrack",
        help="Fill strategy (default: backtrack)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Cancel the backtracking run after this many steps",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="CP-SAT time limit in seconds",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Skip the grid and stats printout",
    )
    return parser


def load_grid(args: argparse.Namespace) -> Grid:
    if args.input:
        return Grid.deserialize(args.input.read_text(encoding="utf-8"))
    if args.layout:
        return Grid.from_layout(parse_layout_file(args.layout))
    if args.size:
        return Grid.empty(args.size)
    return Grid.from_layout(DEFAULT_LAYOUT)


def run_cpsat(grid: Grid, lexicon: Lexicon, timeout: float) -> FillResult:
    started = time.perf_counter()
    solution = solve_grid(grid, lexicon, timeout=timeout)
    if solution is None:
        status = FillStatus.INFEASIBLE
    else:
        apply_solution(grid, solution)
        status = FillStatus.COMPLETED
    return FillResult(status=status, steps=len(solution or []), elapsed_seconds=time.perf_counter() - started)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.size is not None and args.size < 2:
        parser.error("--size must be at least 2")

    lexicon = Lexicon(LexiconConfig(path=args.words, rng=random.Random(args.seed)))
    grid = load_grid(args)

    if args.solver == "cpsat":
        result = run_cpsat(grid, lexicon, args.timeout)
    else:
        session = FillSession(grid, lexicon, FillConfig(seed=args.seed, max_steps=args.max_steps))
        result = session.run()

    validation = GridValidator(lexicon, require_words=True).validate(grid)

    if not args.quiet:
        pretty_print_grid(grid, stream=sys.stderr)
        print(format_clues(grid), file=sys.stderr)
        print_fill_stats(grid, result, stream=sys.stderr)
        for message in validation.messages:
            print(f"  {message}", file=sys.stderr)

    output_text = grid.serialize()
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0 if result.status == FillStatus.COMPLETED and validation.ok else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
