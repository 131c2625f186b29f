"""Pretty-print helpers for crossword grids."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, Optional

from ..core.constants import Direction

if TYPE_CHECKING:
    from ..engine.grid import Grid
    from ..engine.session import FillResult


def cell_symbol(cell) -> str:
    if cell.filled:
        return "#"
    if not cell.value:
        return "."
    # Engine letters in lowercase so user letters stand out.
    return cell.value.lower() if cell.autocompleted else cell.value


def format_grid(grid: Grid) -> str:
    width = grid.bounds.cols
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(grid.bounds.rows):
        row_cells = [cell_symbol(grid.cell(r, c)) for c in range(width)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_clues(grid: Grid) -> str:
    lines = []
    for direction in Direction:
        lines.append(direction.value.capitalize())
        for clue in grid.clues.by_direction(direction):
            letters = "".join(cell.value or "_" for cell in grid.clue_cells(clue))
            flag = " (impossible)" if clue.impossible else ""
            prompt = f"  {clue.prompt}" if clue.prompt else ""
            lines.append(f"  {clue.number:>3}. {letters}{flag}{prompt}")
    return "\n".join(lines)


def pretty_print_grid(grid: Grid, *, label: str | None = None, stream=None) -> None:
    """Print the crossword grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def print_fill_stats(grid: Grid, result: Optional[FillResult] = None, *, stream=None) -> None:
    """Print grid geometry, clue lengths and the outcome of an autofill run."""

    stream = stream or sys.stdout
    total_cells = grid.bounds.rows * grid.bounds.cols
    blocks = letters = autocompleted = 0
    for r, c in grid.iter_coords():
        cell = grid.cell(r, c)
        if cell.filled:
            blocks += 1
        elif cell.value:
            letters += 1
            if cell.autocompleted:
                autocompleted += 1
    open_cells = total_cells - blocks

    clues = grid.clues.all()
    lengths = [clue.length for clue in clues]
    length_dist = Counter(lengths)
    full = sum(1 for clue in clues if grid.is_clue_full(clue))
    impossible = [clue.label() for clue in clues if clue.impossible]

    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {grid.bounds.rows} x {grid.bounds.cols} ({total_cells} cells)", file=stream)
    print(f"  Blocks:        {blocks}", file=stream)
    if open_cells:
        print(f"  Letters:       {letters}/{open_cells} ({letters / open_cells * 100:.0f}%)", file=stream)
    print(f"  Autofilled:    {autocompleted}", file=stream)

    print(file=stream)
    print("--- Clues ---", file=stream)
    print(f"  Across/Down:   {len(grid.clues.across)}/{len(grid.clues.down)}", file=stream)
    print(f"  Full:          {full}/{len(clues)}", file=stream)
    if lengths:
        print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
        dist_parts = [f"{l}:{c}" for l, c in sorted(length_dist.items())]
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)
    if impossible:
        print(f"  Impossible:    {', '.join(impossible)}", file=stream)

    if result is not None:
        print(file=stream)
        print("--- Autofill ---", file=stream)
        print(f"  Status:        {result.status.value}", file=stream)
        print(f"  Steps:         {result.steps}", file=stream)
        print(f"  Elapsed:       {result.elapsed_seconds:.2f}s", file=stream)
