"""CP-SAT grid filling using OR-Tools.

An exact alternative to the backtracking engine: it either fills every clue
or proves (within the time limit) that the current letters admit no fill.
"""

from __future__ import annotations

import string
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ortools.sat.python import cp_model

from ..core.models import Clue, Coord
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .grid import Grid


LOGGER = get_logger(__name__)

LETTERS = string.ascii_uppercase

Solution = List[Tuple[Clue, str]]


def solve_grid(
    grid: Grid,
    lexicon: Lexicon,
    timeout: float = 30.0,
    num_workers: int = 4,
) -> Optional[Solution]:
    """Fill every clue of ``grid`` via CP-SAT without mutating it.

    Returns:
        List of (clue, word) pairs covering all clues, or None if the model is
        infeasible or no solution was found before ``timeout`` seconds.
    """

    clues = grid.clues.all()
    if not clues:
        return []

    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Cell letter variables
    # ------------------------------------------------------------------
    cell_vars: Dict[Coord, Union[cp_model.IntVar, int]] = {}
    for clue in clues:
        for r, c in clue.cells:
            if (r, c) in cell_vars:
                continue
            existing = grid.cell(r, c).value
            if existing:
                if existing not in LETTERS:
                    LOGGER.warning("Cell (%d,%d) holds %r, which no word can match", r, c, existing)
                    return None
                cell_vars[(r, c)] = LETTERS.index(existing)
            else:
                cell_vars[(r, c)] = model.new_int_var(0, len(LETTERS) - 1, f"L_{r}_{c}")

    # ------------------------------------------------------------------
    # Step 2: One table constraint per clue
    # ------------------------------------------------------------------
    for clue in clues:
        pattern = [grid.cell(r, c).value for r, c in clue.cells]
        surfaces = _matching_words(lexicon, clue.length, pattern)
        if not surfaces:
            LOGGER.debug("No candidates for clue %s", clue.label())
            return None

        cell_list = [cell_vars[coord] for coord in clue.cells]
        # A clue made only of placed letters matched a word above; nothing to add.
        if any(isinstance(v, cp_model.IntVar) for v in cell_list):
            tuples = [[LETTERS.index(ch) for ch in word] for word in surfaces]
            model.add_allowed_assignments(cell_list, tuples)

    # ------------------------------------------------------------------
    # Step 3: Solve
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = num_workers

    LOGGER.info(
        "CP-SAT: %d clues, %d cell vars, solving (timeout=%0.1fs)...",
        len(clues),
        sum(1 for v in cell_vars.values() if isinstance(v, cp_model.IntVar)),
        timeout,
    )
    status = solver.solve(model)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
        return None
    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)

    # ------------------------------------------------------------------
    # Step 4: Extract solution
    # ------------------------------------------------------------------
    return [
        (clue, "".join(LETTERS[_resolve_var(solver, cell_vars[coord])] for coord in clue.cells))
        for clue in clues
    ]


def apply_solution(grid: Grid, solution: Solution) -> None:
    """Write solved words into the grid, flagging every cell as autocompleted."""

    for clue, word in solution:
        for cell, letter in zip(grid.clue_cells(clue), word):
            cell.value = letter
            cell.autocompleted = True
        clue.impossible = False


def _matching_words(lexicon: Lexicon, length: int, pattern: Sequence[str]) -> List[str]:
    return [
        word
        for word in lexicon.words_of_length(length)
        if all(not placed or placed == letter for letter, placed in zip(word, pattern))
    ]


def _resolve_var(solver: cp_model.CpSolver, var_or_const) -> int:
    """Get the value of a variable or constant."""
    if isinstance(var_or_const, cp_model.IntVar):
        return solver.value(var_or_const)
    return var_or_const
