"""Deterministic integrity checks for grids and their fills."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..core.exceptions import ValidationError
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .grid import Grid


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Runs structural and fill checks over a grid."""

    def __init__(self, lexicon: Optional[Lexicon] = None, require_words: bool = False) -> None:
        self.lexicon = lexicon
        self.require_words = require_words

    def validate(self, grid: Grid) -> ValidationResult:
        try:
            self.check(grid)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def check(self, grid: Grid) -> None:
        self._check_symmetry(grid)
        self._check_numbers(grid)
        self._check_clue_runs(grid)
        self._check_values(grid)
        if self.lexicon is not None:
            self._check_bigrams(grid, self.lexicon)
            if self.require_words:
                self._check_words(grid, self.lexicon)

    def _check_symmetry(self, grid: Grid) -> None:
        for r, c in grid.iter_coords():
            if grid.cell(r, c).filled != grid.mirror_cell(r, c).filled:
                mr, mc = grid.bounds.mirror(r, c)
                raise ValidationError(f"Block at ({r},{c}) does not mirror ({mr},{mc})")

    def _check_numbers(self, grid: Grid) -> None:
        for r, c in grid.iter_coords():
            cell = grid.cell(r, c)
            if cell.filled and cell.number is not None:
                raise ValidationError(f"Block cell ({r},{c}) carries number {cell.number}")
        for clue in grid.clues.all():
            start = grid.cell(*clue.start)
            if start.number != clue.number:
                raise ValidationError(
                    f"Clue {clue.label()} starts on a cell numbered {start.number}"
                )

    def _check_clue_runs(self, grid: Grid) -> None:
        for clue in grid.clues.all():
            dr, dc = clue.direction.step
            row, col = clue.start
            for index, (r, c) in enumerate(clue.cells):
                if (r, c) != (row + dr * index, col + dc * index):
                    raise ValidationError(f"Clue {clue.label()} is not contiguous at ({r},{c})")
                if not grid.bounds.contains(r, c):
                    raise ValidationError(f"Clue {clue.label()} leaves the grid at ({r},{c})")
                if grid.cell(r, c).filled:
                    raise ValidationError(f"Clue {clue.label()} covers block ({r},{c})")

    def _check_values(self, grid: Grid) -> None:
        for r, c in grid.iter_coords():
            value = grid.cell(r, c).value
            if value and (len(value) != 1 or not value.isalnum()):
                raise ValidationError(f"Invalid letter '{value}' at ({r},{c})")

    def _check_bigrams(self, grid: Grid, lexicon: Lexicon) -> None:
        # Reading-order pairs: every word of the lexicon passes this check.
        for clue in grid.clues.all():
            letters = [cell.value for cell in grid.clue_cells(clue)]
            for index in range(len(letters) - 1):
                pair = letters[index] + letters[index + 1]
                if len(pair) == 2 and not lexicon.is_valid_bigram(pair):
                    raise ValidationError(f"Unknown bigram '{pair}' in {clue.label()} at {clue.cells[index]}")

    def _check_words(self, grid: Grid, lexicon: Lexicon) -> None:
        for clue in grid.clues.all():
            if not grid.is_clue_full(clue):
                continue
            word = grid.clue_value(clue)
            if not lexicon.contains(word):
                raise ValidationError(f"Invalid word '{word}' at {clue.label()}")
