"""Backtracking autofill engine.

The engine fills one clue per :meth:`AutocompleteEngine.step`:

  1. pick the most constrained under-full clue;
  2. scan the words of that length circularly for one that matches the
     letters already placed and forms known bigrams with the letters next to
     each crossing point;
  3. on a dead end, :meth:`AutocompleteEngine.unwind` retracts the latest step
     and resumes its clue's scan just after the word it last tried, refusing to
     come back round to the word it started with.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from ..core.constants import FillStatus
from ..core.exceptions import InfeasibleGridError
from ..core.models import Clue, FillStep
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .grid import Grid


LOGGER = get_logger(__name__)


class AutocompleteEngine:
    """Autofill session state bound to a single grid."""

    def __init__(self, grid: Grid, lexicon: Lexicon, rng: Optional[random.Random] = None) -> None:
        self.grid = grid
        self.lexicon = lexicon
        self.rng = rng or random.Random()
        self.steps: List[FillStep] = []

    def clear_steps(self) -> None:
        self.steps = []

    # ------------------------------------------------------------------
    # Clue selection
    # ------------------------------------------------------------------
    def most_constrained_clue(self) -> Optional[Clue]:
        """Return the under-full clue with the highest share of placed letters."""

        best: Optional[Clue] = None
        best_ratio = -1.0
        for clue in self.grid.clues.all():
            ratio = self.grid.filled_count(clue) / clue.length
            if ratio < 1.0 and ratio > best_ratio:
                best = clue
                best_ratio = ratio
        return best

    # ------------------------------------------------------------------
    # Candidate search
    # ------------------------------------------------------------------
    def find_candidate(self, clue: Clue, resume_after: str = "", stop_at: str = "") -> Optional[str]:
        """Place the next word that fits ``clue`` and return it, or None.

        ``resume_after`` continues the circular scan just after that word;
        reaching ``stop_at`` ends the scan as exhausted.
        """

        clue.impossible = False
        pool = self.lexicon.words_of_length(clue.length)
        if not pool:
            LOGGER.debug("No words of length %d for clue %s", clue.length, clue.label())
            clue.impossible = True
            return None

        start = self._start_offset(pool, resume_after)
        pattern = [cell.value for cell in self.grid.clue_cells(clue)]
        neighbours = self._crossing_neighbours(clue)

        for offset in range(len(pool)):
            word = pool[(start + offset) % len(pool)]
            if stop_at and word == stop_at:
                LOGGER.debug("Clue %s cycled back to %s", clue.label(), stop_at)
                break
            if not self._matches(word, pattern):
                continue
            if not self._bigrams_ok(word, neighbours):
                continue
            self._place(clue, word)
            return word

        clue.impossible = True
        return None

    def _start_offset(self, pool: Sequence[str], resume_after: str) -> int:
        if resume_after:
            # Last occurrence, so a duplicated word resumes past all copies.
            for index in range(len(pool) - 1, -1, -1):
                if pool[index] == resume_after:
                    return index + 1
        return self.rng.randrange(len(pool))

    @staticmethod
    def _matches(word: str, pattern: Sequence[str]) -> bool:
        for letter, placed in zip(word, pattern):
            if placed and letter != placed:
                return False
        return True

    def _crossing_neighbours(self, clue: Clue) -> List[Tuple[int, str, str]]:
        """Return ``(position, before, after)`` for placed letters around each crossing.

        Neighbours lie in the perpendicular clue, one cell before or after the
        crossing point, so they never change while candidates are scanned.
        Either letter may be empty; crossings with no placed neighbour are
        left out.
        """

        neighbours: List[Tuple[int, str, str]] = []
        other = clue.direction.other
        for position, coord in enumerate(clue.cells):
            crossing = self.grid.clues_for_cell(*coord).get(other)
            if crossing is None:
                continue
            index = crossing.index_of(coord)
            before = self.grid.cell(*crossing.cells[index - 1]).value if index > 0 else ""
            after = self.grid.cell(*crossing.cells[index + 1]).value if index + 1 < crossing.length else ""
            if before or after:
                neighbours.append((position, before, after))
        return neighbours

    def _bigrams_ok(self, word: str, neighbours: Sequence[Tuple[int, str, str]]) -> bool:
        # Neighbour letter first on both sides of the crossing.
        for position, before, after in neighbours:
            letter = word[position]
            if before and not self.lexicon.is_valid_bigram(before + letter):
                return False
            if after and not self.lexicon.is_valid_bigram(after + letter):
                return False
        return True

    def _place(self, clue: Clue, word: str) -> None:
        for cell, letter in zip(self.grid.clue_cells(clue), word):
            cell.value = letter
            cell.autocompleted = True

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------
    def autocomplete_clue(self, clue: Clue) -> Optional[str]:
        """Fill a single clue on request, outside of any backtracking run."""

        return self.find_candidate(clue)

    def step(self) -> FillStatus:
        """Fill one more clue, backtracking if the chosen clue has no fit."""

        clue = self.most_constrained_clue()
        if clue is None:
            return FillStatus.COMPLETED

        blanks = [coord for coord in clue.cells if not self.grid.cell(*coord).value]
        word = self.find_candidate(clue)
        if word:
            LOGGER.debug("Step %d: %s = %s", len(self.steps) + 1, clue.label(), word)
            self.steps.append(FillStep(clue=clue, blanks=blanks, first_attempt=word, last_attempt=word))
        else:
            try:
                self.unwind()
            except InfeasibleGridError as exc:
                LOGGER.warning("Autofill cannot complete: %s", exc)
                return FillStatus.INFEASIBLE

        if self.most_constrained_clue() is None:
            return FillStatus.COMPLETED
        return FillStatus.IN_PROGRESS

    def unwind(self) -> str:
        """Retract steps until one of them finds another word.

        Returns the replacement word; raises :class:`InfeasibleGridError` once
        the stack is empty.
        """

        while self.steps:
            step = self.steps.pop()
            for coord in step.blanks:
                cell = self.grid.cell(*coord)
                cell.value = ""
                cell.autocompleted = False
            word = self.find_candidate(step.clue, step.last_attempt, step.first_attempt)
            if word:
                LOGGER.debug(
                    "Unwound to %s: %s -> %s (depth %d)",
                    step.clue.label(), step.last_attempt, word, len(self.steps) + 1,
                )
                step.last_attempt = word
                self.steps.append(step)
                return word
            LOGGER.debug("Clue %s exhausted, unwinding further", step.clue.label())
        raise InfeasibleGridError("No autofill step left to unwind")
