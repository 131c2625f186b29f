"""Data models supporting the crossword grid and autofill engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .constants import Direction
from ..data.normalization import last_alnum

Coord = Tuple[int, int]


@dataclass
class Cell:
    """One grid square."""

    value: str = ""
    filled: bool = False
    autocompleted: bool = False
    number: Optional[int] = None

    def toggle_fill(self, value: Optional[bool] = None) -> None:
        self.filled = (not self.filled) if value is None else value
        if self.filled:
            self.number = None

    def validate(self) -> None:
        """Collapse user input to its most recently typed character.

        While typing, an input can briefly hold two characters; the last
        alphanumeric one wins. Input without any alphanumeric character
        becomes an empty cell.
        """

        if not self.value:
            return
        self.autocompleted = False
        self.value = last_alnum(self.value)


@dataclass
class Clue:
    """An across or down answer slot.

    Cells are stored as ``(row, col)`` coordinates and resolved through the
    owning grid, so a clue never holds a stale cell after a rebuild.
    """

    number: int
    direction: Direction
    cells: List[Coord]
    prompt: str = ""
    impossible: bool = False

    @property
    def length(self) -> int:
        return len(self.cells)

    @property
    def start(self) -> Coord:
        return self.cells[0]

    def index_of(self, coord: Coord) -> int:
        return self.cells.index(coord)

    def label(self) -> str:
        return f"{self.number}-{self.direction.value}"


@dataclass
class ClueSet:
    """Across and down clues, each ordered by ascending number."""

    across: List[Clue] = field(default_factory=list)
    down: List[Clue] = field(default_factory=list)

    def all(self) -> List[Clue]:
        return self.across + self.down

    def by_direction(self, direction: Direction) -> List[Clue]:
        return self.across if direction == Direction.ACROSS else self.down

    def find(self, direction: Direction, number: int) -> Optional[Clue]:
        for clue in self.by_direction(direction):
            if clue.number == number:
                return clue
        return None


@dataclass
class FillStep:
    """Forward progress record kept on the engine's backtracking stack."""

    clue: Clue
    blanks: List[Coord]
    first_attempt: str
    last_attempt: str
