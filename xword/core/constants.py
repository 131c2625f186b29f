"""Shared constants and enumerations for the crossword editor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple


class Direction(str, Enum):
    """Clue directions supported by the grid."""

    ACROSS = "across"
    DOWN = "down"

    @property
    def other(self) -> "Direction":
        return Direction.DOWN if self is Direction.ACROSS else Direction.ACROSS

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.ACROSS else (1, 0)


class FillStatus(str, Enum):
    """Outcome of a single autofill step or of a whole run."""

    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    INFEASIBLE = "INFEASIBLE"
    CANCELLED = "CANCELLED"


BLOCK_SYMBOLS: FrozenSet[str] = frozenset({"#", "X", "*"})

# Starting grid of the editor. Not symmetric as written; blocks are mirrored on load.
DEFAULT_LAYOUT: Tuple[str, ...] = (
    "X............",
    ".XX..........",
    ".............",
    ".....X....XX.",
    "....X.X.....X",
    "......X.....X",
    "X.....X......",
    "X.....X......",
    ".XX...X.X....",
    ".......X.....",
    ".............",
    "..........XX.",
    "............X",
)


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def mirror(self, row: int, col: int) -> Tuple[int, int]:
        """Return the point-mirror partner of ``(row, col)``."""

        return self.rows - 1 - row, self.cols - 1 - col
