"""Grid representation: numbering, symmetry, edits and serialization."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.constants import BLOCK_SYMBOLS, Bounds, Direction
from ..core.exceptions import EditLockedError, GridFormatError
from ..core.models import Cell, Clue, ClueSet, Coord
from ..data.normalization import last_alnum
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class Grid:
    """Matrix of cells plus the clue set derived from its block layout."""

    def __init__(self, cells: Optional[List[List[Cell]]] = None) -> None:
        self.cells: List[List[Cell]] = cells if cells is not None else []
        self._check_shape()
        self.clues = ClueSet()
        self._clue_index: Dict[Coord, Dict[Direction, Clue]] = {}
        self._locked = False
        self.reset()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def empty(cls, size: int) -> "Grid":
        return cls([[Cell() for _ in range(size)] for _ in range(size)])

    @classmethod
    def from_layout(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from text rows where ``#``, ``X`` or ``*`` marks a block.

        Letters in the layout are kept as cell values. Blocks are mirrored
        in row-major order, so the upper-left half of a lopsided layout wins.
        """

        if not rows:
            raise GridFormatError("Layout has no rows")
        width = len(rows[0])
        cells: List[List[Cell]] = []
        for index, row in enumerate(rows):
            if len(row) != width:
                raise GridFormatError(
                    f"Layout row {index} has {len(row)} cells, expected {width}"
                )
            cells.append([cls._layout_cell(symbol) for symbol in row])
        grid = cls(cells)
        grid._mirror_filled_cells()
        grid.reset()
        return grid

    def _check_shape(self) -> None:
        widths = {len(row) for row in self.cells}
        if len(widths) > 1:
            raise GridFormatError(f"Ragged cell matrix with row widths {sorted(widths)}")

    @staticmethod
    def _layout_cell(symbol: str) -> Cell:
        if symbol in BLOCK_SYMBOLS:
            return Cell(filled=True)
        if symbol.isalnum():
            return Cell(value=symbol.upper())
        return Cell()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def bounds(self) -> Bounds:
        return Bounds(rows=len(self.cells), cols=len(self.cells[0]) if self.cells else 0)

    @property
    def locked(self) -> bool:
        return self._locked

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def iter_coords(self) -> Iterable[Coord]:
        bounds = self.bounds
        for r in range(bounds.rows):
            for c in range(bounds.cols):
                yield r, c

    def mirror_cell(self, row: int, col: int) -> Cell:
        return self.cell(*self.bounds.mirror(row, col))

    def coords_for(self, direction: Direction, row: int, col: int, length: int) -> List[Coord]:
        dr, dc = direction.step
        return [(row + dr * i, col + dc * i) for i in range(length)]

    def cells_for(self, direction: Direction, row: int, col: int, length: int) -> List[Cell]:
        return [self.cell(r, c) for r, c in self.coords_for(direction, row, col, length)]

    def clue_cells(self, clue: Clue) -> List[Cell]:
        return [self.cell(r, c) for r, c in clue.cells]

    def clue_value(self, clue: Clue) -> str:
        return "".join(cell.value for cell in self.clue_cells(clue))

    def is_clue_empty(self, clue: Clue) -> bool:
        return not any(cell.value for cell in self.clue_cells(clue))

    def is_clue_full(self, clue: Clue) -> bool:
        return all(cell.value for cell in self.clue_cells(clue))

    def is_clue_autocompleted(self, clue: Clue) -> bool:
        return any(cell.autocompleted for cell in self.clue_cells(clue))

    def filled_count(self, clue: Clue) -> int:
        return sum(1 for cell in self.clue_cells(clue) if cell.value)

    def clues_for_cell(self, row: int, col: int) -> Dict[Direction, Clue]:
        return dict(self._clue_index.get((row, col), {}))

    def clues_crossing(self, clue: Clue) -> List[Clue]:
        """Return the perpendicular clue through each cell of ``clue``, in order."""

        crossing: List[Clue] = []
        for coord in clue.cells:
            other = self._clue_index.get(coord, {}).get(clue.direction.other)
            if other is not None:
                crossing.append(other)
        return crossing

    def is_complete(self) -> bool:
        return all(self.is_clue_full(clue) for clue in self.clues.all())

    # ------------------------------------------------------------------
    # Numbering
    # ------------------------------------------------------------------
    def _is_blocked(self, row: int, col: int) -> bool:
        if not self.bounds.contains(row, col):
            return True
        return self.cells[row][col].filled

    def _run_length(self, row: int, col: int, direction: Direction) -> int:
        dr, dc = direction.step
        length = 0
        while not self._is_blocked(row + dr * length, col + dc * length):
            length += 1
        return length

    def reset(self) -> None:
        """Rebuild numbering and clues from the block layout."""

        across: List[Clue] = []
        down: List[Clue] = []
        self._clue_index = {}
        number = 1
        for r, c in self.iter_coords():
            cell = self.cells[r][c]
            cell.number = None
            if cell.filled:
                continue
            starts_down = self._is_blocked(r - 1, c) and not self._is_blocked(r + 1, c)
            starts_across = self._is_blocked(r, c - 1) and not self._is_blocked(r, c + 1)
            if not (starts_down or starts_across):
                continue
            if starts_down:
                down.append(self._build_clue(number, Direction.DOWN, r, c))
            if starts_across:
                across.append(self._build_clue(number, Direction.ACROSS, r, c))
            cell.number = number
            number += 1
        self.clues = ClueSet(across=across, down=down)
        LOGGER.debug(
            "Numbered %sx%s grid: %d across, %d down",
            self.bounds.rows, self.bounds.cols, len(across), len(down),
        )

    def _build_clue(self, number: int, direction: Direction, row: int, col: int) -> Clue:
        length = self._run_length(row, col, direction)
        clue = Clue(number=number, direction=direction, cells=self.coords_for(direction, row, col, length))
        for coord in clue.cells:
            self._clue_index.setdefault(coord, {})[direction] = clue
        return clue

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------
    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def _ensure_editable(self) -> None:
        if self._locked:
            raise EditLockedError("Grid is locked while an autofill run is active")

    def toggle_block(self, row: int, col: int) -> None:
        """Flip a cell between block and open, keeping rotational symmetry."""

        self._ensure_editable()
        cell = self.cell(row, col)
        cell.toggle_fill()
        self.mirror_cell(row, col).toggle_fill(cell.filled)
        self.reset()

    def resize(self, new_size: int) -> None:
        """Grow or shrink to ``new_size`` x ``new_size`` at the bottom/right edges."""

        self._ensure_editable()
        if new_size < 1:
            raise ValueError(f"Grid size must be positive, got {new_size}")
        del self.cells[new_size:]
        for row in self.cells:
            del row[new_size:]
            row.extend(Cell() for _ in range(new_size - len(row)))
        while len(self.cells) < new_size:
            self.cells.append([Cell() for _ in range(new_size)])
        self._mirror_filled_cells()
        LOGGER.info("Resized grid to %sx%s", new_size, new_size)
        self.reset()

    def _mirror_filled_cells(self) -> None:
        # Row-major order: each cell overwrites its partner, so earlier cells win.
        for r, c in self.iter_coords():
            self.mirror_cell(r, c).toggle_fill(self.cells[r][c].filled)

    def is_symmetric(self) -> bool:
        return all(
            self.cells[r][c].filled == self.mirror_cell(r, c).filled
            for r, c in self.iter_coords()
        )

    # ------------------------------------------------------------------
    # Text edits
    # ------------------------------------------------------------------
    def validate_cell(self, row: int, col: int) -> None:
        self.cell(row, col).validate()

    def edit_cell(self, row: int, col: int, raw_text: str) -> str:
        """Apply user input to a cell and return the normalized value."""

        self._ensure_editable()
        cell = self.cell(row, col)
        cell.value = raw_text or ""
        cell.autocompleted = False
        cell.validate()
        for clue in self._clue_index.get((row, col), {}).values():
            clue.impossible = False
        return cell.value

    def set_prompt(self, direction: Direction, number: int, prompt: str) -> None:
        self._ensure_editable()
        clue = self.clues.find(direction, number)
        if clue is None:
            raise KeyError(f"No {direction.value} clue numbered {number}")
        clue.prompt = prompt

    def reset_text(self) -> None:
        """Clear every letter, autocomplete flag and prompt."""

        self._ensure_editable()
        for r, c in self.iter_coords():
            cell = self.cells[r][c]
            cell.value = ""
            cell.autocompleted = False
        for clue in self.clues.all():
            clue.prompt = ""
            clue.impossible = False

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> Dict[str, Any]:
        serialized_cells: List[List[Dict[str, Any]]] = []
        for row in self.cells:
            serialized_row: List[Dict[str, Any]] = []
            for cell in row:
                entry: Dict[str, Any] = {
                    "value": cell.value,
                    "filled": cell.filled,
                    "autocompleted": cell.autocompleted,
                }
                if cell.number is not None:
                    entry["number"] = cell.number
                serialized_row.append(entry)
            serialized_cells.append(serialized_row)
        return {
            "cells": serialized_cells,
            "clues": {
                direction.value: [
                    {"number": clue.number, "prompt": clue.prompt}
                    for clue in self.clues.by_direction(direction)
                ]
                for direction in Direction
            },
        }

    def serialize(self) -> str:
        return json.dumps(self.to_jsonable(), ensure_ascii=False)

    @classmethod
    def deserialize(cls, doc: str | Dict[str, Any]) -> "Grid":
        """Rebuild a grid from :meth:`serialize` output.

        Prompts are matched back onto the rebuilt clues by number; prompts
        whose number no longer exists are dropped.
        """

        if isinstance(doc, str):
            try:
                doc = json.loads(doc)
            except json.JSONDecodeError as exc:
                raise GridFormatError(f"Grid document is not valid JSON: {exc}") from exc
        if not isinstance(doc, dict):
            raise GridFormatError("Grid document must be an object")

        grid = cls(cls._parse_cells(doc.get("cells")))
        if not grid.is_symmetric():
            raise GridFormatError("Block layout is not rotationally symmetric")

        clues = doc.get("clues") or {}
        if not isinstance(clues, dict):
            raise GridFormatError("'clues' must be an object with across/down lists")
        for direction in Direction:
            for entry in clues.get(direction.value) or []:
                if not isinstance(entry, dict):
                    raise GridFormatError(f"Malformed {direction.value} clue entry: {entry!r}")
                clue = grid.clues.find(direction, entry.get("number"))
                if clue is not None:
                    clue.prompt = entry.get("prompt") or ""
        return grid

    @staticmethod
    def _parse_cells(raw: Any) -> List[List[Cell]]:
        if not raw or not isinstance(raw, list):
            raise GridFormatError("Grid document is missing its 'cells' matrix")
        width: Optional[int] = None
        cells: List[List[Cell]] = []
        for r, raw_row in enumerate(raw):
            if not isinstance(raw_row, list) or not raw_row:
                raise GridFormatError(f"Row {r} is not a non-empty list of cells")
            if width is None:
                width = len(raw_row)
            elif len(raw_row) != width:
                raise GridFormatError(f"Ragged row {r}: {len(raw_row)} cells, expected {width}")
            row: List[Cell] = []
            for c, entry in enumerate(raw_row):
                if not isinstance(entry, dict):
                    raise GridFormatError(f"Cell ({r},{c}) is not an object")
                row.append(Grid._parse_cell(r, c, entry))
            cells.append(row)
        return cells

    @staticmethod
    def _parse_cell(r: int, c: int, entry: Dict[str, Any]) -> Cell:
        raw_value = entry.get("value") or ""
        if not isinstance(raw_value, str) or len(raw_value) > 1:
            raise GridFormatError(f"Cell ({r},{c}) has invalid value {raw_value!r}")
        # Documents may hold letters as typed; the lexicon is uppercase.
        value = last_alnum(raw_value)
        if raw_value and not value:
            raise GridFormatError(f"Cell ({r},{c}) has invalid value {raw_value!r}")
        flags = {}
        for key in ("filled", "autocompleted"):
            flag = entry.get(key, False)
            if not isinstance(flag, bool):
                raise GridFormatError(f"Cell ({r},{c}) has non-boolean {key} {flag!r}")
            flags[key] = flag
        return Cell(value=value, **flags)
