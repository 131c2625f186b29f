"""Cooperative driver for a full autofill run."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ..core.constants import FillStatus
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .autocomplete import AutocompleteEngine
from .grid import Grid


LOGGER = get_logger(__name__)

StepCallback = Callable[[FillStatus, Grid], None]


@dataclass
class FillConfig:
    """Configuration values driving an autofill run."""

    seed: Optional[int] = None
    max_steps: Optional[int] = None
    log_every: int = 500


@dataclass
class FillResult:
    status: FillStatus
    steps: int
    elapsed_seconds: float


class FillSession:
    """Runs the engine one step at a time so a host loop can render between steps.

    The grid is locked for the duration of a run; user edits raise
    :class:`~xword.core.exceptions.EditLockedError` until the run ends.
    """

    def __init__(
        self,
        grid: Grid,
        lexicon: Lexicon,
        config: Optional[FillConfig] = None,
        engine: Optional[AutocompleteEngine] = None,
    ) -> None:
        self.grid = grid
        self.config = config or FillConfig()
        self.engine = engine or AutocompleteEngine(grid, lexicon, rng=random.Random(self.config.seed))
        self.status: Optional[FillStatus] = None
        self.steps_taken = 0
        self._cancelled = False

    @property
    def running(self) -> bool:
        return self.status == FillStatus.IN_PROGRESS

    def start(self) -> None:
        self.engine.clear_steps()
        self.steps_taken = 0
        self.status = FillStatus.IN_PROGRESS
        self.grid.lock()
        LOGGER.info(
            "Starting autofill: %d across, %d down clues",
            len(self.grid.clues.across), len(self.grid.clues.down),
        )

    def cancel(self) -> None:
        """Ask the run to stop at its next yield point.

        A cancel requested before the run starts ends it before the first step.
        """

        self._cancelled = True

    def iter_steps(self) -> Iterator[FillStatus]:
        """Yield after every engine step until the run settles.

        Each ``next()`` performs exactly one step. The final value yielded is
        the terminal status (completed, infeasible or cancelled).
        """

        if not self.running:
            self.start()
        try:
            while True:
                if self._cancelled:
                    LOGGER.warning("Autofill cancelled after %d steps", self.steps_taken)
                    self.status = FillStatus.CANCELLED
                    yield self.status
                    return
                self.status = self.engine.step()
                self.steps_taken += 1
                if self.config.log_every and self.steps_taken % self.config.log_every == 0:
                    LOGGER.info(
                        "Autofill step %d, stack depth %d",
                        self.steps_taken, len(self.engine.steps),
                    )
                if self.config.max_steps is not None and self.steps_taken >= self.config.max_steps:
                    self.cancel()
                yield self.status
                if self.status != FillStatus.IN_PROGRESS:
                    return
        finally:
            if self.status == FillStatus.IN_PROGRESS:
                self.status = FillStatus.CANCELLED
            self._cancelled = False
            self.grid.unlock()

    def run(self, on_step: Optional[StepCallback] = None) -> FillResult:
        """Drive :meth:`iter_steps` to the end, calling ``on_step`` in between."""

        started = time.perf_counter()
        for status in self.iter_steps():
            if on_step is not None:
                on_step(status, self.grid)
        elapsed = time.perf_counter() - started
        LOGGER.info(
            "Autofill finished with %s after %d steps (%.2fs)",
            self.status.value if self.status else "?", self.steps_taken, elapsed,
        )
        return FillResult(status=self.status or FillStatus.CANCELLED, steps=self.steps_taken, elapsed_seconds=elapsed)
