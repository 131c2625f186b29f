"""Crossword grid editor model with a backtracking autofill engine.

This package exposes the public API surface via:

- ``xword.engine.grid.Grid``: cells, clue numbering, symmetry and serialization.
- ``xword.data.lexicon.Lexicon``: words bucketed by length plus a bigram index.
- ``xword.engine.autocomplete.AutocompleteEngine``: step-wise fill with backtracking.
- ``xword.engine.session.FillSession``: cooperative driver for a full autofill run.
"""

from .core.constants import Direction, FillStatus
from .data.lexicon import Lexicon, LexiconConfig
from .engine.autocomplete import AutocompleteEngine
from .engine.grid import Grid
from .engine.session import FillConfig, FillResult, FillSession

__all__ = [
    "AutocompleteEngine",
    "Direction",
    "FillConfig",
    "FillResult",
    "FillSession",
    "FillStatus",
    "Grid",
    "Lexicon",
    "LexiconConfig",
]

__version__ = "0.1.0"
