"""Word list loading, length buckets and the bigram feasibility index."""

from __future__ import annotations

import random
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from ..core.exceptions import LexiconLoadError
from ..utils.logger import get_logger
from .normalization import clean_word


LOGGER = get_logger(__name__)


@dataclass
class LexiconConfig:
    """Configuration for word list loading."""

    path: Path | str
    min_length: int = 2
    max_length: int = 24
    shuffle: bool = True
    rng: Optional[random.Random] = None
    max_entries_per_length: Optional[int] = None


class Lexicon:
    """Candidate words bucketed by length plus the bigrams seen in them.

    Bucket order is insertion order, or a shuffle of it when the config asks
    for one. The autofill engine walks buckets circularly, so the order only
    affects which consistent fill is found first.
    """

    def __init__(self, config: Optional[LexiconConfig] = None) -> None:
        self.config = config
        self._words_by_length: Dict[int, List[str]] = defaultdict(list)
        self._surfaces: Set[str] = set()
        self._bigrams: Set[str] = set()
        if config is not None:
            self._load(config)

    @classmethod
    def from_words(
        cls,
        words: Iterable[str],
        shuffle: bool = False,
        rng: Optional[random.Random] = None,
    ) -> "Lexicon":
        """Build a lexicon from an in-memory iterable of words."""

        lexicon = cls()
        lexicon._hydrate(words, min_length=1, max_length=None)
        if shuffle:
            lexicon._shuffle(rng or random.Random())
        return lexicon

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _load(self, config: LexiconConfig) -> None:
        source = Path(config.path)
        if not source.exists():
            raise LexiconLoadError(f"Missing word list: {source}")
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LexiconLoadError(f"Unable to read word list {source}: {exc}") from exc

        self._hydrate(
            self._iter_entries(text),
            min_length=config.min_length,
            max_length=config.max_length,
        )
        if config.shuffle:
            self._shuffle(config.rng or random.Random())
        if config.max_entries_per_length:
            for length, words in list(self._words_by_length.items()):
                self._words_by_length[length] = words[: config.max_entries_per_length]
        LOGGER.info(
            "Loaded %d words (%d lengths, %d bigrams) from %s",
            len(self), len(self._words_by_length), len(self._bigrams), source,
        )

    @staticmethod
    def _iter_entries(text: str) -> Iterable[str]:
        # One word per line; tab-separated files contribute their first column.
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            yield line.split("\t", 1)[0]

    def _hydrate(self, words: Iterable[str], min_length: int, max_length: Optional[int]) -> None:
        for raw in words:
            surface = clean_word(raw)
            if not surface or surface in self._surfaces:
                continue
            if len(surface) < min_length:
                continue
            if max_length is not None and len(surface) > max_length:
                continue
            self._surfaces.add(surface)
            self._words_by_length[len(surface)].append(surface)
            for index in range(len(surface) - 1):
                self._bigrams.add(surface[index:index + 2])

    def _shuffle(self, rng: random.Random) -> None:
        for words in self._words_by_length.values():
            rng.shuffle(words)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def sanitize(self, text: str) -> str:
        return clean_word(text)

    def words_of_length(self, length: int) -> List[str]:
        return self._words_by_length.get(length, [])

    def is_valid_bigram(self, pair: str) -> bool:
        return pair.upper() in self._bigrams

    def contains(self, word: str) -> bool:
        return self.sanitize(word) in self._surfaces

    def lengths(self) -> List[int]:
        return sorted(length for length, words in self._words_by_length.items() if words)

    @property
    def bigrams(self) -> Set[str]:
        return set(self._bigrams)

    def __len__(self) -> int:
        return len(self._surfaces)
