"""Shared helpers for word and cell-input normalization."""

from __future__ import annotations

import re
import unicodedata

WORD_RE = re.compile(r"[^A-Za-z]")


def clean_word(text: str) -> str:
    """Return a normalized uppercase ASCII representation of ``text``."""

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    transformed = [char for char in decomposed if not unicodedata.combining(char)]
    ascii_word = WORD_RE.sub("", "".join(transformed))
    return ascii_word.upper()


def last_alnum(text: str) -> str:
    """Return the last alphanumeric character of ``text`` uppercased, or ``""``."""

    if not text:
        return ""
    for char in reversed(text):
        if char.isalnum():
            return char.upper()
    return ""


__all__ = ["clean_word", "last_alnum"]
