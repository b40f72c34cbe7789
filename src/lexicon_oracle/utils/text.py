# SPDX-License-Identifier: Apache-2.0
"""Text processing helpers used throughout the Lexicon Oracle package."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import List, Optional


def normalise_text(value: Optional[str]) -> str:
    """Lowercase ``value`` and replace every run of non-letters with one space.

    Letters are whatever :meth:`str.isalpha` accepts, so accented and
    non-Latin scripts survive while digits, punctuation, symbols and
    combining marks become separators.
    """
    if not value:
        return ""
    lowered = str(value).lower()
    return " ".join("".join(char if char.isalpha() else " " for char in lowered).split())


def tokenize(value: Optional[str]) -> List[str]:
    """Split ``value`` into lowercase runs of Unicode letters."""
    return normalise_text(value).split()


def unique_in_order(tokens: Iterable[str]) -> List[str]:
    """Drop repeated tokens while keeping first-occurrence order."""
    seen: set[str] = set()
    unique: List[str] = []
    for token in tokens:
        if token and token not in seen:
            seen.add(token)
            unique.append(token)
    return unique


def capitalize_sentence(tokens: Sequence[str]) -> str:
    """Join ``tokens`` into a single capitalised sentence ending in a period."""
    text = " ".join(tokens)
    if not text:
        return text
    return f"{text[0].upper()}{text[1:]}."

