# SPDX-License-Identifier: Apache-2.0
"""Frequency dictionaries built from a reference corpus.

A :class:`Dictionary` is the persisted artefact (``word<TAB>count`` lines with
a ``#`` comment header). A :class:`Vocabulary` is its read-only runtime form:
parallel word and count tuples plus a membership set.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Tuple

import numpy as np

from .logging import get_logger
from .utils import save_text, tokenize

LOGGER = get_logger(__name__)

DEFAULT_MIN_COUNT = 10
_FIELD_SPLIT = re.compile(r"\t+")


@dataclass(frozen=True)
class FrequencyEntry:
    word: str
    count: int

    def __post_init__(self) -> None:
        if not self.word:
            raise ValueError("dictionary words must be non-empty")
        if self.count < 1:
            raise ValueError(f"count for {self.word!r} must be at least 1, got {self.count}")


@dataclass(frozen=True)
class Dictionary:
    """Entries ordered by descending count, ties broken alphabetically."""

    entries: Tuple[FrequencyEntry, ...] = ()
    min_count: int = DEFAULT_MIN_COUNT
    source: str = "corpus"
    warning: Optional[str] = None

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def words(self) -> list[str]:
        return [entry.word for entry in self.entries]

    def header(self) -> list[str]:
        return [
            f"# Dictionary generated from {self.source}",
            f"# Words with counts >= {self.min_count}",
            f"# Total unique words matching: {len(self.entries)}",
            "# Format: word\tcount",
        ]

    def to_text(self) -> str:
        """Serialise the dictionary; identical dictionaries give identical text."""
        lines = self.header()
        lines.append("")
        lines.extend(f"{entry.word}\t{entry.count}" for entry in self.entries)
        return "\n".join(lines) + "\n"

    def save(self, path: Path) -> Path:
        path = Path(path)
        save_text(path, self.to_text())
        LOGGER.info("Wrote %s with %d entries", path, len(self.entries))
        return path

    def to_vocabulary(self) -> Vocabulary:
        return Vocabulary.from_entries(self.entries)


@dataclass(frozen=True)
class Vocabulary:
    """Immutable word/count table used to constrain generation."""

    words: Tuple[str, ...] = ()
    counts: Tuple[int, ...] = ()
    membership: frozenset[str] = field(init=False, repr=False, compare=False)
    positions: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.words) != len(self.counts):
            raise ValueError("words and counts must have the same length")
        object.__setattr__(self, "membership", frozenset(self.words))
        positions: dict[str, int] = {}
        for position, word in enumerate(self.words):
            positions.setdefault(word, position)
        object.__setattr__(self, "positions", MappingProxyType(positions))

    @classmethod
    def empty(cls) -> Vocabulary:
        return cls()

    @classmethod
    def from_entries(cls, entries: Iterable[FrequencyEntry]) -> Vocabulary:
        entries = list(entries)
        return cls(
            words=tuple(entry.word for entry in entries),
            counts=tuple(entry.count for entry in entries),
        )

    @classmethod
    def from_counts(cls, counts: dict[str, int]) -> Vocabulary:
        """Build a vocabulary from a mapping, keeping the mapping's order."""
        return cls(words=tuple(counts), counts=tuple(int(value) for value in counts.values()))

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: object) -> bool:
        return word in self.membership

    @property
    def is_empty(self) -> bool:
        return not self.words

    def index(self, word: str) -> int:
        """Return the position of ``word`` or ``-1`` when absent."""
        return self.positions.get(word, -1)

    def weights(self) -> np.ndarray:
        """Return a fresh float copy of the counts for request-local mutation."""
        return np.asarray(self.counts, dtype=np.float64).copy()

    def ranked_words(self) -> list[str]:
        """Words by descending count; equal counts keep dictionary order."""
        order = sorted(range(len(self.words)), key=lambda i: -self.counts[i])
        return [self.words[i] for i in order]

    def most_common(self, limit: int) -> list[tuple[str, int]]:
        ranked = sorted(zip(self.words, self.counts), key=lambda item: -item[1])
        return ranked[: max(limit, 0)]


def build_dictionary(
    corpus_text: Optional[str],
    min_count: int = DEFAULT_MIN_COUNT,
    *,
    source: str = "corpus",
) -> Dictionary:
    """Tally corpus words and keep those occurring at least ``min_count`` times."""

    if min_count < 1:
        raise ValueError("min_count must be at least 1")
    counts = Counter(tokenize(corpus_text))
    selected = [
        FrequencyEntry(word=word, count=count)
        for word, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        if count >= min_count
    ]
    warning: Optional[str] = None
    if not counts:
        warning = f"Corpus {source} contains no words; dictionary is empty."
    elif not selected:
        warning = (
            f"No word in {source} occurs at least {min_count} times "
            f"({len(counts)} distinct words seen); dictionary is empty."
        )
    if warning:
        LOGGER.warning(warning)
    else:
        LOGGER.info(
            "Selected %d of %d distinct words from %s with min_count=%d",
            len(selected),
            len(counts),
            source,
            min_count,
        )
    return Dictionary(entries=tuple(selected), min_count=min_count, source=source, warning=warning)


def build_dictionary_file(
    corpus_path: Path,
    output_path: Path,
    min_count: int = DEFAULT_MIN_COUNT,
) -> Dictionary:
    """Read ``corpus_path``, build its dictionary and write it to ``output_path``."""

    corpus_path = Path(corpus_path)
    if not corpus_path.exists():
        raise FileNotFoundError(f"input file not found: {corpus_path}")
    text = corpus_path.read_text(encoding="utf-8")
    dictionary = build_dictionary(text, min_count, source=corpus_path.name)
    dictionary.save(Path(output_path))
    return dictionary


def parse_vocabulary(lines: Iterable[str]) -> Vocabulary:
    """Parse dictionary lines, skipping comments and malformed rows."""

    words: list[str] = []
    counts: list[int] = []
    seen: set[str] = set()
    skipped = 0
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        parts = _FIELD_SPLIT.split(line)
        if len(parts) < 2 or not parts[0].strip():
            LOGGER.debug("Skipping malformed dictionary line %d: %r", line_number, raw_line)
            skipped += 1
            continue
        word = parts[0].strip()
        if word in seen:
            LOGGER.debug("Skipping duplicate dictionary word %r on line %d", word, line_number)
            skipped += 1
            continue
        try:
            count = int(parts[1].strip())
        except ValueError:
            count = 1
        seen.add(word)
        words.append(word)
        counts.append(max(count, 1))
    if skipped:
        LOGGER.warning("Skipped %d malformed dictionary lines", skipped)
    return Vocabulary(words=tuple(words), counts=tuple(counts))


def load_vocabulary(path: Path) -> Vocabulary:
    """Load a serialised dictionary; unreadable files yield an empty vocabulary."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as stream:
            vocabulary = parse_vocabulary(stream)
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.error("Failed to read dictionary %s: %s", path, exc)
        return Vocabulary.empty()
    if vocabulary.is_empty:
        LOGGER.warning("Dictionary %s loaded but no words found", path)
    else:
        LOGGER.info("Loaded %d dictionary words from %s", len(vocabulary), path)
    return vocabulary


__all__ = [
    "DEFAULT_MIN_COUNT",
    "Dictionary",
    "FrequencyEntry",
    "Vocabulary",
    "build_dictionary",
    "build_dictionary_file",
    "load_vocabulary",
    "parse_vocabulary",
]
