from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from lexicon_oracle.config import GeneratorConfig
from lexicon_oracle.dictionary import Vocabulary
from lexicon_oracle.oracle import Oracle
from lexicon_oracle.persona import PersonaStore


class ScriptedGenerator:
    """Fake external generator that replays canned replies and records calls."""

    def __init__(self, *replies: str | Exception) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[str, str, float]] = []

    def __call__(self, model: str, prompt: str, temperature: float) -> str:
        self.calls.append((model, prompt, temperature))
        reply = self.replies[min(len(self.calls), len(self.replies)) - 1]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def vocabulary() -> Vocabulary:
    return Vocabulary.from_counts({"fate": 20, "doom": 15, "glory": 12})


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(7)


@pytest.fixture
def make_oracle(vocabulary: Vocabulary, rng: np.random.Generator) -> Callable[..., Oracle]:
    def factory(generate=None, *, vocab: Vocabulary | None = None, **config) -> Oracle:
        return Oracle(
            vocab if vocab is not None else vocabulary,
            generate,
            persona=PersonaStore().get("homeric"),
            config=GeneratorConfig(**config),
            rng=rng,
        )

    return factory


@pytest.fixture
def workspace(tmp_path: Path) -> Iterator[Path]:
    yield tmp_path


@pytest.fixture
def scripted() -> type[ScriptedGenerator]:
    return ScriptedGenerator
