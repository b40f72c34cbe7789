# SPDX-License-Identifier: Apache-2.0
"""Vocabulary-constrained sentence generation.

The :class:`Oracle` answers a seed phrase with one short sentence built only
from dictionary words plus the words of the seed itself. Three strategies are
available:

``ranked``
    Seed words, then the most frequent dictionary words. Deterministic.
``sampled``
    Seed words, then dictionary words drawn without replacement with
    probability proportional to ``count ** (1 / temperature)``.
``delegated``
    An external text generator is asked for a sentence; its output is
    accepted only if every word is in the dictionary. Rejected output is
    retried, and after the last attempt (or on any generator failure) the
    oracle falls back to the sampled strategy and reports why in
    :attr:`GenerationResult.warning`.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

from .config import GeneratorConfig, OracleConfig
from .dictionary import Vocabulary, load_vocabulary
from .errors import ConstraintViolation, VocabularyUnavailable
from .logging import get_logger
from .ollama import GenerateFn, OllamaClient
from .persona import PersonaProfile, PersonaStore
from .sampling import sample_without_replacement
from .utils import capitalize_sentence, make_rng, tokenize, unique_in_order

LOGGER = get_logger(__name__)

DEFAULT_MODEL = "llama3.2:3b"
SIZE_LENGTHS = {"short": 12, "long": 140}

CONSTRAINT_WARNING = (
    "External generator did not adhere to vocabulary constraints after {attempts} "
    "attempts; returned fallback sampled prediction."
)
ERROR_WARNING = "External generator error: {error}"


class GenerationMode(str, Enum):
    RANKED = "ranked"
    SAMPLED = "sampled"
    DELEGATED = "delegated"

    @classmethod
    def parse(cls, value: Union[str, GenerationMode]) -> GenerationMode:
        """Accept enum members, their values, and the legacy mode names."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        aliases = {
            "mostlikely": cls.RANKED,
            "most_likely": cls.RANKED,
            "sample": cls.SAMPLED,
            "llm": cls.DELEGATED,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"unknown generation mode {value!r}; expected one of {choices}") from None


@dataclass
class PredictOptions:
    """Per-request knobs; ``None`` fields resolve against the oracle defaults."""

    length: Optional[int] = None
    size: str = "short"
    mode: Union[GenerationMode, str] = GenerationMode.DELEGATED
    temperature: Optional[float] = None
    model: Optional[str] = None

    def resolved_length(self) -> int:
        if self.length is not None:
            return max(1, int(self.length))
        try:
            return SIZE_LENGTHS[self.size]
        except KeyError:
            raise ValueError(f"size must be 'short' or 'long', got {self.size!r}") from None


@dataclass
class GenerationResult:
    """Outcome of a prediction; ``mode`` names the strategy that produced it."""

    text: str
    tokens: list[str]
    mode: GenerationMode
    warning: Optional[str] = None
    attempts: int = 0

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "text": self.text,
            "tokens": list(self.tokens),
            "mode": self.mode.value,
        }
        if self.warning:
            payload["warning"] = self.warning
        return payload


@dataclass(frozen=True)
class SeedMerge:
    """Seed words combined with the vocabulary for one request."""

    prompt_unique: tuple[str, ...]
    allowed_set: frozenset[str]
    allowed_list: tuple[str, ...] = field(repr=False)

    @property
    def anchor(self) -> Optional[str]:
        return self.prompt_unique[0] if self.prompt_unique else None


def merge_seed(seed_phrase: Optional[str], vocabulary: Vocabulary) -> SeedMerge:
    """Union the seed's unique words with the vocabulary, seed words first."""
    prompt_unique = tuple(unique_in_order(tokenize(seed_phrase)))
    prompt_set = set(prompt_unique)
    allowed_list = prompt_unique + tuple(word for word in vocabulary.words if word not in prompt_set)
    return SeedMerge(
        prompt_unique=prompt_unique,
        allowed_set=vocabulary.membership | prompt_set,
        allowed_list=allowed_list,
    )


def build_instruction(seed_phrase: Optional[str], merge: SeedMerge, persona: PersonaProfile) -> str:
    """Compose the prompt sent to the external generator."""

    lines = [
        "You are the Oracle. Compose a short, coherent prediction of the future "
        "using ONLY the allowed vocabulary listed below.",
        "",
        "Rules:",
        "- Use ONLY words from the allowed list. Do not use any other words, punctuation, or symbols.",
        "- Produce exactly one concise, coherent sentence. Do not produce multiple sentences or paragraphs.",
        "- Do not add explanations, commentary, or extra lines. Output ONLY the sentence.",
        "",
    ]
    if persona.instruction.strip():
        lines.extend(["Persona:", persona.instruction.strip(), ""])
    seed_tokens = [token for token in merge.prompt_unique if token in merge.allowed_set]
    if seed_tokens:
        lines.extend(
            [f"If possible, include these seed words from the allowed list: {' '.join(seed_tokens)}.", ""]
        )
    lines.extend(["Allowed words:", " ".join(merge.allowed_list), ""])
    lines.extend([f"Seed: {seed_phrase or ''}", "", "Output:", ""])
    return "\n".join(lines)


def _check_tokens(tokens: Sequence[str], allowed: Collection[str]) -> None:
    if not tokens:
        raise ConstraintViolation(())
    offending = unique_in_order(token for token in tokens if token not in allowed)
    if offending:
        raise ConstraintViolation(offending)


class Oracle:
    """Generate sentences constrained to a fixed vocabulary."""

    def __init__(
        self,
        vocabulary: Vocabulary,
        generate: Optional[GenerateFn] = None,
        *,
        persona: Optional[PersonaProfile] = None,
        config: Optional[GeneratorConfig] = None,
        default_model: str = DEFAULT_MODEL,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.vocabulary = vocabulary
        self.generate = generate
        self.persona = persona or PersonaStore().get("homeric")
        self.config = config or GeneratorConfig()
        self.default_model = default_model
        self.rng = rng

    @classmethod
    def from_config(
        cls,
        config: Optional[OracleConfig] = None,
        generate: Optional[GenerateFn] = None,
        *,
        dictionary_path: Optional[Path] = None,
    ) -> Oracle:
        """Load the dictionary named by ``config`` and wire an Ollama client."""
        config = config or OracleConfig()
        vocabulary = load_vocabulary(dictionary_path or config.dictionary.path)
        return cls.from_vocabulary(vocabulary, config, generate)

    @classmethod
    def from_vocabulary(
        cls,
        vocabulary: Vocabulary,
        config: Optional[OracleConfig] = None,
        generate: Optional[GenerateFn] = None,
    ) -> Oracle:
        config = config or OracleConfig()
        if generate is None:
            generate = OllamaClient(config.ollama).generate
        return cls(
            vocabulary,
            generate,
            persona=PersonaStore().get(config.persona.name),
            config=config.generator,
            default_model=config.ollama.model,
        )

    def default_options(self) -> PredictOptions:
        return PredictOptions(
            length=self.config.length,
            size=self.config.size,
            mode=GenerationMode.parse(self.config.mode),
            temperature=self.config.temperature,
        )

    def predict(self, seed_phrase: Optional[str] = "", options: Optional[PredictOptions] = None) -> GenerationResult:
        if self.vocabulary.is_empty:
            raise VocabularyUnavailable()
        options = options or self.default_options()
        mode = GenerationMode.parse(options.mode)
        length = options.resolved_length()
        temperature = self._resolve_temperature(options.temperature)
        merge = merge_seed(seed_phrase, self.vocabulary)
        LOGGER.debug("Predicting mode=%s length=%d temperature=%.3f", mode.value, length, temperature)

        if mode is GenerationMode.RANKED:
            return self._finish(self._ranked(merge, length), mode)
        if mode is GenerationMode.SAMPLED:
            return self._finish(self._sampled(merge, length, temperature), mode)
        return self._delegated(seed_phrase, merge, length, temperature, options.model or self.default_model)

    def _resolve_temperature(self, requested: Optional[float]) -> float:
        temperature = requested
        if temperature is None:
            temperature = self.persona.temperature
        if temperature is None:
            temperature = self.config.temperature
        if not temperature > 0:
            raise ValueError(f"temperature must be positive, got {temperature}")
        return float(temperature)

    @staticmethod
    def _finish(
        tokens: list[str],
        mode: GenerationMode,
        warning: Optional[str] = None,
        attempts: int = 0,
    ) -> GenerationResult:
        return GenerationResult(
            text=capitalize_sentence(tokens),
            tokens=tokens,
            mode=mode,
            warning=warning,
            attempts=attempts,
        )

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------
    def _ranked(self, merge: SeedMerge, length: int) -> list[str]:
        tokens = list(merge.prompt_unique)
        present = set(tokens)
        for word in self.vocabulary.ranked_words():
            if len(tokens) >= length:
                break
            if word not in present:
                tokens.append(word)
                present.add(word)
        return tokens

    def _sampled(self, merge: SeedMerge, length: int, temperature: float) -> list[str]:
        # the anchor (first seed word) leads even when it is not a dictionary word
        tokens = list(merge.prompt_unique)
        weights = self.vocabulary.weights()
        for word in tokens:
            index = self.vocabulary.index(word)
            if index >= 0:
                weights[index] = 0.0
        needed = length - len(tokens)
        if needed > 0:
            picks = sample_without_replacement(
                weights,
                needed,
                temperature=temperature,
                rng=self.rng or make_rng(),
            )
            tokens.extend(self.vocabulary.words[index] for index in picks)
        return tokens

    def _delegated(
        self,
        seed_phrase: Optional[str],
        merge: SeedMerge,
        length: int,
        temperature: float,
        model: str,
    ) -> GenerationResult:
        allowed = merge.allowed_set if self.config.accept_seed_words else self.vocabulary.membership
        max_attempts = max(1, int(self.config.max_attempts))
        instruction = build_instruction(seed_phrase, merge, self.persona)
        attempts = 0
        if self.generate is None:
            warning = ERROR_WARNING.format(error="no external generator configured")
        else:
            for attempt in range(1, max_attempts + 1):
                attempts = attempt
                try:
                    raw = self.generate(model, instruction, temperature)
                except Exception as exc:
                    LOGGER.warning("External generator failed on attempt %d: %s", attempt, exc)
                    warning = ERROR_WARNING.format(error=exc)
                    break
                tokens = tokenize(raw)
                try:
                    _check_tokens(tokens, allowed)
                except ConstraintViolation as exc:
                    LOGGER.info("Attempt %d/%d rejected: %s", attempt, max_attempts, exc)
                    continue
                return self._finish(tokens, GenerationMode.DELEGATED, attempts=attempt)
            else:
                warning = CONSTRAINT_WARNING.format(attempts=max_attempts)
        LOGGER.warning("Falling back to sampled prediction: %s", warning)
        tokens = self._sampled(merge, length, temperature)
        return self._finish(tokens, GenerationMode.SAMPLED, warning=warning, attempts=attempts)


__all__ = [
    "CONSTRAINT_WARNING",
    "DEFAULT_MODEL",
    "GenerationMode",
    "GenerationResult",
    "Oracle",
    "PredictOptions",
    "SIZE_LENGTHS",
    "SeedMerge",
    "build_instruction",
    "merge_seed",
]
