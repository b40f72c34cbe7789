# SPDX-License-Identifier: Apache-2.0
"""Configuration helpers for Lexicon Oracle."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional, cast

import yaml

from .utils import load_yaml_or_json, save_json

HOST_ENV_VAR = "LEXICON_ORACLE_OLLAMA_HOST"
DEFAULT_WORKSPACE = Path("artifacts")


@dataclass
class DictionaryConfig:
    """Where the dictionary lives and how it is built."""

    path: Path = DEFAULT_WORKSPACE / "dictionary.txt"
    min_count: int = 10

    def __post_init__(self) -> None:
        self.path = Path(self.path)


@dataclass
class GeneratorConfig:
    """Defaults for :meth:`lexicon_oracle.oracle.Oracle.predict`."""

    mode: str = "delegated"
    size: str = "short"
    length: Optional[int] = None
    temperature: float = 0.7
    max_attempts: int = 3
    accept_seed_words: bool = False


@dataclass
class OllamaConfig:
    """Connection settings for the external text generator."""

    host: str = "http://127.0.0.1:11434"
    model: str = "llama3.2:3b"
    timeout: float = 60.0


@dataclass
class PersonaConfig:
    """Persona framing used in delegated prompts."""

    name: str = "homeric"


@dataclass
class OracleConfig:
    """Top-level configuration for the oracle."""

    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    persona: PersonaConfig = field(default_factory=PersonaConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OracleConfig:
        return cls(
            dictionary=DictionaryConfig(**data.get("dictionary", {})),
            generator=GeneratorConfig(**data.get("generator", {})),
            ollama=OllamaConfig(**data.get("ollama", {})),
            persona=PersonaConfig(**data.get("persona", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["dictionary"]["path"] = str(self.dictionary.path)
        return payload

    def save(self, path: Path) -> None:
        """Write the configuration as YAML or JSON depending on the suffix."""
        path = Path(path)
        if path.suffix.lower() in {".yaml", ".yml"}:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf8") as handle:
                yaml.safe_dump(self.to_dict(), handle, sort_keys=False)
        else:
            save_json(path, self.to_dict())


def _merge_dict(base: dict[str, Any], overrides: Iterable[dict[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for override in overrides:
        for key, value in override.items():
            existing = result.get(key)
            if isinstance(value, dict) and isinstance(existing, dict):
                nested = _merge_dict(cast(dict[str, Any], existing), [value])
                result[key] = nested
            else:
                result[key] = value
    return result


def _environment_overrides() -> list[dict[str, Any]]:
    host = os.getenv(HOST_ENV_VAR)
    if host:
        return [{"ollama": {"host": host}}]
    return []


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Iterable[dict[str, Any]]] = None,
) -> OracleConfig:
    """Load configuration from disk and merge overrides.

    The environment host override is applied before explicit ``overrides``.
    """

    if path is None:
        base: dict[str, Any] = {}
    else:
        base = load_yaml_or_json(Path(path))

    merged = _merge_dict(base, [*_environment_overrides(), *(overrides or [])])
    return OracleConfig.from_dict(merged)
