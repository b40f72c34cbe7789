# SPDX-License-Identifier: Apache-2.0
"""High-level workflows that combine dictionary building and oracle setup."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import OracleConfig
from ..dictionary import Dictionary, build_dictionary, build_dictionary_file
from ..logging import get_logger
from ..ollama import GenerateFn
from ..oracle import Oracle

LOGGER = get_logger(__name__)


def prepare_oracle(
    config: Optional[OracleConfig] = None,
    generate: Optional[GenerateFn] = None,
    *,
    corpus_path: Optional[Path] = None,
) -> Oracle:
    """Return an :class:`Oracle` for ``config``.

    When ``corpus_path`` is given the dictionary is rebuilt from it first and
    written to ``config.dictionary.path``.
    """
    config = config or OracleConfig()
    if corpus_path is not None:
        build_dictionary_file(corpus_path, config.dictionary.path, config.dictionary.min_count)
    return Oracle.from_config(config, generate)


def oracle_from_text(
    corpus_text: str,
    config: Optional[OracleConfig] = None,
    generate: Optional[GenerateFn] = None,
    *,
    min_count: Optional[int] = None,
) -> tuple[Oracle, Dictionary]:
    """Build an in-memory oracle straight from corpus text, without touching disk."""
    config = config or OracleConfig()
    dictionary = build_dictionary(
        corpus_text,
        min_count or config.dictionary.min_count,
        source="text",
    )
    oracle = Oracle.from_vocabulary(dictionary.to_vocabulary(), config, generate)
    LOGGER.info("Prepared in-memory oracle with %d words", len(dictionary))
    return oracle, dictionary
