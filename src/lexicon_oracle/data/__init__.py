# SPDX-License-Identifier: Apache-2.0
"""Bundled data for the Lexicon Oracle package."""

from __future__ import annotations

from importlib import resources

SAMPLE_CORPUS = "sample_corpus.txt"


def load_sample_corpus() -> str:
    """Return the bundled public-domain passage used for demos and tests."""
    return resources.files(__package__).joinpath(SAMPLE_CORPUS).read_text(encoding="utf-8")


__all__ = ["SAMPLE_CORPUS", "load_sample_corpus"]
