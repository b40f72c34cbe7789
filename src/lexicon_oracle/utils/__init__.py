# SPDX-License-Identifier: Apache-2.0
"""Utility helpers shared across the Lexicon Oracle package."""

from .io import load_yaml_or_json, save_json, save_text
from .random import deterministic_hash, make_rng
from .text import capitalize_sentence, normalise_text, tokenize, unique_in_order

__all__ = [
    "capitalize_sentence",
    "deterministic_hash",
    "load_yaml_or_json",
    "make_rng",
    "normalise_text",
    "save_json",
    "save_text",
    "tokenize",
    "unique_in_order",
]
