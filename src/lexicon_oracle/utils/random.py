# SPDX-License-Identifier: Apache-2.0
"""Randomness helpers for reproducible sampling."""

from __future__ import annotations

import hashlib
import os
from typing import Optional

import numpy as np

SEED_ENV_VAR = "LEXICON_ORACLE_SEED"


def deterministic_hash(value: str) -> int:
    """Return a deterministic integer hash for ``value``."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Return a NumPy generator.

    An explicit ``seed`` wins; otherwise ``LEXICON_ORACLE_SEED`` is hashed
    when set, and fresh OS entropy is used when it is not.
    """
    if seed is None:
        env_seed = os.getenv(SEED_ENV_VAR)
        if env_seed:
            seed = deterministic_hash(env_seed) % (2**32)
    return np.random.default_rng(seed)
