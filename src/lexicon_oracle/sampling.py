# SPDX-License-Identifier: Apache-2.0
"""Temperature-shaped weighted sampling without replacement."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from .logging import get_logger

LOGGER = get_logger(__name__)

WeightsLike = Union[Sequence[float], NDArray[np.float64]]

MIN_TEMPERATURE = 1e-8


def _as_weights(weights: WeightsLike) -> NDArray[np.float64]:
    array = np.array(weights, dtype=np.float64, copy=True).reshape(-1)
    if array.size and (not np.all(np.isfinite(array)) or np.any(array < 0)):
        raise ValueError("weights must be finite and non-negative")
    return array


def _check_temperature(temperature: float) -> None:
    if not temperature > 0:
        raise ValueError(f"temperature must be positive, got {temperature}")


def reshape(weights: WeightsLike, temperature: float) -> NDArray[np.float64]:
    """Return ``weights ** (1 / temperature)`` as a new array.

    Temperatures below 1 sharpen the distribution toward the heaviest items,
    temperatures above 1 flatten it toward uniform. Very small temperatures
    may overflow to ``inf`` or underflow to zero; :func:`sample_without_replacement`
    works in log space and does not go through this function.
    """

    _check_temperature(temperature)
    array = _as_weights(weights)
    with np.errstate(over="ignore", under="ignore"):
        return np.power(array, 1.0 / temperature)


def _log_weights(weights: NDArray[np.float64], temperature: float) -> NDArray[np.float64]:
    logits = np.full(weights.shape, -np.inf)
    live = weights > 0
    logits[live] = np.log(weights[live]) / max(temperature, MIN_TEMPERATURE)
    return logits


def sample_without_replacement(
    weights: WeightsLike,
    k: int,
    *,
    temperature: float = 1.0,
    rng: Optional[np.random.Generator] = None,
) -> list[int]:
    """Draw up to ``k`` distinct indices with probability proportional to weight.

    Weights are shaped by ``temperature`` as in :func:`reshape`. Each draw
    rebuilds the cumulative sums, picks the first index whose cumulative value
    is strictly greater than a uniform draw in ``[0, total)`` and zeroes that
    index. The reshaped weights are recomputed relative to the heaviest
    remaining item on every draw, so low temperatures cannot underflow the
    total to zero while live items remain. Sampling stops early once every
    weight is zero, so the result may be shorter than ``k``.
    """

    _check_temperature(temperature)
    rng = rng or np.random.default_rng()
    logits = _log_weights(_as_weights(weights), temperature)
    picks: list[int] = []
    while len(picks) < k:
        live = np.isfinite(logits)
        if not live.any():
            break
        shaped = np.zeros(logits.shape)
        shaped[live] = np.exp(logits[live] - logits[live].max())
        cumulative = np.cumsum(shaped)
        total = float(cumulative[-1])
        if total <= 0:
            break
        draw = rng.random() * total
        index = int(np.searchsorted(cumulative, draw, side="right"))
        if index >= shaped.size or shaped[index] <= 0:
            # rounding pushed the draw onto the boundary; take the last live slot
            index = int(np.flatnonzero(shaped)[-1])
        picks.append(index)
        logits[index] = -np.inf
    if len(picks) < k:
        LOGGER.debug("Sampler exhausted after %d of %d draws", len(picks), k)
    return picks


__all__ = ["reshape", "sample_without_replacement"]
