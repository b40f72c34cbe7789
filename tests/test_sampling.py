from __future__ import annotations

from collections import Counter

import numpy as np
import pytest

from lexicon_oracle.sampling import reshape, sample_without_replacement


def test_reshape_is_exact_power_law() -> None:
    assert np.allclose(reshape([4.0, 9.0], 0.5), [16.0, 81.0])
    assert np.allclose(reshape([1.0, 4.0, 9.0], 2.0), [1.0, 2.0, 3.0])


def test_reshape_temperature_one_returns_weights() -> None:
    assert np.allclose(reshape([2.0, 6.0], 1.0), [2.0, 6.0])


def test_reshape_keeps_zero_weights_and_input() -> None:
    weights = np.array([0.0, 3.0])
    shaped = reshape(weights, 0.5)
    assert np.allclose(shaped, [0.0, 9.0])
    assert weights.tolist() == [0.0, 3.0]


@pytest.mark.parametrize("temperature", [0.0, -1.0])
def test_reshape_rejects_non_positive_temperature(temperature: float) -> None:
    with pytest.raises(ValueError):
        reshape([1.0, 2.0], temperature)


def test_negative_weights_are_rejected() -> None:
    with pytest.raises(ValueError):
        sample_without_replacement([1.0, -2.0], 1)


def test_sampler_never_repeats_indices() -> None:
    rng = np.random.default_rng(0)
    for _ in range(200):
        weights = rng.integers(0, 20, size=15).astype(float)
        nonzero = int(np.count_nonzero(weights))
        picks = sample_without_replacement(weights, nonzero, temperature=float(rng.uniform(0.1, 5.0)), rng=rng)
        assert len(picks) == nonzero
        assert len(set(picks)) == len(picks)
        assert all(weights[index] > 0 for index in picks)


def test_sampler_stops_when_weight_is_exhausted() -> None:
    picks = sample_without_replacement([0.0, 3.0, 0.0, 2.0], 10, rng=np.random.default_rng(1))
    assert sorted(picks) == [1, 3]


@pytest.mark.parametrize("weights", [[], [0.0, 0.0, 0.0]])
def test_sampler_returns_nothing_without_weight(weights: list[float]) -> None:
    assert sample_without_replacement(weights, 3, rng=np.random.default_rng(2)) == []


def test_sampler_does_not_mutate_input() -> None:
    weights = np.array([5.0, 1.0, 2.0])
    sample_without_replacement(weights, 3, rng=np.random.default_rng(3))
    assert weights.tolist() == [5.0, 1.0, 2.0]


def test_low_temperature_picks_heaviest_first() -> None:
    rng = np.random.default_rng(4)
    weights = [1.0, 5.0, 3.0, 10.0, 2.0]
    for _ in range(200):
        assert sample_without_replacement(weights, 5, temperature=0.01, rng=rng) == [3, 1, 2, 4, 0]


def test_tiny_temperature_still_fills_the_request() -> None:
    picks = sample_without_replacement([1.0, 50.0, 49.0], 3, temperature=1e-9, rng=np.random.default_rng(5))
    assert picks == [1, 2, 0]


def test_temperature_one_is_proportional_to_weight() -> None:
    rng = np.random.default_rng(6)
    trials = 4000
    first = Counter(sample_without_replacement([1.0, 3.0], 1, rng=rng)[0] for _ in range(trials))
    assert first[1] / trials == pytest.approx(0.75, abs=0.05)


def test_high_temperature_approaches_uniform() -> None:
    rng = np.random.default_rng(7)
    trials = 4000
    weights = [1.0, 100.0, 10.0, 1000.0]
    first = Counter(sample_without_replacement(weights, 1, temperature=1000.0, rng=rng)[0] for _ in range(trials))
    for index in range(len(weights)):
        assert first[index] / trials == pytest.approx(0.25, abs=0.05)
