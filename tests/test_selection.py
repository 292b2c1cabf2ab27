import numpy as np
import pytest

from optimizers.selection import (
    FitnessProportionateSelection,
    StochasticUniversalSampling,
    TournamentSelection,
    rank_weights,
)

SCHEMES = [
    FitnessProportionateSelection(),
    StochasticUniversalSampling(),
    TournamentSelection(0.75),
]


def test_rank_weights_favour_smaller_fitness():
    fitness = np.array([3.0, -1.0, 7.0, 0.5])
    weights = rank_weights(fitness)

    assert np.isclose(weights.sum(), 1.0)
    assert np.argmax(weights) == 1
    assert np.argmin(weights) == 2
    # rank 1 / rank 4 = sqrt(4)
    assert np.isclose(weights[1] / weights[2], 2.0)


def test_rank_weights_ties_follow_original_order():
    weights = rank_weights(np.array([1.0, 1.0]))
    assert weights[0] > weights[1]


def test_fitness_proportionate_prefers_best(rng):
    fitness = np.arange(10, dtype=float)
    parents = FitnessProportionateSelection().select(fitness, 5000, rng)

    counts = np.bincount(parents, minlength=10)
    assert counts[0] > counts[9]
    expected = rank_weights(fitness) * 5000
    assert np.allclose(counts, expected, rtol=0.25)


@pytest.mark.parametrize("seed", range(5))
def test_sus_counts_are_floor_or_ceil_of_expectation(seed):
    fitness = np.arange(10, dtype=float)
    m = 20
    parents = StochasticUniversalSampling().select(fitness, m, np.random.default_rng(seed))

    counts = np.bincount(parents, minlength=10)
    expected = m * rank_weights(fitness)
    assert counts.sum() == m
    assert np.all(counts >= np.floor(expected - 1e-9))
    assert np.all(counts <= np.ceil(expected + 1e-9))


def test_tournament_always_better_wins_with_probability_one(rng):
    parents = TournamentSelection(1.0).select(np.array([0.0, 1.0]), 10_000, rng)
    # Гірший обирається лише тоді, коли обидва учасники однакові: 1/4
    assert np.mean(parents == 0) > 0.7


def test_tournament_worse_wins_with_probability_zero(rng):
    parents = TournamentSelection(0.0).select(np.array([0.0, 1.0]), 10_000, rng)
    assert np.mean(parents == 0) < 0.3


@pytest.mark.parametrize("probability", [-0.1, 1.5])
def test_tournament_probability_is_validated(probability):
    with pytest.raises(ValueError):
        TournamentSelection(probability)


@pytest.mark.parametrize("scheme", SCHEMES)
def test_empty_population_selects_nothing(scheme, rng):
    assert scheme.select(np.zeros(0), 4, rng).size == 0
    assert scheme.select(np.arange(3.0), 0, rng).size == 0


@pytest.mark.parametrize("scheme", SCHEMES)
def test_selection_is_reproducible_and_in_range(scheme):
    fitness = np.array([2.0, 0.5, 4.0, 1.0, 3.0])

    first = scheme.select(fitness, 12, np.random.default_rng(7))
    second = scheme.select(fitness, 12, np.random.default_rng(7))

    assert np.array_equal(first, second)
    assert first.shape == (12,)
    assert np.all((first >= 0) & (first < fitness.size))
