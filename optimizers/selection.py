"""
selection.py

Схеми відбору батьків для генетичного алгоритму.

Кожна схема — невеликий незмінний dataclass з одним методом:

    select(fitness, num_parents, rng) -> np.ndarray індексів батьків

Менше значення fitness — краще (мінімізація). Для пропорційних схем
ваги будуються за рангом: w_i = 1 / sqrt(rank_i), де найкращий має rank = 1.

Реалізовані схеми:
    - FitnessProportionateSelection  – незалежні зважені вибірки ("рулетка");
    - StochasticUniversalSampling    – один випадковий зсув і рівновіддалені
                                       вказівники по кумулятивних вагах;
    - TournamentSelection(p)         – із пари кращий обирається з імовірністю p.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np


class SelectionScheme(Protocol):
    """Спільний інтерфейс схем відбору."""

    def select(
        self,
        fitness: np.ndarray,
        num_parents: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        ...


def rank_weights(fitness: np.ndarray) -> np.ndarray:
    """
    Нормовані ваги за рангом: найменше fitness отримує найбільшу вагу.

    При рівних fitness ранг визначається початковим порядком.
    """
    fitness = np.asarray(fitness, dtype=float)
    n = fitness.size
    if n == 0:
        return np.zeros(0, dtype=float)

    order = np.argsort(fitness, kind="stable")
    ranks = np.empty(n, dtype=float)
    ranks[order] = np.arange(1, n + 1, dtype=float)

    weights = 1.0 / np.sqrt(ranks)
    return weights / weights.sum()


@dataclass(frozen=True)
class FitnessProportionateSelection:
    """Кожен з num_parents батьків обирається незалежно з імовірностями rank_weights."""

    def select(
        self,
        fitness: np.ndarray,
        num_parents: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        n = len(fitness)
        if n == 0 or num_parents <= 0:
            return np.zeros(0, dtype=int)
        return rng.choice(n, size=num_parents, replace=True, p=rank_weights(fitness))


@dataclass(frozen=True)
class StochasticUniversalSampling:
    """
    Stochastic universal sampling.

    Один зсув u ~ U(0, 1/m), вказівники u + j/m (j = 0..m-1) по кумулятивній
    сумі ваг. Кожна особина з вагою w отримує floor(m w) або ceil(m w) копій.
    """

    def select(
        self,
        fitness: np.ndarray,
        num_parents: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        n = len(fitness)
        if n == 0 or num_parents <= 0:
            return np.zeros(0, dtype=int)

        cumulative = np.cumsum(rank_weights(fitness))
        spacing = 1.0 / num_parents
        start = rng.uniform(0.0, spacing)
        pointers = start + spacing * np.arange(num_parents)

        indices = np.searchsorted(cumulative, pointers, side="right")
        # cumulative[-1] може бути трохи менше 1.0 через округлення
        return np.minimum(indices, n - 1)


@dataclass(frozen=True)
class TournamentSelection:
    """
    Турнір із двох учасників.

    Атрибути:
        probability - імовірність, з якою перемагає кращий (менший fitness);
                      інакше обирається гірший. 0.5 — відбір без тиску.
    """
    probability: float

    def __post_init__(self) -> None:
        if not (0.0 <= self.probability <= 1.0):
            raise ValueError(
                f"TournamentSelection: probability має бути в [0, 1], отримано {self.probability}."
            )

    def select(
        self,
        fitness: np.ndarray,
        num_parents: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        n = len(fitness)
        if n == 0 or num_parents <= 0:
            return np.zeros(0, dtype=int)

        fitness = np.asarray(fitness, dtype=float)
        contestants = rng.integers(0, n, size=(num_parents, 2))
        draws = rng.random(num_parents)

        first, second = contestants[:, 0], contestants[:, 1]
        first_better = fitness[first] <= fitness[second]
        better = np.where(first_better, first, second)
        worse = np.where(first_better, second, first)

        return np.where(draws < self.probability, better, worse)


__all__ = [
    "SelectionScheme",
    "rank_weights",
    "FitnessProportionateSelection",
    "StochasticUniversalSampling",
    "TournamentSelection",
]
