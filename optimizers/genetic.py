"""
genetic.py

Генетичний алгоритм для мінімізації f(x) на прямокутній області [lb, ub].

Одне покоління:
    1. Елітизм: elite_count найкращих особин переходять без змін
       (і без повторного обчислення f).
    2. Відтворення: решта population_size - elite_count місць;
       частка crossover_fraction заповнюється кросовером двох батьків,
       решта — мутацією одного батька.
    3. Нащадки обрізаються до меж [lb, ub].
    4. f обчислюється для кожного нового нащадка.

Оператори:
    - кросовер проміжний: child = r * a + (1 - r) * b, r ~ U(0, 1);
    - мутація гаусова: child = parent + N(0, (mutation_scale * (ub - lb))^2).

Уся випадковість береться з numpy.random.Generator, який передає
викликаючий код; власних генераторів алгоритм не створює.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .functions import ArrayLike, ScalarFunction, as_point
from .optimizer_base import Optimizer
from .performance import EvaluationCounter, MinimizeResult
from .selection import SelectionScheme

Individual = Tuple[np.ndarray, float]


# ---------------------------------------------------------------------------
# Покоління
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Generation:
    """
    Покоління: впорядкований набір пар (точка, fitness), fitness = f(точка).
    """
    population: Tuple[Individual, ...]

    def __len__(self) -> int:
        return len(self.population)

    @property
    def points(self) -> np.ndarray:
        return np.array([x for x, _ in self.population], dtype=float)

    @property
    def fitness(self) -> np.ndarray:
        return np.array([value for _, value in self.population], dtype=float)

    @property
    def best(self) -> Optional[Individual]:
        """Особина з найменшим fitness (при рівності — перша за порядком)."""
        if not self.population:
            return None
        return min(self.population, key=lambda individual: individual[1])

    def flatten(self) -> np.ndarray:
        """Координати всіх особин підряд: (x1, y1, x2, y2, ...)."""
        if not self.population:
            return np.zeros(0, dtype=float)
        return np.concatenate([x for x, _ in self.population])

    def __repr__(self) -> str:
        best = self.best
        f_best = best[1] if best is not None else None
        return f"Generation(size={len(self)}, f_best={f_best})"


@dataclass(frozen=True)
class _GeneticProblem:
    func: ScalarFunction
    lower: np.ndarray
    upper: np.ndarray
    selection: SelectionScheme
    elite_count: int
    num_crossover: int
    num_mutation: int
    rng: np.random.Generator


# ---------------------------------------------------------------------------
# Генетичний алгоритм
# ---------------------------------------------------------------------------

class GeneticAlgorithm(Optimizer):
    """
    Генетичний алгоритм.

    Зупинка (перевіряється перед кожним поколінням):
        - max_steps поколінь;
        - max_obj_evals викликів f;
        - порожня популяція ("empty_population");
        - популяція без відтворення (elite_count == population_size) і без
          ліміту поколінь ("static_population").

    Налаштування (options):
        mutation_scale : стандартне відхилення мутації як частка (ub - lb),
                         default: 0.1
    """

    requires_gradient: bool = False

    def __init__(
        self,
        max_obj_evals: Optional[int] = 1000,
        max_steps: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(
            max_obj_evals=max_obj_evals,
            max_steps=max_steps,
            options=options,
            name=name or "Genetic algorithm",
        )

    def minimize(
        self,
        func: ScalarFunction,
        lower_bound: ArrayLike,
        upper_bound: ArrayLike,
        population_size: int,
        selection: SelectionScheme,
        elite_count: int = 2,
        crossover_fraction: float = 0.8,
        seed_population: Optional[Union[Generation, Iterable[ArrayLike]]] = None,
        *,
        rng: np.random.Generator,
        report_perf: bool = True,
    ) -> MinimizeResult:
        """
        Мінімізувати func на [lower_bound, upper_bound].

        Parameters
        ----------
        population_size : розмір кожного покоління.
        selection : схема відбору батьків (див. selection.py).
        elite_count : кількість елітних особин; обрізається до [0, population_size].
            При elite_count = 0 найкраще значення може погіршуватися між поколіннями.
        crossover_fraction : частка нащадків від кросовера, в [0, 1].
        seed_population : початкова популяція (Generation або точки);
            якщо None — population_size точок, рівномірно розподілених у межах.
        rng : джерело випадковості.

        Повертає MinimizeResult(x_star, perf); x_star = None, якщо популяція порожня.
        """
        lower = as_point(lower_bound)
        upper = as_point(upper_bound)
        if lower.shape != upper.shape:
            raise ValueError("Межі lower_bound та upper_bound повинні мати однакову розмірність.")
        if np.any(lower > upper):
            raise ValueError("Потрібно lower_bound[i] <= upper_bound[i] для всіх i.")
        if population_size < 0:
            raise ValueError("population_size не може бути від'ємним.")
        if not (0.0 <= crossover_fraction <= 1.0):
            raise ValueError(
                f"crossover_fraction має бути в [0, 1], отримано {crossover_fraction}."
            )

        elite_count = int(min(max(elite_count, 0), population_size))
        num_children = population_size - elite_count
        num_crossover = int(round(num_children * crossover_fraction))

        problem = _GeneticProblem(
            func=func,
            lower=lower,
            upper=upper,
            selection=selection,
            elite_count=elite_count,
            num_crossover=num_crossover,
            num_mutation=num_children - num_crossover,
            rng=rng,
        )

        counter = EvaluationCounter()
        generation0 = self._initial_generation(problem, population_size, seed_population, counter)

        final, trace = self._run(problem, generation0, counter, report_perf)

        best = final.best
        x_star = best[0] if best is not None else None
        return MinimizeResult(x_star, trace)

    # ------------------------------------------------------------------
    # Початкова популяція
    # ------------------------------------------------------------------

    def _initial_generation(
        self,
        problem: _GeneticProblem,
        population_size: int,
        seed_population: Optional[Union[Generation, Iterable[ArrayLike]]],
        counter: EvaluationCounter,
    ) -> Generation:
        if isinstance(seed_population, Generation):
            generation = seed_population
        elif seed_population is not None:
            individuals = []
            for x in seed_population:
                point = as_point(x)
                individuals.append((point, counter.evaluate(problem.func, point)))
            generation = Generation(population=tuple(individuals))
        else:
            dim = problem.lower.size
            samples = problem.lower + problem.rng.random((population_size, dim)) * (
                problem.upper - problem.lower
            )
            individuals = []
            for x in samples:
                point = as_point(x)
                individuals.append((point, counter.evaluate(problem.func, point)))
            return Generation(population=tuple(individuals))

        if len(generation) != population_size:
            raise ValueError(
                f"Початкова популяція має {len(generation)} особин, "
                f"очікується population_size = {population_size}."
            )
        for x, _ in generation.population:
            if x.shape != problem.lower.shape:
                raise ValueError("Розмірність особини не збігається з розмірністю меж.")
            if np.any(x < problem.lower) or np.any(x > problem.upper):
                raise ValueError(f"Особина {x.tolist()} лежить поза межами [lb, ub].")
        return generation

    # ------------------------------------------------------------------
    # Одне покоління
    # ------------------------------------------------------------------

    def _stop_reason(
        self,
        problem: _GeneticProblem,
        state: Generation,
        steps: int,
        counter: EvaluationCounter,
    ) -> Optional[str]:
        if len(state) == 0:
            return "empty_population"
        budget = self._budget_exhausted(steps, counter)
        if budget is not None:
            return budget
        if problem.num_crossover + problem.num_mutation == 0 and self.max_steps is None:
            return "static_population"
        return None

    def _step(
        self,
        problem: _GeneticProblem,
        state: Generation,
        counter: EvaluationCounter,
    ) -> Generation:
        rng = problem.rng
        mutation_scale = float(self.options.get("mutation_scale", 0.1))

        points = state.points
        fitness = state.fitness

        # 1. Елітизм (еліта зберігає свій порядок у популяції)
        order = np.argsort(fitness, kind="stable")
        elite_idx = np.sort(order[: problem.elite_count])
        elites: List[Individual] = [state.population[i] for i in elite_idx]

        # 2. Відбір усіх батьків за один прохід, потім перемішування
        num_parents = 2 * problem.num_crossover + problem.num_mutation
        parents = problem.selection.select(fitness, num_parents, rng)
        parents = rng.permutation(parents)

        children: List[np.ndarray] = []

        # Кросовер
        for k in range(problem.num_crossover):
            a = points[parents[2 * k]]
            b = points[parents[2 * k + 1]]
            r = rng.random()
            children.append(r * a + (1.0 - r) * b)

        # Мутація
        sigma = mutation_scale * (problem.upper - problem.lower)
        for idx in parents[2 * problem.num_crossover:]:
            children.append(points[idx] + rng.normal(0.0, 1.0, size=points.shape[1]) * sigma)

        # 3-4. Межі та обчислення fitness
        offspring: List[Individual] = []
        for child in children:
            point = as_point(np.clip(child, problem.lower, problem.upper))
            offspring.append((point, counter.evaluate(problem.func, point)))

        return Generation(population=tuple(elites + offspring))


__all__ = [
    "Individual",
    "Generation",
    "GeneticAlgorithm",
]
