"""
nelder_mead.py

Реалізація методу Нелдера–Міда як стратегії Optimizer.

Метод працює тільки зі значеннями функції f(x) (без градієнтів)
і оперує симплексом з k >= 2 вершин у n-вимірному просторі
(k не обов'язково дорівнює n + 1).

Основні кроки однієї ітерації:
    1. Сортування вершин симплекса за значенням f.
    2. Обчислення центроїда всіх вершин, окрім найгіршої.
    3. Спроба відбиття (reflection).
    4. За потреби — розширення (expansion).
    5. Або контракт (contraction) / стиснення симплекса (shrink).

Кожна ітерація повертає новий об'єкт Simplex; попередній лишається
незмінним у трасі.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .functions import ArrayLike, ScalarFunction, as_point
from .optimizer_base import Optimizer
from .performance import EvaluationCounter, MinimizeResult

SimplexEntry = Tuple[np.ndarray, float]


# ---------------------------------------------------------------------------
# Симплекс
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Simplex:
    """
    Симплекс: впорядкований набір пар (точка, f(точка)).

    Атрибути:
        points     - кортеж пар (x_i, f(x_i));
        operation  - операція, якою отримано симплекс ("initial", "reflection",
                     "expansion", "contraction_outside", "contraction_inside",
                     "shrink").
    """
    points: Tuple[SimplexEntry, ...]
    operation: str = "initial"

    @classmethod
    def from_points(
        cls,
        func: ScalarFunction,
        points: Iterable[ArrayLike],
        counter: Optional[EvaluationCounter] = None,
    ) -> "Simplex":
        """Побудувати симплекс, обчисливши f у кожній точці."""
        counter = counter if counter is not None else EvaluationCounter()
        entries = []
        for x in points:
            point = as_point(x)
            entries.append((point, counter.evaluate(func, point)))
        return cls(points=tuple(entries))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def values(self) -> np.ndarray:
        return np.array([value for _, value in self.points], dtype=float)

    @property
    def best(self) -> Optional[SimplexEntry]:
        """Вершина з найменшим f (при рівності — перша за порядком)."""
        if not self.points:
            return None
        return min(self.points, key=lambda entry: entry[1])

    @property
    def spread(self) -> float:
        """Розкид значень f: max - min."""
        if not self.points:
            return 0.0
        values = self.values
        return float(values.max() - values.min())

    def centroid(self) -> np.ndarray:
        """Центроїд усіх вершин (середнє по координатах)."""
        return np.mean([x for x, _ in self.points], axis=0)

    def flatten(self) -> np.ndarray:
        """Координати всіх вершин підряд: (x1, y1, x2, y2, ...)."""
        if not self.points:
            return np.zeros(0, dtype=float)
        return np.concatenate([x for x, _ in self.points])

    def __repr__(self) -> str:
        best = self.best
        f_best = best[1] if best is not None else None
        return f"Simplex(k={len(self)}, operation={self.operation!r}, f_best={f_best})"


# ---------------------------------------------------------------------------
# Метод Нелдера–Міда
# ---------------------------------------------------------------------------

class NelderMeadOptimizer(Optimizer):
    """
    Метод Нелдера–Міда.

    Особливості:
        - не використовує градієнт;
        - один крок = одна ітерація над симплексом;
        - зупинка: max_steps, max_obj_evals або розкид значень f < tol.

    Налаштування (options):
        alpha  : коефіцієнт відбиття (reflection), default: 1.0
        gamma  : коефіцієнт розширення (expansion), default: 2.0
        rho    : коефіцієнт контракту (contraction), default: 0.5
        sigma  : коефіцієнт стиснення (shrink), default: 0.5
    """

    requires_gradient: bool = False

    def __init__(
        self,
        max_obj_evals: Optional[int] = 1000,
        max_steps: Optional[int] = None,
        tol: float = 1e-6,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(
            max_obj_evals=max_obj_evals,
            max_steps=max_steps,
            options=options,
            name=name or "Nelder–Mead simplex",
        )
        self.tol = float(tol)

    def minimize(
        self,
        func: ScalarFunction,
        initial_simplex: Union[Simplex, Iterable[ArrayLike]],
        report_perf: bool = False,
    ) -> MinimizeResult:
        """
        Мінімізувати func, стартуючи з initial_simplex.

        initial_simplex:
            - Simplex: значення вершин вважаються вже обчисленими;
            - або послідовність точок: f обчислюється (і рахується) тут.

        Повертає MinimizeResult(x_star, perf); x_star = None, якщо симплекс порожній.
        """
        counter = EvaluationCounter()
        if isinstance(initial_simplex, Simplex):
            simplex = initial_simplex
        else:
            simplex = Simplex.from_points(func, initial_simplex, counter)

        final, trace = self._run(func, simplex, counter, report_perf)

        best = final.best
        x_star = best[0] if best is not None else None
        return MinimizeResult(x_star, trace)

    # ------------------------------------------------------------------
    # Один крок методу Нелдера–Міда
    # ------------------------------------------------------------------

    def _stop_reason(
        self,
        problem: ScalarFunction,
        state: Simplex,
        steps: int,
        counter: EvaluationCounter,
    ) -> Optional[str]:
        if len(state) == 0:
            return "empty_simplex"
        if len(state) == 1:
            return "single_point"
        budget = self._budget_exhausted(steps, counter)
        if budget is not None:
            return budget
        if state.spread < self.tol:
            return "tol"
        return None

    def _step(
        self,
        problem: ScalarFunction,
        state: Simplex,
        counter: EvaluationCounter,
    ) -> Simplex:
        func = problem

        alpha: float = float(self.options.get("alpha", 1.0))
        gamma: float = float(self.options.get("gamma", 2.0))
        rho: float = float(self.options.get("rho", 0.5))
        sigma: float = float(self.options.get("sigma", 0.5))

        # Стабільне сортування: при рівних f зберігається початковий порядок
        ordered: List[SimplexEntry] = sorted(state.points, key=lambda entry: entry[1])

        # Індекси:
        #   0        – найкраща точка
        #   -2       – друга найгірша
        #   -1       – найгірша точка
        x_best, f_best = ordered[0]
        x_worst, f_worst = ordered[-1]
        f_second_worst = ordered[-2][1]

        # Центроїд усіх, окрім найгіршої точки
        centroid = np.mean([x for x, _ in ordered[:-1]], axis=0)

        def candidate(x: np.ndarray) -> SimplexEntry:
            point = as_point(x)
            return point, counter.evaluate(func, point)

        def replace_worst(entry: SimplexEntry, operation: str) -> Simplex:
            return Simplex(points=tuple(ordered[:-1]) + (entry,), operation=operation)

        # 1. Reflection (відбиття)
        reflected = candidate(centroid + alpha * (centroid - x_worst))
        f_reflect = reflected[1]

        if f_reflect < f_best:
            # 2. Expansion (розширення)
            expanded = candidate(centroid + gamma * (reflected[0] - centroid))
            if expanded[1] < f_reflect:
                return replace_worst(expanded, "expansion")
            return replace_worst(reflected, "reflection")

        if f_reflect < f_second_worst:
            # Випадок "прийнятне відбиття"
            return replace_worst(reflected, "reflection")

        # 3. Contraction (контракт)
        if f_reflect < f_worst:
            # Зовнішній контракт
            contracted = candidate(centroid + rho * (reflected[0] - centroid))
            if contracted[1] <= f_reflect:
                return replace_worst(contracted, "contraction_outside")
        else:
            # Внутрішній контракт
            contracted = candidate(centroid + rho * (x_worst - centroid))
            if contracted[1] < f_worst:
                return replace_worst(contracted, "contraction_inside")

        # 4. Shrink (стиснення симплекса до найкращої точки)
        shrunk = [ordered[0]] + [
            candidate(x_best + sigma * (x - x_best)) for x, _ in ordered[1:]
        ]
        return Simplex(points=tuple(shrunk), operation="shrink")


__all__ = [
    "SimplexEntry",
    "Simplex",
    "NelderMeadOptimizer",
]
