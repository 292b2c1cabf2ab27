"""
performance.py

Інструментування запуску оптимізації:
    - EvaluationCounter  – лічильники викликів f(x) та ∇f(x) для одного запуску;
    - PerformanceTrace   – траса станів (симплекси / покоління / стани спуску)
                           плюс лічильники та причина зупинки;
    - MinimizeResult     – пара (x_star, perf), яку повертає кожен minimize().

Кожен знімок у трасі — повний самодостатній стан (не різниця з попереднім)
і має метод flatten(), тому трасу можна перетворити на таблицю
"рядок = ітерація, стовпчик = координата".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Tuple

import numpy as np

from .functions import ArrayLike, ScalarFunction, VectorFunction


# ---------------------------------------------------------------------------
# Лічильники викликів
# ---------------------------------------------------------------------------

class EvaluationCounter:
    """
    Лічильники викликів цільової функції та градієнта.

    Створюється заново в кожному виклику minimize() і явно передається
    у вкладені процедури (line search), тож лічильники не є глобальним станом
    і два паралельні запуски не заважають один одному.
    """

    def __init__(self) -> None:
        self.num_obj_eval: int = 0
        self.num_grad_eval: int = 0

    def evaluate(self, func: ScalarFunction, x: ArrayLike) -> float:
        """Обчислити f(x) та збільшити лічильник викликів функції."""
        self.num_obj_eval += 1
        return float(func(x))

    def gradient(self, grad: VectorFunction, x: ArrayLike) -> np.ndarray:
        """Обчислити ∇f(x) та збільшити лічильник викликів градієнта."""
        self.num_grad_eval += 1
        return np.asarray(grad(x), dtype=float)

    def __repr__(self) -> str:
        return (
            f"EvaluationCounter(num_obj_eval={self.num_obj_eval}, "
            f"num_grad_eval={self.num_grad_eval})"
        )


# ---------------------------------------------------------------------------
# Траса виконання
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PerformanceTrace:
    """
    Історія одного запуску.

    Атрибути:
        state_trace    - знімки станів у порядку ітерацій; state_trace[0] —
                         початковий стан, далі по одному на ітерацію;
        num_obj_eval   - кількість викликів цільової функції;
        num_grad_eval  - кількість викликів градієнта;
        stopped_by     - причина зупинки ("grad_tol", "tol", "max_steps",
                         "max_obj_evals", "empty_population", ...).
    """
    state_trace: Tuple[Any, ...]
    num_obj_eval: int
    num_grad_eval: int
    stopped_by: str

    @property
    def num_steps(self) -> int:
        """Кількість виконаних ітерацій (без початкового стану)."""
        return max(len(self.state_trace) - 1, 0)

    @property
    def final_state(self) -> Any:
        return self.state_trace[-1] if self.state_trace else None

    # ------------------------------------------------------------------
    # Перетворення в "табличний" вигляд
    # ------------------------------------------------------------------

    def as_matrix(self) -> np.ndarray:
        """
        Матриця станів: рядки — ітерації, стовпчики — координати
        (x1, y1, x2, y2, ... для симплекса чи покоління).
        """
        rows: List[np.ndarray] = [
            np.asarray(state.flatten(), dtype=float) for state in self.state_trace
        ]
        if not rows:
            return np.zeros((0, 0), dtype=float)
        return np.vstack(rows)

    def to_dataframe(self):
        """
        Повернути pandas.DataFrame з матрицею станів.

        Вимога: встановлений пакет pandas.
        """
        try:
            import pandas as pd  # type: ignore
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError(
                "Для використання PerformanceTrace.to_dataframe() "
                "потрібно встановити пакет 'pandas'."
            ) from exc

        matrix = self.as_matrix()
        columns = [f"c{j}" for j in range(matrix.shape[1])]
        frame = pd.DataFrame(matrix, columns=columns)
        frame.index.name = "iteration"
        return frame


class MinimizeResult(NamedTuple):
    """Результат minimize(): найкраща точка (або None) та траса (або None)."""
    x_star: Optional[np.ndarray]
    perf: Optional[PerformanceTrace]


__all__ = [
    "EvaluationCounter",
    "PerformanceTrace",
    "MinimizeResult",
]
