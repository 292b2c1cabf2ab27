"""
optimizer_base.py

Базовий клас для методів оптимізації (Strategy) та спільний ітераційний цикл.

Ідея:
    - Є абстрактний клас Optimizer, від якого наслідуються всі конкретні методи:
        * ConjugateGradient, SteepestDescent (через DescentOptimizer)
        * NelderMeadOptimizer
        * GeneticAlgorithm
    - Кожен метод реалізує _step() та _stop_reason(); цикл _run() спільний.

Стан методу не змінюється "на місці": _step() повертає новий незмінний
стан, а _run() лише перев'язує змінну. Завдяки цьому траса може зберігати
всі попередні стани без ризику, що їх хтось перепише.

Формат:
    _step(problem, state, counter) -> новий state
    _stop_reason(problem, state, steps, counter) -> Optional[str]

problem — дані конкретного запуску (цільова функція, межі, генератор
випадкових чисел, ...), які не є частиною конфігурації об'єкта.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from .performance import EvaluationCounter, PerformanceTrace

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Помилки
# ---------------------------------------------------------------------------

class OptimizationError(RuntimeError):
    """Невиправна чисельна помилка під час запуску оптимізації."""


# ---------------------------------------------------------------------------
# Базовий клас Optimizer (Strategy)
# ---------------------------------------------------------------------------

class Optimizer(ABC):
    """
    Абстрактний базовий клас для всіх методів оптимізації.

    Об'єкт Optimizer тримає лише конфігурацію (бюджети, options); увесь
    стан запуску (лічильники, траса) створюється в minimize(), тому один
    і той самий об'єкт можна використовувати для кількох незалежних запусків.

    Бюджети:
        max_obj_evals : ліміт викликів f(x) (None — без ліміту)
        max_steps     : ліміт ітерацій (None — без ліміту)

    Бюджет перевіряється перед кожною ітерацією, тож остання ітерація
    може трохи перевищити max_obj_evals (наприклад, shrink у Нелдера–Міда).
    """

    # Може бути переозначено в дочірніх класах
    requires_gradient: bool = False

    def __init__(
        self,
        max_obj_evals: Optional[int] = None,
        max_steps: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        if max_obj_evals is not None and max_obj_evals < 0:
            raise ValueError("max_obj_evals не може бути від'ємним.")
        if max_steps is not None and max_steps < 0:
            raise ValueError("max_steps не може бути від'ємним.")

        self.max_obj_evals = max_obj_evals
        self.max_steps = max_steps
        self.options: Dict[str, Any] = dict(options or {})
        self.name: str = name or self.__class__.__name__

    # ------------------------------------------------------------------
    # Спільний ітераційний цикл
    # ------------------------------------------------------------------

    def _run(
        self,
        problem: Any,
        state0: Any,
        counter: EvaluationCounter,
        report_perf: bool,
    ) -> Tuple[Any, Optional[PerformanceTrace]]:
        """
        Виконувати _step() доки _stop_reason() не поверне причину зупинки.

        Повертає (останній стан, траса або None).
        Якщо report_perf = False, список станів не створюється взагалі.
        """
        states: Optional[List[Any]] = [state0] if report_perf else None

        state = state0
        steps = 0
        while True:
            stopped_by = self._stop_reason(problem, state, steps, counter)
            if stopped_by is not None:
                break

            state = self._step(problem, state, counter)
            steps += 1

            if states is not None:
                states.append(state)

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    f"{self.name}: ітерація {steps}, {state!r}, "
                    f"f-evals={counter.num_obj_eval}, grad-evals={counter.num_grad_eval}"
                )

        logger.info(
            f"{self.name}: зупинка ({stopped_by}) після {steps} ітерацій, "
            f"f-evals={counter.num_obj_eval}, grad-evals={counter.num_grad_eval}"
        )

        if states is None:
            return state, None

        trace = PerformanceTrace(
            state_trace=tuple(states),
            num_obj_eval=counter.num_obj_eval,
            num_grad_eval=counter.num_grad_eval,
            stopped_by=stopped_by,
        )
        return state, trace

    def _budget_exhausted(self, steps: int, counter: EvaluationCounter) -> Optional[str]:
        """Причина зупинки через вичерпаний бюджет, або None."""
        if self.max_steps is not None and steps >= self.max_steps:
            return "max_steps"
        if self.max_obj_evals is not None and counter.num_obj_eval >= self.max_obj_evals:
            return "max_obj_evals"
        return None

    # ------------------------------------------------------------------
    # Абстрактні методи, які реалізують конкретні стратегії
    # ------------------------------------------------------------------

    @abstractmethod
    def _step(self, problem: Any, state: Any, counter: EvaluationCounter) -> Any:
        """
        Одна ітерація методу: з поточного стану побудувати новий.

        Parameters
        ----------
        problem : Any
            Дані запуску (функція, межі, генератор випадкових чисел).
        state : Any
            Поточний незмінний стан (DescentState, Simplex, Generation).
        counter : EvaluationCounter
            Лічильники поточного запуску.

        Returns
        -------
        Any
            Новий стан того ж типу.
        """
        raise NotImplementedError

    @abstractmethod
    def _stop_reason(
        self,
        problem: Any,
        state: Any,
        steps: int,
        counter: EvaluationCounter,
    ) -> Optional[str]:
        """Повернути причину зупинки або None, якщо треба продовжувати."""
        raise NotImplementedError


__all__ = [
    "OptimizationError",
    "Optimizer",
]
