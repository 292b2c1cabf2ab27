"""
descent.py

Загальна схема градієнтних методів спуску з одномірним пошуком.

Ідея:
    x_{k+1} = x_k + α_k * p_k,
    де α_k підбирається за допомогою line search (line_search.py,
    за замовчуванням — сильні умови Вольфе),
        p_{k+1} — правило оновлення напрямку, яке задає дочірній клас
        (_next_direction): Флетчер–Рівз, Коші, ...

Зупинка: ||∇f(x_k)|| <= grad_tol (за замовчуванням 1e-6).
Якщо line search не знайшов крок, NoStepFound пробрасується назовні:
часткового результату немає.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Optional

import numpy as np

from .functions import ArrayLike, ScalarFunction, VectorFunction, as_point, numerical_gradient
from .line_search import LINE_SEARCH_WOLFE, line_search
from .optimizer_base import Optimizer
from .performance import EvaluationCounter, MinimizeResult


@dataclass(frozen=True, eq=False)
class DescentState:
    """
    Стан градієнтного методу після ітерації.

    Атрибути:
        x          - поточна точка x_k
        f          - значення f(x_k)
        grad       - градієнт ∇f(x_k)
        direction  - напрямок пошуку p_k для наступного кроку
        step_size  - крок α, яким отримано x_k (для початкового стану 0.0)
    """
    x: np.ndarray
    f: float
    grad: np.ndarray
    direction: np.ndarray
    step_size: float = 0.0

    @property
    def grad_norm(self) -> float:
        return float(np.linalg.norm(self.grad, ord=2))

    def flatten(self) -> np.ndarray:
        return np.asarray(self.x, dtype=float)

    def __repr__(self) -> str:
        return (
            f"DescentState(x={self.x.tolist()}, f={self.f:.6g}, grad_norm={self.grad_norm:.3e}, "
            f"step_size={self.step_size:.3e})"
        )


@dataclass(frozen=True)
class _DescentProblem:
    func: ScalarFunction
    grad: VectorFunction


class DescentOptimizer(Optimizer):
    """
    Базовий клас градієнтних методів з line search.

    Налаштування (options):
        line_search          : назва методу лінійного пошуку:
                               "strong_wolfe" (default), "armijo_backtracking"
        line_search_options  : dict з параметрами для line_search(...)
                               (c1, c2, alpha0, max_evals, ...)
    """

    requires_gradient: bool = True

    # Параметри line search за замовчуванням для конкретного правила напрямку
    default_line_search_options: Dict[str, Any] = {}

    def __init__(
        self,
        grad_tol: float = 1e-6,
        max_steps: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(max_obj_evals=None, max_steps=max_steps, options=options, name=name)
        self.grad_tol = float(grad_tol)

    def minimize(
        self,
        func: ScalarFunction,
        grad: Optional[VectorFunction],
        x0: ArrayLike,
        report_perf: bool = False,
    ) -> MinimizeResult:
        """
        Мінімізувати func із початкової точки x0.

        Якщо grad = None, використовується numerical_gradient.
        Повертає MinimizeResult(x_star, perf); perf = None, якщо report_perf = False.
        """
        grad = grad if grad is not None else partial(numerical_gradient, func)
        counter = EvaluationCounter()

        x = as_point(x0)
        f = counter.evaluate(func, x)
        g = as_point(counter.gradient(grad, x))
        state0 = DescentState(x=x, f=f, grad=g, direction=as_point(-g))

        state, trace = self._run(_DescentProblem(func, grad), state0, counter, report_perf)
        return MinimizeResult(state.x, trace)

    # ------------------------------------------------------------------
    # Одна ітерація
    # ------------------------------------------------------------------

    def _step(
        self,
        problem: _DescentProblem,
        state: DescentState,
        counter: EvaluationCounter,
    ) -> DescentState:
        ls_options = dict(self.default_line_search_options)
        ls_options.update(self.options.get("line_search_options", {}))

        ls_result = line_search(
            problem.func,
            problem.grad,
            state.x,
            state.direction,
            counter=counter,
            f0=state.f,
            g0=state.grad,
            method=str(self.options.get("line_search", LINE_SEARCH_WOLFE)),
            options=ls_options,
        )
        alpha = float(ls_result.alpha)

        x_new = as_point(state.x + alpha * state.direction)
        g_new = as_point(counter.gradient(problem.grad, x_new))
        p_new = as_point(self._next_direction(g_new, state.grad, state.direction))

        # φ(α) з line search і є f(x_new)
        return DescentState(
            x=x_new, f=float(ls_result.phi_value), grad=g_new, direction=p_new, step_size=alpha
        )

    def _stop_reason(
        self,
        problem: _DescentProblem,
        state: DescentState,
        steps: int,
        counter: EvaluationCounter,
    ) -> Optional[str]:
        if state.grad_norm <= self.grad_tol:
            return "grad_tol"
        return self._budget_exhausted(steps, counter)

    @abstractmethod
    def _next_direction(
        self,
        grad_new: np.ndarray,
        grad: np.ndarray,
        direction: np.ndarray,
    ) -> np.ndarray:
        """Правило оновлення напрямку p_{k+1} з ∇f(x_{k+1}), ∇f(x_k), p_k."""
        raise NotImplementedError


__all__ = [
    "DescentState",
    "DescentOptimizer",
]
