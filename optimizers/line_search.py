"""
line_search.py

Модуль одномірного пошуку (line search) вздовж заданого напрямку.

Ідея:
    - Працюємо з допоміжною функцією φ(α) = f(x_k + α p_k) та її похідною
      φ'(α) = ∇f(x_k + α p_k)^T p_k.
    - Кожне пробне обчислення f чи ∇f іде через EvaluationCounter
      запуску, який викликав пошук, тому лічильники в PerformanceTrace
      враховують і кроки line search.
    - Якщо прийнятний крок не знайдено в межах бюджету, кидаємо NoStepFound:
      методи спряжених напрямків не можуть продовжувати без коректного кроку.

Підтримувані методи лінійного пошуку:

    1) сильні умови Вольфе (bracketing + zoom), за замовчуванням;
    2) Armijo backtracking.

Публічний інтерфейс:
    - LineSearchResult        – результат 1D-пошуку;
    - NoStepFound             – крок не знайдено;
    - line_search(...)        – повний результат пошуку;
    - choose_step_size(...)   – лише довжина кроку α;
    - константи LINE_SEARCH_* – імена методів для options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from .functions import ArrayLike, ScalarFunction, VectorFunction
from .optimizer_base import OptimizationError
from .performance import EvaluationCounter


# ---------------------------------------------------------------------------
# Константи для типів методів лінійного пошуку
# ---------------------------------------------------------------------------

LINE_SEARCH_WOLFE = "strong_wolfe"
LINE_SEARCH_ARMIJO = "armijo_backtracking"

LineSearchMethod = str


class NoStepFound(OptimizationError):
    """Жодна довжина кроку не задовольнила умови пошуку в межах бюджету."""


# ---------------------------------------------------------------------------
# Результат одномірного пошуку
# ---------------------------------------------------------------------------

@dataclass
class LineSearchResult:
    """
    Результат роботи процедури одномірного пошуку.

    Атрибути:
        alpha       - знайдене значення параметра кроку α*;
        phi_value   - значення φ(α*) = f(x + α* p);
        iterations  - кількість ітерацій 1D-алгоритму;
        func_evals  - кількість пробних викликів f під час пошуку;
        grad_evals  - кількість пробних викликів ∇f під час пошуку;
        meta        - службова інформація (метод, фаза, константи).
    """
    alpha: float
    phi_value: float
    iterations: int
    func_evals: int
    grad_evals: int
    meta: Dict[str, Any] = field(default_factory=dict)


class _Phi:
    """φ(α) та φ'(α) вздовж напрямку з підрахунком пробних викликів."""

    def __init__(
        self,
        func: ScalarFunction,
        grad: VectorFunction,
        x: np.ndarray,
        direction: np.ndarray,
        counter: EvaluationCounter,
        max_evals: int,
    ) -> None:
        self.func = func
        self.grad = grad
        self.x = x
        self.direction = direction
        self.counter = counter
        self.max_evals = max_evals
        self.func_evals = 0
        self.grad_evals = 0

    def _check_budget(self) -> None:
        if self.func_evals + self.grad_evals >= self.max_evals:
            raise NoStepFound(
                f"line search: вичерпано бюджет пробних обчислень ({self.max_evals})."
            )

    def value(self, alpha: float) -> float:
        self._check_budget()
        self.func_evals += 1
        value = self.counter.evaluate(self.func, self.x + alpha * self.direction)
        if not np.isfinite(value):
            raise NoStepFound(f"line search: φ({alpha:g}) не є скінченним числом.")
        return value

    def derivative(self, alpha: float) -> float:
        self._check_budget()
        self.grad_evals += 1
        g = self.counter.gradient(self.grad, self.x + alpha * self.direction)
        return float(np.dot(g, self.direction))


# ---------------------------------------------------------------------------
# Публічний інтерфейс line search
# ---------------------------------------------------------------------------

def line_search(
    func: ScalarFunction,
    grad: VectorFunction,
    x: ArrayLike,
    direction: ArrayLike,
    counter: Optional[EvaluationCounter] = None,
    f0: Optional[float] = None,
    g0: Optional[ArrayLike] = None,
    method: LineSearchMethod = LINE_SEARCH_WOLFE,
    options: Optional[Dict[str, Any]] = None,
) -> LineSearchResult:
    """
    Знайти довжину кроку α > 0 вздовж direction із точки x.

    Parameters
    ----------
    func, grad : цільова функція та її градієнт.
    x : поточна точка x_k.
    direction : напрямок p_k; має бути напрямком спуску (∇f(x_k)^T p_k < 0),
        але це не перевіряється.
    counter : лічильники запуску, у які додаються пробні обчислення.
        Якщо None, створюється локальний.
    f0, g0 : уже відомі f(x_k) та ∇f(x_k); якщо не задані, обчислюються
        (і враховуються в counter).
    method : LINE_SEARCH_WOLFE або LINE_SEARCH_ARMIJO.
    options : параметри методу:
        alpha0       : початковий крок (default: 1.0)
        alpha_max    : максимальний крок для Вольфе (default: 1e6)
        c1           : константа достатнього спадання (default: 1e-4)
        c2           : константа кривизни для Вольфе (default: 0.9)
        tau          : множник зменшення кроку для Armijo (default: 0.5)
        max_evals    : бюджет пробних обчислень f та ∇f (default: 100)
        min_interval : мінімальна довжина дужки в zoom (default: 1e-12)

    Raises
    ------
    NoStepFound
        Якщо прийнятний крок не знайдено.
    """
    options = options or {}
    counter = counter if counter is not None else EvaluationCounter()

    x = np.asarray(x, dtype=float)
    direction = np.asarray(direction, dtype=float)

    alpha0 = float(options.get("alpha0", 1.0))
    c1 = float(options.get("c1", 1e-4))
    c2 = float(options.get("c2", 0.9))
    max_evals = int(options.get("max_evals", 100))

    if alpha0 <= 0.0:
        raise ValueError("line search: alpha0 повинен бути додатним.")
    if not (0.0 < c1 < 1.0):
        raise ValueError("line search: потрібно 0 < c1 < 1.")
    if method == LINE_SEARCH_WOLFE and not (c1 < c2 < 1.0):
        raise ValueError("line search: для умов Вольфе потрібно 0 < c1 < c2 < 1.")

    if f0 is None:
        f0 = counter.evaluate(func, x)
    if g0 is None:
        g0 = counter.gradient(grad, x)
    dphi0 = float(np.dot(np.asarray(g0, dtype=float), direction))

    phi = _Phi(func, grad, x, direction, counter, max_evals)

    if method == LINE_SEARCH_WOLFE:
        alpha_max = float(options.get("alpha_max", 1e6))
        min_interval = float(options.get("min_interval", 1e-12))
        return _line_search_strong_wolfe(
            phi, float(f0), dphi0, alpha0, alpha_max, c1, c2, min_interval
        )

    if method == LINE_SEARCH_ARMIJO:
        tau = float(options.get("tau", 0.5))
        if not (0.0 < tau < 1.0):
            raise ValueError("line search: потрібно 0 < tau < 1.")
        return _line_search_armijo_backtracking(phi, float(f0), dphi0, alpha0, c1, tau)

    raise ValueError(f"Невідомий метод лінійного пошуку: '{method}'.")


def choose_step_size(
    func: ScalarFunction,
    direction: ArrayLike,
    grad: VectorFunction,
    x: ArrayLike,
    counter: Optional[EvaluationCounter] = None,
    **kwargs: Any,
) -> float:
    """Довжина кроку α вздовж direction (див. line_search)."""
    return line_search(func, grad, x, direction, counter=counter, **kwargs).alpha


# ---------------------------------------------------------------------------
# Внутрішні реалізації конкретних методів
# ---------------------------------------------------------------------------

def _interpolate(
    lo: float,
    phi_lo: float,
    dphi_lo: float,
    hi: float,
    phi_hi: float,
) -> float:
    """
    Мінімум квадратичної моделі через φ(lo), φ'(lo), φ(hi).

    Якщо мінімум не лежить усередині [lo, hi] з відступом 10% від країв
    (або модель не опукла), беремо середину інтервалу.
    """
    d = hi - lo
    curvature = (phi_hi - phi_lo - dphi_lo * d) / (d * d)
    mid = lo + 0.5 * d

    if curvature <= 0.0 or not np.isfinite(curvature):
        return mid

    trial = lo - dphi_lo / (2.0 * curvature)
    left, right = sorted((lo + 0.1 * d, hi - 0.1 * d))
    if not (left <= trial <= right):
        return mid
    return trial


def _line_search_strong_wolfe(
    phi: _Phi,
    f0: float,
    dphi0: float,
    alpha0: float,
    alpha_max: float,
    c1: float,
    c2: float,
    min_interval: float,
) -> LineSearchResult:
    """
    Пошук кроку з сильними умовами Вольфе:

        φ(α) <= φ(0) + c1 α φ'(0)          (достатнє спадання)
        |φ'(α)| <= c2 |φ'(0)|              (кривизна)

    Фаза 1 (bracketing): збільшуємо α вдвічі, поки не знайдемо дужку,
    що містить прийнятний крок, або сам прийнятний крок.
    Фаза 2 (zoom): звужуємо дужку [lo, hi], обираючи пробні точки
    квадратичною інтерполяцією.
    """
    meta: Dict[str, Any] = {"method": LINE_SEARCH_WOLFE, "c1": c1, "c2": c2}

    if not dphi0 < 0.0:
        raise NoStepFound(
            f"line search: напрямок не є напрямком спуску (φ'(0) = {dphi0:g})."
        )

    def accept(alpha: float, phi_alpha: float, iterations: int, phase: str) -> LineSearchResult:
        meta["phase"] = phase
        return LineSearchResult(
            alpha=alpha,
            phi_value=phi_alpha,
            iterations=iterations,
            func_evals=phi.func_evals,
            grad_evals=phi.grad_evals,
            meta=meta,
        )

    def zoom(lo: float, phi_lo: float, dphi_lo: float, hi: float, phi_hi: float,
             iterations: int) -> LineSearchResult:
        while abs(hi - lo) > min_interval:
            iterations += 1
            alpha = _interpolate(lo, phi_lo, dphi_lo, hi, phi_hi)
            phi_alpha = phi.value(alpha)

            if phi_alpha > f0 + c1 * alpha * dphi0 or phi_alpha >= phi_lo:
                hi, phi_hi = alpha, phi_alpha
                continue

            dphi_alpha = phi.derivative(alpha)
            if abs(dphi_alpha) <= -c2 * dphi0:
                return accept(alpha, phi_alpha, iterations, "zoom")

            if dphi_alpha * (hi - lo) >= 0.0:
                hi, phi_hi = lo, phi_lo
            lo, phi_lo, dphi_lo = alpha, phi_alpha, dphi_alpha

        raise NoStepFound(
            f"line search: дужка [{min(lo, hi):g}, {max(lo, hi):g}] "
            f"стиснулась без прийнятного кроку."
        )

    alpha_prev, phi_prev, dphi_prev = 0.0, f0, dphi0
    alpha = min(alpha0, alpha_max)
    iterations = 0

    while True:
        iterations += 1
        phi_alpha = phi.value(alpha)

        if phi_alpha > f0 + c1 * alpha * dphi0 or (iterations > 1 and phi_alpha >= phi_prev):
            return zoom(alpha_prev, phi_prev, dphi_prev, alpha, phi_alpha, iterations)

        dphi_alpha = phi.derivative(alpha)
        if abs(dphi_alpha) <= -c2 * dphi0:
            return accept(alpha, phi_alpha, iterations, "bracket")

        if dphi_alpha >= 0.0:
            return zoom(alpha, phi_alpha, dphi_alpha, alpha_prev, phi_prev, iterations)

        if alpha >= alpha_max:
            raise NoStepFound(
                f"line search: досягнуто alpha_max = {alpha_max:g} без прийнятного кроку."
            )

        alpha_prev, phi_prev, dphi_prev = alpha, phi_alpha, dphi_alpha
        alpha = min(2.0 * alpha, alpha_max)


def _line_search_armijo_backtracking(
    phi: _Phi,
    f0: float,
    dphi0: float,
    alpha0: float,
    c1: float,
    tau: float,
) -> LineSearchResult:
    """
    Armijo backtracking line search для φ(α).

    Алгоритм:
        - стартуємо з α0 > 0;
        - поки не виконується умова Арміхо
              φ(α) <= φ(0) + c1 * α * φ'(0),
          множимо α на tau (0 < tau < 1);
        - якщо бюджет пробних обчислень вичерпано — NoStepFound.
    """
    if not dphi0 < 0.0:
        raise NoStepFound(
            f"line search: напрямок не є напрямком спуску (φ'(0) = {dphi0:g})."
        )

    alpha = alpha0
    iterations = 0

    while True:
        iterations += 1
        phi_alpha = phi.value(alpha)

        if phi_alpha <= f0 + c1 * alpha * dphi0:
            return LineSearchResult(
                alpha=alpha,
                phi_value=phi_alpha,
                iterations=iterations,
                func_evals=phi.func_evals,
                grad_evals=phi.grad_evals,
                meta={"method": LINE_SEARCH_ARMIJO, "c1": c1, "tau": tau},
            )

        alpha *= tau


__all__ = [
    "LineSearchResult",
    "LineSearchMethod",
    "NoStepFound",
    "LINE_SEARCH_WOLFE",
    "LINE_SEARCH_ARMIJO",
    "line_search",
    "choose_step_size",
]
