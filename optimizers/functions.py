"""
functions.py

Базові типи для точок і цільових функцій, чисельний градієнт та невеликий
реєстр тестових функцій.

Формат:
    - точка x — незмінний numpy.ndarray (float) довільної розмірності n;
      створюється через as_point(), після чого запис у масив заборонено;
    - цільова функція: ScalarFunction, x -> float;
    - градієнт: VectorFunction, x -> вектор тієї ж розмірності;
    - є реєстр FUNCTIONS для вибору функції в тестах / прикладах.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[float]]
ScalarFunction = Callable[[np.ndarray], float]
VectorFunction = Callable[[np.ndarray], np.ndarray]


# ---------------------------------------------------------------------------
# Точка пошуку
# ---------------------------------------------------------------------------

def as_point(x: ArrayLike) -> np.ndarray:
    """
    Повернути незмінну копію x у вигляді 1D-масиву float.

    Кожен перехід алгоритму створює нову точку; масив позначено як
    read-only, тож випадкова модифікація "на місці" кине ValueError.
    """
    point = np.array(x, dtype=float).reshape(-1)
    point.setflags(write=False)
    return point


def points_equal(a: ArrayLike, b: ArrayLike) -> bool:
    """Порівняння точок за значенням."""
    return bool(np.array_equal(np.asarray(a, dtype=float), np.asarray(b, dtype=float)))


# ---------------------------------------------------------------------------
# Чисельний градієнт (центральні різниці)
# ---------------------------------------------------------------------------

def numerical_gradient(
    func: ScalarFunction,
    x: ArrayLike,
    h: float = 1e-6,
) -> np.ndarray:
    """
    Чисельний градієнт за центральною різницею.

    ∂f/∂x_i ≈ (f(x + h e_i) - f(x - h e_i)) / (2h)
    """
    x = np.asarray(x, dtype=float)
    grad = np.zeros_like(x, dtype=float)

    for i in range(len(x)):
        x_fwd = x.copy()
        x_bwd = x.copy()
        x_fwd[i] += h
        x_bwd[i] -= h
        grad[i] = (func(x_fwd) - func(x_bwd)) / (2.0 * h)

    return grad


# ---------------------------------------------------------------------------
# Тестові функції
# ---------------------------------------------------------------------------

def sphere(x: ArrayLike) -> float:
    """
    f(x) = sum(x_i^2)
    (строго опукла, єдиний мінімум у нулі)
    """
    x = np.asarray(x, dtype=float)
    return float(np.dot(x, x))


def grad_sphere(x: ArrayLike) -> np.ndarray:
    return 2.0 * np.asarray(x, dtype=float)


def six_hump_camel(x: ArrayLike) -> float:
    """
    f(x, y) = (4 - 2.1 x^2 + x^4 / 3) x^2 + x y + (4 y^2 - 4) y^2

    Шість локальних мінімумів на [-2, 2] x [-1, 1], два глобальні:
    (±0.089842, ∓0.712656), f* ≈ -1.0316284534898774.
    """
    x1, x2 = np.asarray(x, dtype=float)
    return float(
        (4.0 - 2.1 * x1 ** 2 + x1 ** 4 / 3.0) * x1 ** 2
        + x1 * x2
        + (4.0 * x2 ** 2 - 4.0) * x2 ** 2
    )


def grad_six_hump_camel(x: ArrayLike) -> np.ndarray:
    x1, x2 = np.asarray(x, dtype=float)
    return np.array(
        [
            8.0 * x1 - 8.4 * x1 ** 3 + 2.0 * x1 ** 5 + x2,
            x1 - 8.0 * x2 + 16.0 * x2 ** 3,
        ],
        dtype=float,
    )


def rosenbrock(x: ArrayLike) -> float:
    """
    f(x1, x2) = 100 * (x2 - x1^2)^2 + (1 - x1)^2
    """
    x1, x2 = np.asarray(x, dtype=float)
    return float(100.0 * (x2 - x1 ** 2) ** 2 + (1.0 - x1) ** 2)


def grad_rosenbrock(x: ArrayLike) -> np.ndarray:
    x1, x2 = np.asarray(x, dtype=float)
    return np.array(
        [
            -400.0 * x1 * (x2 - x1 ** 2) - 2.0 * (1.0 - x1),
            200.0 * (x2 - x1 ** 2),
        ],
        dtype=float,
    )


# ---------------------------------------------------------------------------
# Реєстр функцій
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TargetFunction:
    key: str
    name: str
    func: ScalarFunction
    grad: VectorFunction
    bounds: Optional[Tuple[Tuple[float, ...], Tuple[float, ...]]] = None


FUNCTIONS: Dict[str, TargetFunction] = {
    "sphere": TargetFunction(
        key="sphere",
        name="f(x, y) = x^2 + y^2",
        func=sphere,
        grad=grad_sphere,
        bounds=((-5.0, -5.0), (5.0, 5.0)),
    ),
    "six_hump_camel": TargetFunction(
        key="six_hump_camel",
        name="f(x, y) = (4 - 2.1x^2 + x^4/3)x^2 + xy + (4y^2 - 4)y^2",
        func=six_hump_camel,
        grad=grad_six_hump_camel,
        bounds=((-2.0, -1.0), (2.0, 1.0)),
    ),
    "rosenbrock": TargetFunction(
        key="rosenbrock",
        name="f(x1, x2) = 100 * (x2 - x1^2)^2 + (1 - x1)^2",
        func=rosenbrock,
        grad=grad_rosenbrock,
    ),
}

__all__ = [
    "ArrayLike",
    "ScalarFunction",
    "VectorFunction",
    "as_point",
    "points_equal",
    "numerical_gradient",
    "sphere",
    "grad_sphere",
    "six_hump_camel",
    "grad_six_hump_camel",
    "rosenbrock",
    "grad_rosenbrock",
    "TargetFunction",
    "FUNCTIONS",
]
