"""
conjugate_gradient.py

Реалізація методу Флетчера–Рівза (градієнтний метод спряжених напрямків)
як стратегії DescentOptimizer.

Ідея:
    p_0 = -g_0
    p_k = -g_k + β_k * p_{k-1},
    де β_k^FR = (g_k^T g_k) / (g_{k-1}^T g_{k-1})

    x_{k+1} = x_k + α_k * p_k,
    де α_k підбирається line search із сильними умовами Вольфе.

Періодичного рестарту (p_k = -g_k) немає. Щоб p_k лишався напрямком
спуску, константа кривизни line search за замовчуванням c2 = 0.1 (< 1/2).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from .descent import DescentOptimizer
from .optimizer_base import OptimizationError


class DegenerateGradientError(OptimizationError):
    """Нульовий знаменник у β_k = ||g_k||^2 / ||g_{k-1}||^2."""


class ConjugateGradient(DescentOptimizer):
    """
    Метод Флетчера–Рівза (спряжені градієнти).

    Особливості:
        - використовує попередній напрямок p_{k-1};
        - коефіцієнт β_k = ||g_k||^2 / ||g_{k-1}||^2;
        - зупинка при ||g_k|| <= grad_tol (default: 1e-6);
        - ліміту ітерацій за замовчуванням немає (max_steps = None).

    Налаштування (options) — див. DescentOptimizer.
    """

    default_line_search_options: Dict[str, Any] = {"c2": 0.1}

    def __init__(
        self,
        grad_tol: float = 1e-6,
        max_steps: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(
            grad_tol=grad_tol,
            max_steps=max_steps,
            options=options,
            name=name or "Fletcher–Reeves (conjugate gradients)",
        )

    def _next_direction(
        self,
        grad_new: np.ndarray,
        grad: np.ndarray,
        direction: np.ndarray,
    ) -> np.ndarray:
        num = float(np.dot(grad_new, grad_new))
        den = float(np.dot(grad, grad))
        if den == 0.0:
            raise DegenerateGradientError(
                "Fletcher–Reeves: g_{k-1}^T g_{k-1} = 0, β_k не визначений."
            )

        beta = num / den
        return -grad_new + beta * direction


__all__ = [
    "DegenerateGradientError",
    "ConjugateGradient",
]
