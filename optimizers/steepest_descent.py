"""
steepest_descent.py

Метод Коші (найшвидший спуск) як стратегія DescentOptimizer.

    x_{k+1} = x_k + α_k * p_k,  p_k = -∇f(x_k)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from .descent import DescentOptimizer


class SteepestDescent(DescentOptimizer):
    """Метод Коші: напрямок завжди антиградієнт, попередній p_k не використовується."""

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
            name=name or "Cauchy (steepest descent)",
        )

    def _next_direction(
        self,
        grad_new: np.ndarray,
        grad: np.ndarray,
        direction: np.ndarray,
    ) -> np.ndarray:
        return -grad_new


__all__ = [
    "SteepestDescent",
]
