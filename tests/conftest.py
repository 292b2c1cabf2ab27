"""
Pytest configuration and shared fixtures for the optimizers tests.
"""

import sys
from pathlib import Path

# Add project root to path so the optimizers package imports without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from optimizers.functions import FUNCTIONS


@pytest.fixture
def rng():
    """Seeded random source for stochastic tests."""
    return np.random.default_rng(42)


@pytest.fixture
def sphere():
    """f(x, y) = x^2 + y^2 with its exact gradient."""
    return FUNCTIONS["sphere"]


@pytest.fixture
def camel():
    """Six-hump camel function on [-2, 2] x [-1, 1]."""
    return FUNCTIONS["six_hump_camel"]


@pytest.fixture
def quadratic():
    """Ill-conditioned strictly convex quadratic 0.5 x^T A x - b^T x."""
    A = np.array([[4.0, 1.0], [1.0, 3.0]])
    b = np.array([1.0, 2.0])

    def func(x):
        x = np.asarray(x, dtype=float)
        return float(0.5 * x @ A @ x - b @ x)

    def grad(x):
        x = np.asarray(x, dtype=float)
        return A @ x - b

    return func, grad, np.linalg.solve(A, b)
