"""
optimizers

Ітераційні методи мінімізації скалярної функції f: R^n -> R:

    - градієнтні методи з line search (ConjugateGradient, SteepestDescent);
    - симплекс-метод Нелдера–Міда (NelderMeadOptimizer);
    - генетичний алгоритм (GeneticAlgorithm).

Кожен minimize() повертає MinimizeResult(x_star, perf).
"""

from .conjugate_gradient import ConjugateGradient, DegenerateGradientError
from .descent import DescentOptimizer, DescentState
from .functions import FUNCTIONS, TargetFunction, as_point, numerical_gradient, points_equal
from .genetic import Generation, GeneticAlgorithm
from .line_search import (
    LINE_SEARCH_ARMIJO,
    LINE_SEARCH_WOLFE,
    LineSearchResult,
    NoStepFound,
    choose_step_size,
    line_search,
)
from .nelder_mead import NelderMeadOptimizer, Simplex
from .optimizer_base import OptimizationError, Optimizer
from .performance import EvaluationCounter, MinimizeResult, PerformanceTrace
from .selection import (
    FitnessProportionateSelection,
    SelectionScheme,
    StochasticUniversalSampling,
    TournamentSelection,
)
from .steepest_descent import SteepestDescent

__all__ = [
    "ConjugateGradient",
    "DegenerateGradientError",
    "DescentOptimizer",
    "DescentState",
    "FUNCTIONS",
    "TargetFunction",
    "as_point",
    "numerical_gradient",
    "points_equal",
    "Generation",
    "GeneticAlgorithm",
    "LINE_SEARCH_ARMIJO",
    "LINE_SEARCH_WOLFE",
    "LineSearchResult",
    "NoStepFound",
    "choose_step_size",
    "line_search",
    "NelderMeadOptimizer",
    "Simplex",
    "OptimizationError",
    "Optimizer",
    "EvaluationCounter",
    "MinimizeResult",
    "PerformanceTrace",
    "FitnessProportionateSelection",
    "SelectionScheme",
    "StochasticUniversalSampling",
    "TournamentSelection",
    "SteepestDescent",
]
