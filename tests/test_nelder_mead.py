import numpy as np
import pytest

from optimizers.functions import as_point, points_equal
from optimizers.nelder_mead import NelderMeadOptimizer, Simplex
from optimizers.performance import EvaluationCounter

OPERATIONS = {
    "reflection",
    "expansion",
    "contraction_outside",
    "contraction_inside",
    "shrink",
}


def test_sphere_simplex_improves_on_initial_best(sphere):
    nm = NelderMeadOptimizer(max_obj_evals=500, max_steps=None, tol=0.0)
    initial = [(3.0, 4.0), (4.0, 3.0), (5.0, 5.0)]

    x_star, perf = nm.minimize(sphere.func, initial, report_perf=True)

    initial_best = min(sphere.func(x) for x in initial)
    assert sphere.func(x_star) < initial_best
    assert perf.stopped_by == "max_obj_evals"
    assert 500 <= perf.num_obj_eval <= 504
    assert perf.num_grad_eval == 0


@pytest.mark.parametrize("k", [2, 3, 5, 8])
def test_best_never_worse_than_initial_simplex(camel, rng, k):
    nm = NelderMeadOptimizer(max_obj_evals=200, tol=0.0)
    points = np.column_stack([rng.uniform(-2.0, 2.0, k), rng.uniform(-1.0, 1.0, k)])
    initial = Simplex.from_points(camel.func, points)

    x_star, _ = nm.minimize(camel.func, initial)

    assert camel.func(x_star) <= initial.values.min()


def test_converges_below_tolerance(sphere):
    nm = NelderMeadOptimizer(max_obj_evals=10_000, tol=1e-8)

    x_star, perf = nm.minimize(sphere.func, [(3.0, 4.0), (4.0, 3.0), (5.0, 5.0)], report_perf=True)

    assert perf.stopped_by == "tol"
    assert perf.final_state.spread < 1e-8
    assert np.linalg.norm(x_star) < 1e-2


def test_trace_snapshots_are_complete_and_consistent(sphere):
    nm = NelderMeadOptimizer(max_obj_evals=100, tol=0.0)

    _, perf = nm.minimize(sphere.func, [(3.0, 4.0), (4.0, 3.0), (5.0, 5.0)], report_perf=True)

    states = perf.state_trace
    assert states[0].operation == "initial"
    assert all(state.operation in OPERATIONS for state in states[1:])
    assert len(states) == perf.num_steps + 1
    for state in states:
        assert len(state) == 3
        for x, value in state.points:
            assert value == sphere.func(x)


def test_best_value_is_monotone_across_iterations(camel, rng):
    nm = NelderMeadOptimizer(max_obj_evals=300, tol=0.0)
    points = np.column_stack([rng.uniform(-2.0, 2.0, 8), rng.uniform(-1.0, 1.0, 8)])

    _, perf = nm.minimize(camel.func, points, report_perf=True)

    best_values = [state.best[1] for state in perf.state_trace]
    assert all(b <= a for a, b in zip(best_values, best_values[1:]))


def test_pre_evaluated_simplex_is_not_re_evaluated(sphere):
    initial = Simplex.from_points(sphere.func, [(3.0, 4.0), (4.0, 3.0), (5.0, 5.0)])
    nm = NelderMeadOptimizer(max_steps=0)

    x_star, perf = nm.minimize(sphere.func, initial, report_perf=True)

    assert perf.stopped_by == "max_steps"
    assert perf.num_obj_eval == 0
    assert perf.num_steps == 0
    assert points_equal(x_star, [3.0, 4.0])


def test_points_are_evaluated_and_counted(sphere):
    nm = NelderMeadOptimizer(max_steps=0)
    _, perf = nm.minimize(sphere.func, [(3.0, 4.0), (4.0, 3.0)], report_perf=True)
    assert perf.num_obj_eval == 2


def test_initial_simplex_is_not_mutated(sphere):
    initial = Simplex.from_points(sphere.func, [(3.0, 4.0), (4.0, 3.0), (5.0, 5.0)])
    snapshot = initial.flatten().copy()

    NelderMeadOptimizer(max_obj_evals=50, tol=0.0).minimize(sphere.func, initial)

    assert np.array_equal(initial.flatten(), snapshot)
    assert initial.operation == "initial"


def test_empty_simplex_returns_none(sphere):
    x_star, perf = NelderMeadOptimizer().minimize(sphere.func, [], report_perf=True)

    assert x_star is None
    assert perf.stopped_by == "empty_simplex"
    assert perf.num_obj_eval == 0


def test_single_point_simplex_returns_that_point(sphere):
    x_star, perf = NelderMeadOptimizer().minimize(sphere.func, [(1.0, 2.0)], report_perf=True)

    assert points_equal(x_star, [1.0, 2.0])
    assert perf.stopped_by == "single_point"


def test_simplex_helpers(sphere):
    counter = EvaluationCounter()
    simplex = Simplex.from_points(sphere.func, [(1.0, 0.0), (0.0, 0.0), (0.0, 2.0)], counter)

    assert counter.num_obj_eval == 3
    assert points_equal(simplex.best[0], [0.0, 0.0])
    assert simplex.spread == 4.0
    assert np.allclose(simplex.centroid(), [1.0 / 3.0, 2.0 / 3.0])
    assert np.array_equal(simplex.flatten(), [1.0, 0.0, 0.0, 0.0, 0.0, 2.0])


def test_tie_keeps_original_order():
    simplex = Simplex(points=((as_point([1.0]), 0.0), (as_point([2.0]), 0.0)))
    assert points_equal(simplex.best[0], [1.0])


def test_no_trace_without_report_perf(sphere):
    result = NelderMeadOptimizer(max_obj_evals=50).minimize(sphere.func, [(3.0, 4.0), (4.0, 3.0)])
    assert result.perf is None
