from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from optimizers.nelder_mead import NelderMeadOptimizer
from optimizers.performance import EvaluationCounter, MinimizeResult, PerformanceTrace


def _simplex_trace(sphere):
    nm = NelderMeadOptimizer(max_steps=5, tol=0.0)
    return nm.minimize(sphere.func, [(3.0, 4.0), (4.0, 3.0), (5.0, 5.0)], report_perf=True)


def test_counter_tracks_objective_and_gradient_calls(sphere):
    counter = EvaluationCounter()

    assert counter.evaluate(sphere.func, [1.0, 2.0]) == 5.0
    counter.evaluate(sphere.func, [0.0, 0.0])
    grad = counter.gradient(sphere.grad, [1.0, 2.0])

    assert counter.num_obj_eval == 2
    assert counter.num_grad_eval == 1
    assert isinstance(grad, np.ndarray)


def test_as_matrix_has_row_per_state(sphere):
    _, perf = _simplex_trace(sphere)
    matrix = perf.as_matrix()

    assert matrix.shape == (perf.num_steps + 1, 6)
    assert np.array_equal(matrix[0], [3.0, 4.0, 4.0, 3.0, 5.0, 5.0])


def test_to_dataframe(sphere):
    pytest.importorskip("pandas")
    _, perf = _simplex_trace(sphere)

    frame = perf.to_dataframe()

    assert list(frame.columns) == [f"c{j}" for j in range(6)]
    assert frame.index.name == "iteration"
    assert len(frame) == perf.num_steps + 1


def test_trace_is_immutable(sphere):
    _, perf = _simplex_trace(sphere)
    with pytest.raises(FrozenInstanceError):
        perf.stopped_by = "other"


def test_empty_trace_helpers():
    perf = PerformanceTrace(state_trace=(), num_obj_eval=0, num_grad_eval=0, stopped_by="empty_simplex")

    assert perf.num_steps == 0
    assert perf.final_state is None
    assert perf.as_matrix().shape == (0, 0)


def test_minimize_result_unpacks():
    result = MinimizeResult(np.array([1.0]), None)
    x_star, perf = result

    assert x_star[0] == 1.0
    assert perf is None
    assert result.x_star is x_star
