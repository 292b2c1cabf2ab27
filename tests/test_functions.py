import numpy as np
import pytest

from optimizers.functions import (
    FUNCTIONS,
    as_point,
    numerical_gradient,
    points_equal,
    rosenbrock,
    grad_rosenbrock,
    six_hump_camel,
)


def test_as_point_is_read_only_copy():
    source = np.array([1.0, 2.0])
    point = as_point(source)

    source[0] = 10.0
    assert point[0] == 1.0

    with pytest.raises(ValueError):
        point[0] = 5.0


def test_as_point_flattens_to_float_vector():
    point = as_point([[1, 2, 3]])
    assert point.shape == (3,)
    assert point.dtype == float


def test_points_equal_by_value():
    assert points_equal(as_point([1.0, 2.0]), [1.0, 2.0])
    assert not points_equal([1.0, 2.0], [1.0, 2.5])


@pytest.mark.parametrize("key", sorted(FUNCTIONS))
def test_objective_is_idempotent(key):
    func = FUNCTIONS[key].func
    point = as_point([0.37, -0.58])
    values = [func(point) for _ in range(5)]
    assert all(v == values[0] for v in values)


@pytest.mark.parametrize("key", sorted(FUNCTIONS))
def test_analytic_gradient_matches_numerical(key):
    target = FUNCTIONS[key]
    x = as_point([0.3, -0.4])
    assert np.allclose(target.grad(x), numerical_gradient(target.func, x), atol=1e-5)


def test_rosenbrock_minimum():
    assert rosenbrock([1.0, 1.0]) == 0.0
    assert np.allclose(grad_rosenbrock([1.0, 1.0]), 0.0)


def test_six_hump_camel_global_minimum():
    f_opt = -1.0316284534898774
    assert abs(six_hump_camel([0.089842, -0.712656]) - f_opt) < 1e-5
    assert abs(six_hump_camel([-0.089842, 0.712656]) - f_opt) < 1e-5
