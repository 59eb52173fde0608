"""
Unit tests for objective module.
"""
import numpy as np
import pytest

from pylbfgs.objective import (
    BENCHMARKS,
    FunctionObjective,
    Objective,
    Rosenbrock,
    SeparableQuadratic,
    make_benchmark,
    standard_start,
)


def finite_difference_gradient(objective: Objective, x: np.ndarray, h: float = 1e-6) -> np.ndarray:
    """Central-difference gradient for checking analytic gradients."""
    grad = np.zeros_like(x)
    for i in range(x.size):
        e = np.zeros_like(x)
        e[i] = h
        f_plus, _ = objective.evaluate(x + e)
        f_minus, _ = objective.evaluate(x - e)
        grad[i] = (f_plus - f_minus) / (2.0 * h)
    return grad


class TestSeparableQuadratic:
    """Tests for the quadratic bowl."""

    def test_value_and_gradient(self) -> None:
        objective = SeparableQuadratic([1.0, 2.0, 3.0])
        f, g = objective.evaluate(np.array([1.0, 1.0, 2.0]))
        assert f == pytest.approx(1.0 + 2.0 + 12.0)
        np.testing.assert_allclose(g, [2.0, 4.0, 12.0])

    def test_gradient_matches_finite_differences(self) -> None:
        objective = SeparableQuadratic([0.5, 4.0, 10.0])
        x = np.array([0.3, -1.2, 0.7])
        _, g = objective.evaluate(x)
        np.testing.assert_allclose(g, finite_difference_gradient(objective, x), rtol=1e-6)

    def test_exact_inverse_hessian_diagonal(self) -> None:
        objective = SeparableQuadratic([1.0, 4.0])
        assert objective.has_diagonal
        np.testing.assert_allclose(objective.diagonal(np.zeros(2)), [0.5, 0.125])

    def test_dimension_mismatch(self) -> None:
        with pytest.raises(ValueError):
            SeparableQuadratic([1.0, 2.0]).evaluate(np.ones(3))

    @pytest.mark.parametrize("coefficients", [[], [1.0, 0.0], [-1.0]])
    def test_invalid_coefficients(self, coefficients) -> None:
        with pytest.raises(ValueError):
            SeparableQuadratic(coefficients)


class TestRosenbrock:
    """Tests for the extended Rosenbrock function."""

    def test_minimum(self) -> None:
        f, g = Rosenbrock().evaluate(np.ones(4))
        assert f == 0.0
        np.testing.assert_array_equal(g, np.zeros(4))

    def test_standard_start_value(self) -> None:
        x0 = Rosenbrock.standard_start(2)
        np.testing.assert_array_equal(x0, [-1.2, 1.0])
        f, _ = Rosenbrock().evaluate(x0)
        assert f == pytest.approx(24.2)

    def test_gradient_matches_finite_differences(self) -> None:
        objective = Rosenbrock()
        x = np.array([-1.2, 1.0, 0.5, 0.3])
        _, g = objective.evaluate(x)
        np.testing.assert_allclose(g, finite_difference_gradient(objective, x), rtol=1e-5)

    def test_odd_dimension_rejected(self) -> None:
        with pytest.raises(ValueError):
            Rosenbrock().evaluate(np.ones(3))
        with pytest.raises(ValueError):
            Rosenbrock.standard_start(3)

    def test_no_diagonal(self) -> None:
        objective = Rosenbrock()
        assert not objective.has_diagonal
        with pytest.raises(NotImplementedError):
            objective.diagonal(np.ones(2))


class TestFunctionObjective:
    """Tests for the callable adapter."""

    def test_wraps_callable(self) -> None:
        objective = FunctionObjective(lambda x: (x @ x, 2 * x), name="sphere")
        f, g = objective.evaluate(np.array([1.0, 2.0]))
        assert isinstance(f, float)
        assert f == 5.0
        assert g.dtype == float
        assert objective.get_name() == "FunctionObjective(sphere)"
        assert not objective.has_diagonal

    def test_with_diagonal(self) -> None:
        objective = FunctionObjective(
            lambda x: (x @ x, 2 * x), diagonal=lambda x: [0.5, 0.5]
        )
        assert objective.has_diagonal
        np.testing.assert_array_equal(objective.diagonal(np.ones(2)), [0.5, 0.5])

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError):
            FunctionObjective(42)


class TestRegistry:
    """Tests for the benchmark registry."""

    def test_known_problems(self) -> None:
        assert set(BENCHMARKS) == {"quadratic", "rosenbrock"}

    def test_make_benchmark(self) -> None:
        assert isinstance(make_benchmark("quadratic", 3), SeparableQuadratic)
        assert isinstance(make_benchmark("Rosenbrock", 4), Rosenbrock)

    def test_benchmark_params(self) -> None:
        objective = make_benchmark("quadratic", 2, coefficients=[1.0, 5.0])
        np.testing.assert_array_equal(objective.coefficients, [1.0, 5.0])

    def test_unknown_problem(self) -> None:
        with pytest.raises(ValueError, match="Unknown problem"):
            make_benchmark("himmelblau", 2)
        with pytest.raises(ValueError):
            standard_start("himmelblau", 2)

    def test_invalid_dimension(self) -> None:
        with pytest.raises(ValueError):
            make_benchmark("quadratic", 0)
        with pytest.raises(ValueError):
            make_benchmark("rosenbrock", 3)

    def test_standard_start(self) -> None:
        np.testing.assert_array_equal(standard_start("quadratic", 3), np.ones(3))
