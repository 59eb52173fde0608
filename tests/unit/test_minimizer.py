"""
Unit tests for minimizer module.
"""
import numpy as np
import pytest

from pylbfgs.core.errors import (
    ImproperInputError,
    LBFGSError,
    LineSearchFailedError,
    NoCurvatureError,
    NonPositiveDiagonalError,
    NotADescentDirectionError,
)
from pylbfgs.core.schemas import LBFGSOptions
from pylbfgs.core.status import TerminationStatus
from pylbfgs.minimizer import (
    LBFGS,
    CorrectionHistory,
    Minimizer,
    OptimizationResult,
    minimize,
)
from pylbfgs.objective import FunctionObjective, Rosenbrock, SeparableQuadratic
from pylbfgs.observer import HistoryObserver


class CountingObjective(FunctionObjective):
    """
    Wraps a callable and counts evaluations.

    Used to verify that invalid input is rejected before the objective
    is ever called.
    """

    def __init__(self, fun, diagonal=None):
        super().__init__(fun, diagonal=diagonal, name="counting")
        self.calls = 0

    def evaluate(self, x):
        self.calls += 1
        return super().evaluate(x)


def sphere(x: np.ndarray) -> tuple:
    return float(x @ x), 2.0 * x


# =============================================================================
# Correction history
# =============================================================================


class TestCorrectionHistory:
    """Tests for the ring buffer of correction pairs."""

    def test_keeps_most_recent_pairs(self) -> None:
        history = CorrectionHistory(capacity=3)
        for k in range(1, 6):
            history.append(np.full(2, float(k)), np.ones(2), iteration=k)

        assert len(history) == 3
        assert history.iterations == [3, 4, 5]
        assert [p.iteration for p in history.newest_first()] == [5, 4, 3]
        assert [p.iteration for p in history.oldest_first()] == [3, 4, 5]
        assert history.newest.iteration == 5

    def test_rho_is_inverse_curvature(self) -> None:
        history = CorrectionHistory(capacity=2)
        pair = history.append(np.array([1.0, 2.0]), np.array([3.0, 0.5]), iteration=1)
        assert pair.rho == pytest.approx(1.0 / 4.0)
        assert pair.ys == pytest.approx(4.0)

    def test_stores_copies(self) -> None:
        history = CorrectionHistory(capacity=2)
        s = np.array([1.0, 1.0])
        history.append(s, np.ones(2), iteration=1)
        s[0] = 99.0
        assert history.newest.s[0] == 1.0

    def test_zero_curvature_rejected(self) -> None:
        history = CorrectionHistory(capacity=2)
        with pytest.raises(NoCurvatureError) as exc_info:
            history.append(np.array([1.0, 0.0]), np.array([0.0, 1.0]), iteration=4)

        err = exc_info.value
        assert isinstance(err, LBFGSError)
        assert not isinstance(err, ValueError)
        assert err.iteration == 4
        assert err.status_name == "no_curvature"
        assert len(history) == 0

    def test_clear(self) -> None:
        history = CorrectionHistory(capacity=2)
        history.append(np.ones(2), np.ones(2), iteration=1)
        history.clear()
        assert len(history) == 0
        assert history.newest is None

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ImproperInputError):
            CorrectionHistory(capacity=0)


# =============================================================================
# L-BFGS
# =============================================================================


class TestLBFGS:
    """Tests for the L-BFGS minimizer."""

    def test_is_minimizer(self) -> None:
        lbfgs = LBFGS()
        assert isinstance(lbfgs, Minimizer)
        assert lbfgs.get_name() == "LBFGS(m=3)"

    def test_separable_quadratic(self) -> None:
        objective = SeparableQuadratic([1.0, 10.0, 100.0])
        result = LBFGS(corrections_kept=5).minimize(np.ones(3), objective)

        assert isinstance(result, OptimizationResult)
        assert result.converged
        assert result.status == TerminationStatus.CONVERGED
        np.testing.assert_allclose(result.x, np.zeros(3), atol=1e-6)
        assert result.gnorm <= 1e-6
        assert result.n_iterations <= 20

    def test_sphere_n10_m3(self) -> None:
        """Σ xᵢ² in ten dimensions converges within 20 iterations."""
        result = LBFGS(corrections_kept=3, accuracy_tolerance=1e-5).minimize(
            np.ones(10), FunctionObjective(sphere)
        )

        assert result.converged
        assert result.n_iterations <= 20
        assert np.linalg.norm(result.x) < 1e-5

    def test_rosenbrock(self) -> None:
        result = LBFGS(corrections_kept=5).minimize([-1.2, 1.0], Rosenbrock())

        assert result.converged
        np.testing.assert_allclose(result.x, [1.0, 1.0], atol=1e-4)
        assert result.f < 1e-6

    def test_rosenbrock_default_options(self) -> None:
        result = LBFGS().minimize([-1.2, 1.0], Rosenbrock())

        assert result.converged
        assert result.status == TerminationStatus.CONVERGED
        np.testing.assert_allclose(result.x, [1.0, 1.0], atol=1e-4)
        assert result.f < 1e-6

    def test_extended_rosenbrock(self) -> None:
        n = 10
        result = LBFGS(corrections_kept=7).minimize(
            Rosenbrock.standard_start(n), Rosenbrock()
        )
        assert result.converged
        np.testing.assert_allclose(result.x, np.ones(n), atol=1e-4)

    def test_strict_descent(self) -> None:
        """Every accepted step lowers the function value."""
        history = HistoryObserver()
        result = LBFGS(observers=[history]).minimize([-1.2, 1.0], Rosenbrock())

        f_values = result.f_history
        assert all(b < a for a, b in zip(f_values, f_values[1:]))
        assert history.f_values == f_values[1:]
        assert history.iterations == list(range(1, result.n_iterations + 1))

    def test_counts_every_evaluation(self) -> None:
        objective = CountingObjective(sphere)
        result = LBFGS().minimize(np.ones(4), objective)
        assert result.n_evaluations == objective.calls

    def test_does_not_mutate_x0(self) -> None:
        x0 = np.array([-1.2, 1.0])
        LBFGS().minimize(x0, Rosenbrock())
        np.testing.assert_array_equal(x0, [-1.2, 1.0])

    def test_already_converged(self) -> None:
        objective = CountingObjective(sphere)
        result = LBFGS().minimize(np.zeros(3), objective)

        assert result.converged
        assert result.status == TerminationStatus.ALREADY_CONVERGED
        assert result.n_iterations == 0
        assert result.n_evaluations == 1

    def test_iteration_cap(self) -> None:
        result = LBFGS(max_iterations=3).minimize([-1.2, 1.0], Rosenbrock())

        assert not result.converged
        assert result.status == TerminationStatus.MAX_ITERATIONS
        assert result.n_iterations == 3
        assert len(result.f_history) == 4

    def test_no_iteration_cap(self) -> None:
        result = LBFGS(max_iterations=None).minimize([-1.2, 1.0], Rosenbrock())
        assert result.converged

    def test_instance_is_reusable(self) -> None:
        lbfgs = LBFGS()
        first = lbfgs.minimize([-1.2, 1.0], Rosenbrock())
        second = lbfgs.minimize([-1.2, 1.0], Rosenbrock())
        assert first.n_evaluations == second.n_evaluations
        np.testing.assert_array_equal(first.x, second.x)


class TestCallerDiagonal:
    """Tests for the caller-supplied inverse Hessian diagonal."""

    def test_exact_diagonal_solves_quadratic_in_one_step(self) -> None:
        objective = SeparableQuadratic([1.0, 1e3, 1e6])
        result = LBFGS(use_caller_diagonal=True, initial_step=1.0).minimize(
            np.ones(3), objective
        )

        assert result.converged
        assert result.n_iterations == 1
        assert result.f == pytest.approx(0.0, abs=1e-20)

    def test_non_positive_element_reports_index(self) -> None:
        objective = FunctionObjective(
            sphere, diagonal=lambda x: np.array([1.0, -2.0, 3.0])
        )
        with pytest.raises(NonPositiveDiagonalError) as exc_info:
            LBFGS(use_caller_diagonal=True).minimize(np.ones(3), objective)

        assert exc_info.value.index == 1
        assert exc_info.value.value == -2.0
        assert exc_info.value.code == -2

    def test_zero_element_rejected(self) -> None:
        objective = FunctionObjective(sphere, diagonal=lambda x: np.array([0.0, 1.0]))
        with pytest.raises(NonPositiveDiagonalError) as exc_info:
            LBFGS(use_caller_diagonal=True).minimize(np.ones(2), objective)
        assert exc_info.value.index == 0

    def test_missing_diagonal(self) -> None:
        objective = CountingObjective(sphere)
        with pytest.raises(ImproperInputError):
            LBFGS(use_caller_diagonal=True).minimize(np.ones(2), objective)
        assert objective.calls == 0


class TestImproperInput:
    """Invalid input is rejected before any evaluation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"corrections_kept": 0},
            {"accuracy_tolerance": -1.0},
            {"search_decrease_tolerance": -1e-4},
            {"search_decrease_tolerance": 0.95, "search_curvature_tolerance": 0.9},
            {"search_curvature_tolerance": 1.0},
            {"search_curvature_tolerance": 1.5},
            {"max_evaluations_per_search": 0},
            {"max_iterations": 0},
            {"initial_step": 0.0},
        ],
    )
    def test_invalid_options(self, kwargs) -> None:
        with pytest.raises(ImproperInputError):
            LBFGS(**kwargs)

    def test_zero_corrections_through_functional_api(self) -> None:
        objective = CountingObjective(sphere)
        with pytest.raises(ImproperInputError) as exc_info:
            minimize(np.ones(3), objective, LBFGSOptions(corrections_kept=0))

        assert exc_info.value.code == -3
        assert objective.calls == 0

    def test_empty_start(self) -> None:
        objective = CountingObjective(sphere)
        with pytest.raises(ImproperInputError):
            LBFGS().minimize(np.array([]), objective)
        assert objective.calls == 0

    def test_improper_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            LBFGS(corrections_kept=-1)


class TestFailures:
    """Failure paths surface as distinct exceptions."""

    def test_nan_gradient_is_not_descent(self) -> None:
        x0 = np.array([1.0, 2.0])
        objective = FunctionObjective(lambda x: (float(x @ x), np.full_like(x, np.nan)))

        with pytest.raises(NotADescentDirectionError):
            LBFGS().minimize(x0, objective)
        np.testing.assert_array_equal(x0, [1.0, 2.0])

    def test_linear_objective_fails_inside_taxonomy(self) -> None:
        """A linear function has no minimizer; the line search never settles."""
        c = np.array([1.0, -2.0])
        objective = FunctionObjective(lambda x: (float(c @ x), c.copy()))

        with pytest.raises(LineSearchFailedError) as exc_info:
            LBFGS().minimize(np.zeros(2), objective)
        assert exc_info.value.code == -1

    def test_objective_errors_propagate(self) -> None:
        def broken(x):
            raise RuntimeError("evaluation failed")

        with pytest.raises(RuntimeError, match="evaluation failed"):
            LBFGS().minimize(np.ones(2), FunctionObjective(broken))

    def test_gradient_shape_checked(self) -> None:
        objective = FunctionObjective(lambda x: (0.0, np.ones(5)))
        with pytest.raises(ImproperInputError):
            LBFGS().minimize(np.ones(2), objective)


class TestFunctionalMinimize:
    """Tests for the minimize() entry point."""

    def test_plain_callable(self) -> None:
        result = minimize(np.ones(10), sphere)
        assert result.converged
        assert np.linalg.norm(result.x) < 1e-5

    def test_options_are_applied(self) -> None:
        options = LBFGSOptions(max_iterations=1)
        result = minimize([-1.2, 1.0], Rosenbrock(), options)
        assert result.n_iterations == 1
        assert result.status == TerminationStatus.MAX_ITERATIONS

    def test_observers_are_notified(self) -> None:
        history = HistoryObserver()
        result = minimize([-1.2, 1.0], Rosenbrock(), observers=[history])
        assert len(history.iterations) == result.n_iterations
