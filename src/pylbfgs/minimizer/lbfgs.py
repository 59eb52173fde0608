"""
Limited-memory BFGS minimizer.

Implements the method of Liu and Nocedal: the inverse Hessian is never
stored, it is applied through the two-loop recursion over the last m
correction pairs. Steps are chosen by the More-Thuente line search.

Reference: D. C. Liu and J. Nocedal, "On the limited memory BFGS method
for large scale optimization", Math. Programming B 45 (1989) 503-528.
"""
import logging
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylbfgs.core.constants import (
    DEFAULT_ACCURACY_TOLERANCE,
    DEFAULT_CORRECTIONS_KEPT,
    DEFAULT_CURVATURE_TOLERANCE,
    DEFAULT_DECREASE_TOLERANCE,
    DEFAULT_MAX_EVALUATIONS,
    DEFAULT_MAX_ITERATIONS,
)
from pylbfgs.core.errors import ImproperInputError, NonPositiveDiagonalError
from pylbfgs.core.schemas import LBFGSOptions
from pylbfgs.linesearch import MoreThuenteLineSearch
from pylbfgs.objective import FunctionObjective, Objective
from pylbfgs.observer import Observer

from .history import CorrectionHistory
from .minimizer import Minimizer, OptimizationResult

logger = logging.getLogger(__name__)


class LBFGS(Minimizer):
    """
    L-BFGS quasi-Newton minimizer.

    Each iteration computes d = -H g with the two-loop recursion, where
    the initial matrix H0 is either the scalar (y·s)/(y·y) of the newest
    pair or a diagonal supplied by the objective. The first iteration
    uses d = -H0 g with a trial step 1/||g||; later iterations try a unit
    step first.

    Attributes:
        options: Validated LBFGSOptions.
        history: Correction pairs of the current run.
        line_search: Line search used for every iteration.

    Example:
        >>> from pylbfgs.objective import Rosenbrock
        >>> lbfgs = LBFGS(corrections_kept=5, accuracy_tolerance=1e-8)
        >>> result = lbfgs.minimize([-1.2, 1.0], Rosenbrock())
    """

    def __init__(
        self,
        corrections_kept: int = DEFAULT_CORRECTIONS_KEPT,
        accuracy_tolerance: float = DEFAULT_ACCURACY_TOLERANCE,
        search_decrease_tolerance: float = DEFAULT_DECREASE_TOLERANCE,
        search_curvature_tolerance: float = DEFAULT_CURVATURE_TOLERANCE,
        max_evaluations_per_search: int = DEFAULT_MAX_EVALUATIONS,
        use_caller_diagonal: bool = False,
        max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
        initial_step: Optional[float] = None,
        observers: Optional[Sequence[Observer]] = None,
    ) -> None:
        """
        Initialize L-BFGS minimizer.

        Args:
            corrections_kept: Number of correction pairs kept (m > 0).
            accuracy_tolerance: Convergence threshold.
            search_decrease_tolerance: Line search ftol.
            search_curvature_tolerance: Line search gtol. Values below
                1e-4 are reset to 0.9. Must be less than 1.
            max_evaluations_per_search: Evaluations allowed per line search.
            use_caller_diagonal: Take H0 from objective.diagonal().
            max_iterations: Iteration cap, or None.
            initial_step: First trial step of the first iteration, or None
                for 1/||g0||.
            observers: Progress observers.

        Raises:
            ImproperInputError: If any option is out of range.
        """
        options = LBFGSOptions(
            corrections_kept=corrections_kept,
            accuracy_tolerance=accuracy_tolerance,
            search_decrease_tolerance=search_decrease_tolerance,
            search_curvature_tolerance=search_curvature_tolerance,
            max_evaluations_per_search=max_evaluations_per_search,
            use_caller_diagonal=use_caller_diagonal,
            max_iterations=max_iterations,
            initial_step=initial_step,
        )
        options.validate()
        super().__init__(
            accuracy_tolerance=options.accuracy_tolerance,
            max_iterations=options.max_iterations,
            observers=observers,
        )
        self.options = options
        self.history = CorrectionHistory(options.corrections_kept)
        self.line_search = MoreThuenteLineSearch(
            ftol=options.search_decrease_tolerance,
            gtol=options.search_curvature_tolerance,
            max_evaluations=options.max_evaluations_per_search,
        )

    @classmethod
    def from_options(
        cls,
        options: LBFGSOptions,
        observers: Optional[Sequence[Observer]] = None,
    ) -> "LBFGS":
        """Create a minimizer from an LBFGSOptions instance."""
        return cls(**options.to_dict(), observers=observers)

    # ------------------------------------------------------------------ #
    #  Template hooks
    # ------------------------------------------------------------------ #

    def _validate_problem(self, x: NDArray[np.floating], objective: Objective) -> None:
        if self.options.use_caller_diagonal and not objective.has_diagonal:
            raise ImproperInputError(
                f"use_caller_diagonal is set but {objective.get_name()} "
                "does not provide a diagonal"
            )

    def _initialize(
        self,
        x: NDArray[np.floating],
        f: float,
        g: NDArray[np.floating],
    ) -> None:
        self.history.clear()

    def _step(
        self,
        x: NDArray[np.floating],
        f: float,
        g: NDArray[np.floating],
        iteration: int,
    ) -> Tuple[NDArray[np.floating], float, NDArray[np.floating], float]:
        if iteration == 1:
            direction = -self._initial_diagonal(x) * g
            if self.options.initial_step is not None:
                step = self.options.initial_step
            else:
                step = 1.0 / float(np.linalg.norm(g))
        else:
            direction = self._two_loop_recursion(x, g)
            step = 1.0

        outcome = self.line_search.search(self._evaluate, x, f, g, direction, step)

        s = outcome.step * direction
        y = outcome.g - g
        self.history.append(s, y, iteration)
        logger.debug(
            "iter=%d step=%.3e f=%.6e nfev=%d",
            iteration, outcome.step, outcome.f, outcome.n_evaluations,
        )
        return outcome.x, outcome.f, outcome.g, outcome.step

    def get_name(self) -> str:
        return f"LBFGS(m={self.options.corrections_kept})"

    # ------------------------------------------------------------------ #
    #  Search direction
    # ------------------------------------------------------------------ #

    def _two_loop_recursion(
        self,
        x: NDArray[np.floating],
        g: NDArray[np.floating],
    ) -> NDArray[np.floating]:
        """
        Compute d = -H g from the stored correction pairs.

        First loop, newest to oldest:  αᵢ = ρᵢ sᵢ·q,  q -= αᵢ yᵢ
        Scale:                         r = H0 q
        Second loop, oldest to newest: βᵢ = ρᵢ yᵢ·r,  r += sᵢ (αᵢ - βᵢ)
        """
        q = -g
        alphas = []
        for pair in self.history.newest_first():
            alpha = pair.rho * float(np.dot(pair.s, q))
            q = q - alpha * pair.y
            alphas.append(alpha)

        r = self._scaling_diagonal(x) * q

        for pair, alpha in zip(self.history.oldest_first(), reversed(alphas)):
            beta = pair.rho * float(np.dot(pair.y, r))
            r = r + (alpha - beta) * pair.s
        return r

    def _initial_diagonal(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        if self.options.use_caller_diagonal:
            return self._caller_diagonal(x)
        return np.ones_like(x)

    def _scaling_diagonal(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        if self.options.use_caller_diagonal:
            return self._caller_diagonal(x)
        newest = self.history.newest
        if newest is None:
            return np.ones_like(x)
        yy = float(np.dot(newest.y, newest.y))
        return np.full_like(x, newest.ys / yy)

    def _caller_diagonal(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        diag = np.asarray(self._objective.diagonal(x), dtype=float)
        if diag.shape != x.shape:
            raise ImproperInputError(
                f"diagonal must have shape {x.shape}, got {diag.shape}"
            )
        bad = np.flatnonzero(~(diag > 0.0))
        if bad.size:
            index = int(bad[0])
            raise NonPositiveDiagonalError(index, float(diag[index]))
        return diag


ObjectiveLike = Union[
    Objective,
    Callable[[NDArray[np.floating]], Tuple[float, NDArray[np.floating]]],
]


def minimize(
    x0: ArrayLike,
    objective: ObjectiveLike,
    options: Optional[LBFGSOptions] = None,
    observers: Optional[Sequence[Observer]] = None,
) -> OptimizationResult:
    """
    Minimize an objective with L-BFGS.

    Args:
        x0: (n,) starting point. Not modified.
        objective: Objective instance, or a callable returning (f, g).
        options: Minimizer options. Defaults to LBFGSOptions().
        observers: Progress observers.

    Returns:
        OptimizationResult of the run.

    Raises:
        ImproperInputError: On invalid options or dimensions, before any
            evaluation.
        NonPositiveDiagonalError: If a caller diagonal element is <= 0.
        LineSearchFailedError: If a line search fails.

    Example:
        >>> result = minimize(np.ones(10), lambda x: (x @ x, 2 * x))
        >>> result.converged
        True
    """
    if options is None:
        options = LBFGSOptions()
    if not isinstance(objective, Objective):
        objective = FunctionObjective(objective)
    minimizer = LBFGS.from_options(options, observers=observers)
    return minimizer.minimize(x0, objective)
