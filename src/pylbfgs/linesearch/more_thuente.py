"""
More-Thuente line search with reverse communication.

Finds a step along a descent direction that satisfies the sufficient
decrease condition

    f(x + stp*s) <= f(x) + ftol * stp * (g·s)

and the curvature condition

    |g(x + stp*s)·s| <= gtol * |g·s|.

The search never calls the objective itself. :meth:`start` and
:meth:`accept` hand back the next trial point and the caller feeds the
function value and gradient at that point back in. :meth:`search`
wraps this loop around a synchronous evaluation callable.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from pylbfgs.core.constants import (
    BISECTION_TRIGGER,
    DEFAULT_CURVATURE_TOLERANCE,
    DEFAULT_DECREASE_TOLERANCE,
    DEFAULT_MAX_EVALUATIONS,
    EXTRAPOLATION_FACTOR,
    MACHINE_EPSILON,
    STEP_MAX,
    STEP_MIN,
)
from pylbfgs.core.errors import (
    ImproperInputError,
    NotADescentDirectionError,
    line_search_failure,
)
from pylbfgs.core.status import LineSearchStatus

from .interval import Interval, safeguarded_step

logger = logging.getLogger(__name__)

Evaluator = Callable[[NDArray[np.floating]], Tuple[float, NDArray[np.floating]]]


@dataclass(frozen=True)
class LineSearchRequest:
    """
    What the line search needs next.

    Attributes:
        x: Trial point. When ``done`` is False the caller must evaluate
            the objective here and pass the result to ``accept``. When
            ``done`` is True this is the accepted point.
        step: Step length that produced x.
        done: Whether both conditions hold at x.
    """

    x: NDArray[np.floating]
    step: float
    done: bool = False


@dataclass
class LineSearchOutcome:
    """Accepted point of a completed line search."""

    x: NDArray[np.floating]
    f: float
    g: NDArray[np.floating]
    step: float
    n_evaluations: int


class MoreThuenteLineSearch:
    """
    Safeguarded line search of More and Thuente (MINPACK ``cvsrch``),
    in the slightly modified form used by Nocedal's L-BFGS.

    Each search keeps an interval of uncertainty [stx, sty] that is
    first chosen to contain a minimizer of the modified function

        ψ(stp) = f(x + stp*s) - f(x) - ftol * stp * (g·s).

    Once a step with ψ <= 0 and a non-negative derivative is found, the
    interval is chosen to contain a minimizer of f itself. Trial steps
    come from :func:`safeguarded_step`; the interval is bisected when it
    fails to shrink by a factor of 0.66 over two trials.

    An instance holds the state of one search at a time and is reset by
    :meth:`start`. It must not be shared between concurrent searches.

    Attributes:
        ftol: Sufficient decrease tolerance.
        gtol: Curvature tolerance.
        max_evaluations: Evaluations allowed per search.
        step_min: Lower bound for the step.
        step_max: Upper bound for the step.

    Example:
        >>> search = MoreThuenteLineSearch(ftol=1e-4, gtol=0.9)
        >>> request = search.start(x, f, g, direction, step=1.0)
        >>> while not request.done:
        ...     f, g = objective.evaluate(request.x)
        ...     request = search.accept(f, g)
    """

    def __init__(
        self,
        ftol: float = DEFAULT_DECREASE_TOLERANCE,
        gtol: float = DEFAULT_CURVATURE_TOLERANCE,
        max_evaluations: int = DEFAULT_MAX_EVALUATIONS,
        step_min: float = STEP_MIN,
        step_max: float = STEP_MAX,
    ) -> None:
        self.ftol = ftol
        self.gtol = gtol
        self.max_evaluations = max_evaluations
        self.step_min = step_min
        self.step_max = step_max

        self._interval: Optional[Interval] = None
        self._base: NDArray[np.floating] = np.array([])
        self._direction: NDArray[np.floating] = np.array([])
        self._trial: NDArray[np.floating] = np.array([])
        self._stp = 0.0
        self._stmin = 0.0
        self._stmax = 0.0
        self._finit = 0.0
        self._dginit = 0.0
        self._dgtest = 0.0
        self._width = 0.0
        self._width1 = 0.0
        self._stage1 = True
        self._case = 1
        self._nfev = 0
        self._pending = False

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def step(self) -> float:
        """Current trial step."""
        return self._stp

    @property
    def n_evaluations(self) -> int:
        """Evaluations fed back in the current search."""
        return self._nfev

    @property
    def interval(self) -> Optional[Interval]:
        """Interval of uncertainty of the current search."""
        return self._interval

    @property
    def initial_slope(self) -> float:
        """Directional derivative g·s at the base point."""
        return self._dginit

    # ------------------------------------------------------------------ #
    #  Reverse communication
    # ------------------------------------------------------------------ #

    def start(
        self,
        x: NDArray[np.floating],
        f: float,
        g: NDArray[np.floating],
        direction: NDArray[np.floating],
        step: float,
    ) -> LineSearchRequest:
        """
        Begin a new search from x along direction.

        Args:
            x: (n,) base point. Not modified.
            f: Function value at x.
            g: (n,) gradient at x.
            direction: (n,) search direction, already scaled.
            step: Initial trial step (> 0).

        Returns:
            Request holding the first trial point.

        Raises:
            ImproperInputError: If the inputs or tolerances are invalid.
            NotADescentDirectionError: If g·direction is not negative.
        """
        x = np.asarray(x, dtype=float)
        g = np.asarray(g, dtype=float)
        direction = np.asarray(direction, dtype=float)
        self._check_inputs(x, g, direction, step)

        dginit = float(np.dot(g, direction))
        if not dginit < 0.0:
            logger.debug("Search direction is not a descent direction (g.s = %g)", dginit)
            raise NotADescentDirectionError(
                step=step,
                n_evaluations=0,
                detail=f"g·s = {dginit}",
            )

        self._base = x.copy()
        self._direction = direction.copy()
        self._finit = float(f)
        self._dginit = dginit
        self._dgtest = self.ftol * dginit
        self._width = self.step_max - self.step_min
        self._width1 = 2.0 * self._width
        self._interval = Interval(
            stx=0.0, fx=self._finit, dx=dginit,
            sty=0.0, fy=self._finit, dy=dginit,
        )
        self._stage1 = True
        self._case = 1
        self._nfev = 0
        self._stp = float(step)

        return self._next_trial()

    def accept(self, f: float, g: NDArray[np.floating]) -> LineSearchRequest:
        """
        Feed the function value and gradient at the last trial point.

        Args:
            f: Function value at the last requested point.
            g: (n,) gradient at the last requested point.

        Returns:
            Request with either the next trial point or, when ``done``
            is True, the accepted point.

        Raises:
            LineSearchStalledError: Interval too small or rounding errors.
            MaxEvaluationsExceededError: Evaluation budget exhausted.
            StepPinnedAtBoundError: Step stuck at step_min or step_max.
            RuntimeError: If no trial point is pending.
        """
        if not self._pending:
            raise RuntimeError("No trial point is pending. Call start() first.")
        self._pending = False

        g = np.asarray(g, dtype=float)
        if g.shape != self._direction.shape:
            raise ImproperInputError(
                f"gradient must have shape {self._direction.shape}, got {g.shape}"
            )
        f = float(f)
        iv = self._interval
        stp = self._stp
        stmin, stmax = self._stmin, self._stmax

        self._nfev += 1
        dg = float(np.dot(g, self._direction))
        ftest1 = self._finit + stp * self._dgtest

        # Later tests take precedence over earlier ones.
        status = None
        if (iv.bracketed and (stp <= stmin or stp >= stmax)) or self._case == 0:
            status = LineSearchStatus.ROUNDING_ERRORS
        if stp == self.step_max and f <= ftest1 and dg <= self._dgtest:
            status = LineSearchStatus.AT_STEP_MAX
        if stp == self.step_min and (f > ftest1 or dg >= self._dgtest):
            status = LineSearchStatus.AT_STEP_MIN
        if self._nfev >= self.max_evaluations:
            status = LineSearchStatus.MAX_EVALUATIONS
        if iv.bracketed and stmax - stmin <= MACHINE_EPSILON * stmax:
            status = LineSearchStatus.INTERVAL_TOO_SMALL
        if f <= ftest1 and abs(dg) <= -self._dginit * self.gtol:
            status = LineSearchStatus.CONVERGED

        if status == LineSearchStatus.CONVERGED:
            logger.debug(
                "Line search converged: stp=%g f=%g after %d evaluation(s)",
                stp, f, self._nfev,
            )
            return LineSearchRequest(x=self._trial.copy(), step=stp, done=True)
        if status is not None:
            logger.debug("Line search failed: %s (stp=%g)", status.name, stp)
            raise line_search_failure(status, stp, self._nfev)

        # Stage 1 ends once the modified function is non-positive with
        # a non-negative derivative.
        if self._stage1 and f <= ftest1 and dg >= min(self.ftol, self.gtol) * self._dginit:
            self._stage1 = False

        # Use the modified function only while in stage 1 and after a
        # lower, but not sufficiently lower, value has been found.
        if self._stage1 and f <= iv.fx and f > ftest1:
            iv.shift(self._dgtest)
            self._stp, self._case = safeguarded_step(
                iv, stp, f - stp * self._dgtest, dg - self._dgtest, stmin, stmax
            )
            iv.shift(-self._dgtest)
        else:
            self._stp, self._case = safeguarded_step(iv, stp, f, dg, stmin, stmax)

        # Force a sufficient decrease in the size of the interval.
        if iv.bracketed:
            if iv.width >= BISECTION_TRIGGER * self._width1:
                self._stp = iv.stx + 0.5 * (iv.sty - iv.stx)
            self._width1 = self._width
            self._width = iv.width

        return self._next_trial()

    # ------------------------------------------------------------------ #
    #  Direct driver
    # ------------------------------------------------------------------ #

    def search(
        self,
        evaluate: Evaluator,
        x: NDArray[np.floating],
        f: float,
        g: NDArray[np.floating],
        direction: NDArray[np.floating],
        step: float,
    ) -> LineSearchOutcome:
        """
        Run a complete search, calling evaluate at every trial point.

        Args:
            evaluate: Callable returning (f, g) at a point.
            x: (n,) base point. Not modified.
            f: Function value at x.
            g: (n,) gradient at x.
            direction: (n,) search direction.
            step: Initial trial step.

        Returns:
            LineSearchOutcome at the accepted point.
        """
        request = self.start(x, f, g, direction, step)
        while True:
            f_trial, g_trial = evaluate(request.x)
            request = self.accept(f_trial, g_trial)
            if request.done:
                return LineSearchOutcome(
                    x=request.x,
                    f=float(f_trial),
                    g=np.asarray(g_trial, dtype=float).copy(),
                    step=request.step,
                    n_evaluations=self._nfev,
                )

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    def _next_trial(self) -> LineSearchRequest:
        iv = self._interval

        # Bounds of the present interval of uncertainty
        if iv.bracketed:
            self._stmin = min(iv.stx, iv.sty)
            self._stmax = max(iv.stx, iv.sty)
        else:
            self._stmin = iv.stx
            self._stmax = self._stp + EXTRAPOLATION_FACTOR * (self._stp - iv.stx)

        self._stp = min(max(self._stp, self.step_min), self.step_max)

        # On an unusual termination fall back to the best step so far.
        if (
            (iv.bracketed and (self._stp <= self._stmin or self._stp >= self._stmax))
            or self._nfev >= self.max_evaluations - 1
            or self._case == 0
            or (iv.bracketed and self._stmax - self._stmin <= MACHINE_EPSILON * self._stmax)
        ):
            self._stp = iv.stx

        self._trial = self._base + self._stp * self._direction
        self._pending = True
        return LineSearchRequest(x=self._trial.copy(), step=self._stp)

    def _check_inputs(
        self,
        x: NDArray[np.floating],
        g: NDArray[np.floating],
        direction: NDArray[np.floating],
        step: float,
    ) -> None:
        if x.ndim != 1 or x.size == 0:
            raise ImproperInputError(f"x must be a non-empty 1-D array, got shape {x.shape}")
        if g.shape != x.shape or direction.shape != x.shape:
            raise ImproperInputError(
                f"x, g and direction must share a shape, got "
                f"{x.shape}, {g.shape} and {direction.shape}"
            )
        if step <= 0:
            raise ImproperInputError(f"step must be positive, got {step}")
        if self.ftol < 0:
            raise ImproperInputError(f"ftol must be non-negative, got {self.ftol}")
        if self.gtol < 0:
            raise ImproperInputError(f"gtol must be non-negative, got {self.gtol}")
        if self.step_min < 0 or self.step_max < self.step_min:
            raise ImproperInputError(
                f"step bounds must satisfy 0 <= step_min <= step_max, "
                f"got [{self.step_min}, {self.step_max}]"
            )
        if self.max_evaluations <= 0:
            raise ImproperInputError(
                f"max_evaluations must be positive, got {self.max_evaluations}"
            )
