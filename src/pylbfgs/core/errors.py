"""
Exception hierarchy for the L-BFGS minimizer.

Every failure path raises a distinct subclass of :class:`LBFGSError`.
The ``code`` attribute carries the historical L-BFGS error code:

- ``-1``: the line search failed (see :class:`LineSearchFailedError`), or
  an accepted step gave no curvature (:class:`NoCurvatureError`)
- ``-2``: a caller-supplied diagonal element is not positive
- ``-3``: improper input parameters
"""
from typing import Optional

from .status import LineSearchStatus


class LBFGSError(Exception):
    """Base class for all minimizer failures."""

    code: int = -1

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def status_name(self) -> str:
        """Short machine-friendly name of the failure kind."""
        return "error"


class ImproperInputError(LBFGSError, ValueError):
    """Malformed configuration or dimensions, detected before iterating."""

    code = -3

    @property
    def status_name(self) -> str:
        return "improper_input"


class NonPositiveDiagonalError(LBFGSError):
    """
    A caller-supplied inverse Hessian diagonal element is not positive.

    Attributes:
        index: Position of the first offending element.
        value: The offending value.
    """

    code = -2

    def __init__(self, index: int, value: float) -> None:
        super().__init__(
            f"The {index}-th diagonal element of the inverse Hessian "
            f"approximation is not positive (got {value})"
        )
        self.index = index
        self.value = value

    @property
    def status_name(self) -> str:
        return "non_positive_diagonal"


class NoCurvatureError(LBFGSError):
    """
    An accepted step produced y·s == 0, so no correction pair can be formed.

    Attributes:
        iteration: Outer iteration that produced the step.
    """

    code = -1

    def __init__(self, iteration: int) -> None:
        super().__init__(
            f"y·s is zero at iteration {iteration}, "
            "the correction pair carries no curvature"
        )
        self.iteration = iteration

    @property
    def status_name(self) -> str:
        return "no_curvature"


class LineSearchFailedError(LBFGSError):
    """
    The line search terminated without satisfying both conditions.

    Attributes:
        status: Specific line-search outcome.
        step: Step length at termination.
        n_evaluations: Objective evaluations spent in this search.
    """

    code = -1
    default_status = LineSearchStatus.IMPROPER_INPUT

    def __init__(
        self,
        status: Optional[LineSearchStatus] = None,
        step: float = 0.0,
        n_evaluations: int = 0,
        detail: str = "",
    ) -> None:
        status = self.default_status if status is None else status
        message = f"Line search failed (info = {int(status)}): {status.describe()}"
        if detail:
            message = f"{message}. {detail}"
        super().__init__(message)
        self.status = status
        self.step = step
        self.n_evaluations = n_evaluations

    @property
    def status_name(self) -> str:
        return self.status.name.lower()


class NotADescentDirectionError(LineSearchFailedError):
    """The directional derivative at the base point is not negative."""

    default_status = LineSearchStatus.NOT_DESCENT


class LineSearchStalledError(LineSearchFailedError):
    """The interval of uncertainty collapsed or rounding errors stalled progress."""

    default_status = LineSearchStatus.ROUNDING_ERRORS


class MaxEvaluationsExceededError(LineSearchFailedError):
    """The per-search evaluation budget was exhausted."""

    default_status = LineSearchStatus.MAX_EVALUATIONS


class StepPinnedAtBoundError(LineSearchFailedError):
    """
    The step was driven to the lower or upper step bound.

    Attributes:
        bound: ``"lower"`` or ``"upper"``.
    """

    default_status = LineSearchStatus.AT_STEP_MIN

    @property
    def bound(self) -> str:
        return "upper" if self.status == LineSearchStatus.AT_STEP_MAX else "lower"


_FAILURES = {
    LineSearchStatus.NOT_DESCENT: NotADescentDirectionError,
    LineSearchStatus.IMPROPER_INPUT: LineSearchFailedError,
    LineSearchStatus.INTERVAL_TOO_SMALL: LineSearchStalledError,
    LineSearchStatus.ROUNDING_ERRORS: LineSearchStalledError,
    LineSearchStatus.MAX_EVALUATIONS: MaxEvaluationsExceededError,
    LineSearchStatus.AT_STEP_MIN: StepPinnedAtBoundError,
    LineSearchStatus.AT_STEP_MAX: StepPinnedAtBoundError,
}


def line_search_failure(
    status: LineSearchStatus,
    step: float,
    n_evaluations: int,
    detail: str = "",
) -> LineSearchFailedError:
    """Build the exception matching a terminal line-search status."""
    if status == LineSearchStatus.CONVERGED:
        raise ValueError("CONVERGED is not a failure status")
    error_cls = _FAILURES[status]
    return error_cls(status=status, step=step, n_evaluations=n_evaluations, detail=detail)
