"""
Status codes reported by the line search and the minimizer.
"""
from enum import Enum, IntEnum


class LineSearchStatus(IntEnum):
    """
    Outcome of a single line search.

    The positive values keep the historical ``info`` numbering of the
    More-Thuente routine so that log output stays comparable with
    other implementations.
    """

    NOT_DESCENT = -2
    IMPROPER_INPUT = 0
    CONVERGED = 1
    INTERVAL_TOO_SMALL = 2
    MAX_EVALUATIONS = 3
    AT_STEP_MIN = 4
    AT_STEP_MAX = 5
    ROUNDING_ERRORS = 6

    def describe(self) -> str:
        """Human-readable description of this status."""
        return _LINE_SEARCH_MESSAGES[self]


_LINE_SEARCH_MESSAGES = {
    LineSearchStatus.NOT_DESCENT: "The search direction is not a descent direction",
    LineSearchStatus.IMPROPER_INPUT: "Improper input parameters",
    LineSearchStatus.CONVERGED: (
        "The sufficient decrease condition and the directional "
        "derivative condition hold"
    ),
    LineSearchStatus.INTERVAL_TOO_SMALL: (
        "Relative width of the interval of uncertainty is at most machine precision"
    ),
    LineSearchStatus.MAX_EVALUATIONS: "Number of function evaluations has reached the limit",
    LineSearchStatus.AT_STEP_MIN: "The step is at the lower bound",
    LineSearchStatus.AT_STEP_MAX: "The step is at the upper bound",
    LineSearchStatus.ROUNDING_ERRORS: (
        "Rounding errors prevent further progress; there may not be a step "
        "which satisfies the sufficient decrease and curvature conditions"
    ),
}


class TerminationStatus(Enum):
    """How a successful minimize() call ended."""

    CONVERGED = "converged"
    ALREADY_CONVERGED = "already_converged"
    MAX_ITERATIONS = "max_iterations"
