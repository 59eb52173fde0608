"""
Core module.

Constants, status codes, the exception hierarchy and the shared
option/payload schemas. The service layer lives in
:mod:`pylbfgs.core.service` and is imported from there.
"""

from .constants import (
    DEFAULT_ACCURACY_TOLERANCE,
    DEFAULT_CORRECTIONS_KEPT,
    DEFAULT_CURVATURE_TOLERANCE,
    DEFAULT_DECREASE_TOLERANCE,
    DEFAULT_MAX_EVALUATIONS,
    DEFAULT_MAX_ITERATIONS,
    MACHINE_EPSILON,
    STEP_MAX,
    STEP_MIN,
)
from .errors import (
    ImproperInputError,
    LBFGSError,
    LineSearchFailedError,
    LineSearchStalledError,
    MaxEvaluationsExceededError,
    NoCurvatureError,
    NonPositiveDiagonalError,
    NotADescentDirectionError,
    StepPinnedAtBoundError,
    line_search_failure,
)
from .schemas import LBFGSOptions, OptimizationSummary, ProblemConfig
from .status import LineSearchStatus, TerminationStatus

__all__ = [
    "DEFAULT_ACCURACY_TOLERANCE",
    "DEFAULT_CORRECTIONS_KEPT",
    "DEFAULT_CURVATURE_TOLERANCE",
    "DEFAULT_DECREASE_TOLERANCE",
    "DEFAULT_MAX_EVALUATIONS",
    "DEFAULT_MAX_ITERATIONS",
    "MACHINE_EPSILON",
    "STEP_MAX",
    "STEP_MIN",
    "LBFGSError",
    "ImproperInputError",
    "NonPositiveDiagonalError",
    "NoCurvatureError",
    "LineSearchFailedError",
    "NotADescentDirectionError",
    "LineSearchStalledError",
    "MaxEvaluationsExceededError",
    "StepPinnedAtBoundError",
    "line_search_failure",
    "LBFGSOptions",
    "ProblemConfig",
    "OptimizationSummary",
    "LineSearchStatus",
    "TerminationStatus",
]
