"""
Shared option and payload schemas.

Defines the data structures that the minimizer, the configuration
loader, the service layer and the FastAPI transport all consume and
produce. Keeping them in one place prevents drift between the call paths.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_ACCURACY_TOLERANCE,
    DEFAULT_CORRECTIONS_KEPT,
    DEFAULT_CURVATURE_TOLERANCE,
    DEFAULT_DECREASE_TOLERANCE,
    DEFAULT_MAX_EVALUATIONS,
    DEFAULT_MAX_ITERATIONS,
    GTOL_FLOOR,
    GTOL_RESET,
)
from .errors import ImproperInputError

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
#  Input schemas
# ------------------------------------------------------------------ #


@dataclass
class LBFGSOptions:
    """
    Tunable parameters of the L-BFGS minimizer.

    Attributes:
        corrections_kept: Number of correction pairs kept (m). Values of
            3 to 7 are recommended.
        accuracy_tolerance: Stop when ||g|| <= tol * max(1, ||x||).
        search_decrease_tolerance: Sufficient decrease tolerance (ftol).
        search_curvature_tolerance: Curvature tolerance (gtol). Values
            below 1e-4 are reset to 0.9. Must be less than 1.
        max_evaluations_per_search: Objective evaluations allowed in a
            single line search.
        use_caller_diagonal: Ask the objective for the inverse Hessian
            diagonal at every iteration instead of the ys/yy scaling.
        max_iterations: Outer iteration cap, or None for no cap.
        initial_step: First trial step of the first line search. None
            means 1 / ||g0||.
    """

    corrections_kept: int = DEFAULT_CORRECTIONS_KEPT
    accuracy_tolerance: float = DEFAULT_ACCURACY_TOLERANCE
    search_decrease_tolerance: float = DEFAULT_DECREASE_TOLERANCE
    search_curvature_tolerance: float = DEFAULT_CURVATURE_TOLERANCE
    max_evaluations_per_search: int = DEFAULT_MAX_EVALUATIONS
    use_caller_diagonal: bool = False
    max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS
    initial_step: Optional[float] = None

    def __post_init__(self) -> None:
        if self.search_curvature_tolerance < GTOL_FLOOR:
            logger.warning(
                "gtol is less than %g (got %g). It has been reset to %g.",
                GTOL_FLOOR,
                self.search_curvature_tolerance,
                GTOL_RESET,
            )
            self.search_curvature_tolerance = GTOL_RESET

    def validate(self) -> None:
        """
        Check the options for consistency.

        Raises:
            ImproperInputError: If any option is out of range or the
                tolerances are not ordered ftol < gtol < 1.
        """
        if self.corrections_kept <= 0:
            raise ImproperInputError(
                f"corrections_kept must be positive, got {self.corrections_kept}"
            )
        if self.accuracy_tolerance < 0:
            raise ImproperInputError(
                f"accuracy_tolerance must be non-negative, got {self.accuracy_tolerance}"
            )
        if self.search_decrease_tolerance < 0:
            raise ImproperInputError(
                "search_decrease_tolerance must be non-negative, "
                f"got {self.search_decrease_tolerance}"
            )
        if self.search_curvature_tolerance <= self.search_decrease_tolerance:
            raise ImproperInputError(
                "search_curvature_tolerance must exceed search_decrease_tolerance, "
                f"got gtol={self.search_curvature_tolerance}, "
                f"ftol={self.search_decrease_tolerance}"
            )
        if self.search_curvature_tolerance >= 1:
            raise ImproperInputError(
                "search_curvature_tolerance must be less than 1, "
                f"got {self.search_curvature_tolerance}"
            )
        if self.max_evaluations_per_search <= 0:
            raise ImproperInputError(
                "max_evaluations_per_search must be positive, "
                f"got {self.max_evaluations_per_search}"
            )
        if self.max_iterations is not None and self.max_iterations <= 0:
            raise ImproperInputError(
                f"max_iterations must be positive or None, got {self.max_iterations}"
            )
        if self.initial_step is not None and not self.initial_step > 0:
            raise ImproperInputError(
                f"initial_step must be positive, got {self.initial_step}"
            )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LBFGSOptions":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(
                f"Unknown option(s): {', '.join(sorted(unknown))}. "
                f"Choose from: {', '.join(sorted(known))}"
            )
        max_iterations = d.get("max_iterations", DEFAULT_MAX_ITERATIONS)
        initial_step = d.get("initial_step")
        return cls(
            corrections_kept=int(d.get("corrections_kept", DEFAULT_CORRECTIONS_KEPT)),
            accuracy_tolerance=float(
                d.get("accuracy_tolerance", DEFAULT_ACCURACY_TOLERANCE)
            ),
            search_decrease_tolerance=float(
                d.get("search_decrease_tolerance", DEFAULT_DECREASE_TOLERANCE)
            ),
            search_curvature_tolerance=float(
                d.get("search_curvature_tolerance", DEFAULT_CURVATURE_TOLERANCE)
            ),
            max_evaluations_per_search=int(
                d.get("max_evaluations_per_search", DEFAULT_MAX_EVALUATIONS)
            ),
            use_caller_diagonal=bool(d.get("use_caller_diagonal", False)),
            max_iterations=None if max_iterations is None else int(max_iterations),
            initial_step=None if initial_step is None else float(initial_step),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProblemConfig:
    """Which built-in problem to minimize and where to start."""

    name: str = "rosenbrock"
    n: int = 2
    x0: Optional[List[float]] = None
    params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProblemConfig":
        x0 = d.get("x0")
        return cls(
            name=str(d.get("name", "rosenbrock")).lower(),
            n=int(d.get("n", len(x0) if x0 is not None else 2)),
            x0=None if x0 is None else [float(v) for v in x0],
            params=dict(d.get("params", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "n": self.n,
            "x0": self.x0,
            "params": self.params,
        }


# ------------------------------------------------------------------ #
#  Output schemas
# ------------------------------------------------------------------ #


@dataclass
class OptimizationSummary:
    """Transport form of a finished (or failed) minimization."""

    problem: str
    n: int
    converged: bool
    status: str
    message: str
    error_code: int = 0
    x: Optional[List[float]] = None
    f: Optional[float] = None
    gnorm: Optional[float] = None
    n_iterations: int = 0
    n_evaluations: int = 0
    f_history: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "problem": self.problem,
            "n": self.n,
            "converged": self.converged,
            "status": self.status,
            "message": self.message,
            "error_code": self.error_code,
            "x": self.x,
            "f": self.f,
            "gnorm": self.gnorm,
            "n_iterations": self.n_iterations,
            "n_evaluations": self.n_evaluations,
            "f_history": self.f_history,
        }
