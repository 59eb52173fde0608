"""
Pydantic request / response models for the pylbfgs REST API.

All validation, field constraints, and serialisation logic lives here.
Routes import these models and never define their own.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from pylbfgs.core.constants import (
    DEFAULT_ACCURACY_TOLERANCE,
    DEFAULT_CORRECTIONS_KEPT,
    DEFAULT_CURVATURE_TOLERANCE,
    DEFAULT_DECREASE_TOLERANCE,
    DEFAULT_MAX_EVALUATIONS,
    DEFAULT_MAX_ITERATIONS,
)
from pylbfgs.objective import BENCHMARKS


# ------------------------------------------------------------------ #
#  Request models
# ------------------------------------------------------------------ #


class OptionsPayload(BaseModel):
    """Minimizer options."""

    corrections_kept: int = Field(DEFAULT_CORRECTIONS_KEPT, gt=0, description="Correction pairs kept (m)")
    accuracy_tolerance: float = Field(DEFAULT_ACCURACY_TOLERANCE, ge=0.0, description="Convergence tolerance")
    search_decrease_tolerance: float = Field(DEFAULT_DECREASE_TOLERANCE, ge=0.0, description="Line search ftol")
    search_curvature_tolerance: float = Field(DEFAULT_CURVATURE_TOLERANCE, gt=0.0, lt=1.0, description="Line search gtol")
    max_evaluations_per_search: int = Field(DEFAULT_MAX_EVALUATIONS, gt=0, description="Evaluations per line search")
    use_caller_diagonal: bool = Field(False, description="Use the problem's exact inverse Hessian diagonal")
    max_iterations: Optional[int] = Field(DEFAULT_MAX_ITERATIONS, gt=0, description="Iteration cap")
    initial_step: Optional[float] = Field(None, gt=0.0, description="First trial step")


class MinimizeRequest(BaseModel):
    """Payload for ``POST /minimize``."""

    problem: str = Field("rosenbrock", description="Built-in problem name")
    n: int = Field(2, gt=0, description="Problem dimension")
    x0: Optional[List[float]] = Field(None, description="Starting point (default: standard start)")
    params: Dict[str, Any] = Field(default_factory=dict, description="Problem parameters")
    options: OptionsPayload = Field(default_factory=OptionsPayload)

    @field_validator("problem")
    @classmethod
    def problem_must_be_known(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in BENCHMARKS:
            raise ValueError(
                f"Unknown problem '{v}'. Choose from: {', '.join(sorted(BENCHMARKS))}"
            )
        return v_lower

    @field_validator("x0")
    @classmethod
    def x0_matches_n(cls, v: Optional[List[float]], info) -> Optional[List[float]]:
        n = info.data.get("n")
        if v is not None and n is not None and len(v) != n:
            raise ValueError(f"x0 has {len(v)} entries, expected n={n}")
        return v


# ------------------------------------------------------------------ #
#  Response models
# ------------------------------------------------------------------ #


class ProblemInfo(BaseModel):
    """One built-in problem."""

    name: str
    description: str


class ProblemsResponse(BaseModel):
    """Response for ``GET /problems``."""

    ok: bool = True
    problems: List[ProblemInfo]


class SummaryPayload(BaseModel):
    """Outcome of a minimization."""

    problem: str
    n: int
    converged: bool
    status: str
    message: str
    error_code: int
    x: Optional[List[float]] = None
    f: Optional[float] = None
    gnorm: Optional[float] = None
    n_iterations: int
    n_evaluations: int
    f_history: List[float]


class MinimizeResponse(BaseModel):
    """Response for ``POST /minimize``."""

    ok: bool = True
    result: SummaryPayload


class HealthResponse(BaseModel):
    """Response for ``GET /health``."""

    status: str = "ok"
    version: str
    problems: List[str] = Field(default_factory=list)
