"""
Backend service layer for pylbfgs.

Framework-independent orchestration consumed by both the command-line
runner and the FastAPI transport layer. No references to argparse,
FastAPI, or any transport concern belong here.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from pylbfgs.builder.config_loader import build_problem
from pylbfgs.core.errors import LBFGSError
from pylbfgs.core.schemas import LBFGSOptions, OptimizationSummary, ProblemConfig
from pylbfgs.minimizer import LBFGS
from pylbfgs.objective import BENCHMARKS
from pylbfgs.observer import Observer

logger = logging.getLogger(__name__)

_DESCRIPTIONS = {
    "quadratic": "Separable quadratic Σ aᵢ xᵢ² (minimum at the origin)",
    "rosenbrock": "Extended Rosenbrock, even n (minimum at [1, ..., 1])",
}


class OptimizationService:
    """Stateless L-BFGS backend. Safe to share between requests."""

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def list_problems(self) -> List[Dict[str, Any]]:
        """Names and descriptions of the built-in problems."""
        return [
            {"name": name, "description": _DESCRIPTIONS.get(name, "")}
            for name in sorted(BENCHMARKS)
        ]

    # ------------------------------------------------------------------ #
    #  Run
    # ------------------------------------------------------------------ #

    def run(
        self,
        problem: ProblemConfig,
        options: Optional[LBFGSOptions] = None,
        observers: Optional[Sequence[Observer]] = None,
    ) -> OptimizationSummary:
        """Minimize a built-in problem.

        Minimizer failures become a summary with ``converged=False``,
        the failure kind as ``status`` and its error code. Invalid
        problem definitions raise :class:`ValueError`.
        """
        options = options if options is not None else LBFGSOptions()
        objective, x0 = build_problem(problem)

        try:
            minimizer = LBFGS.from_options(options, observers=observers)
            result = minimizer.minimize(x0, objective)
        except LBFGSError as exc:
            logger.warning("Minimization of %s failed: %s", problem.name, exc)
            return OptimizationSummary(
                problem=problem.name,
                n=problem.n,
                converged=False,
                status=exc.status_name,
                message=str(exc),
                error_code=exc.code,
            )

        return OptimizationSummary(
            problem=problem.name,
            n=problem.n,
            converged=result.converged,
            status=result.status.value,
            message=result.message,
            x=result.x.tolist(),
            f=result.f,
            gnorm=result.gnorm,
            n_iterations=result.n_iterations,
            n_evaluations=result.n_evaluations,
            f_history=list(result.f_history),
        )
