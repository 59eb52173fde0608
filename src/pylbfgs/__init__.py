"""
pylbfgs - Limited-memory BFGS minimization with a More-Thuente line search.

Minimizes smooth unconstrained functions f: Rⁿ → R given their value and
gradient. Only the last m correction pairs are kept, so memory grows
linearly with n.

Main features:
- L-BFGS two-loop recursion with ys/yy or caller-supplied diagonal scaling
- Safeguarded More-Thuente line search (strong Wolfe conditions)
- Reverse-communication line search for externally driven evaluation
- Observer-based progress output and YAML configuration
- Optional FastAPI transport for built-in benchmark problems
"""

__version__ = "0.1.0"
__author__ = "pylbfgs Team"

from pylbfgs.core import (
    ImproperInputError,
    LBFGSError,
    LBFGSOptions,
    LineSearchFailedError,
    NonPositiveDiagonalError,
    NotADescentDirectionError,
)
from pylbfgs.minimizer import LBFGS, OptimizationResult, minimize
from pylbfgs.objective import FunctionObjective, Objective

__all__ = [
    "LBFGS",
    "LBFGSOptions",
    "OptimizationResult",
    "minimize",
    "Objective",
    "FunctionObjective",
    "LBFGSError",
    "ImproperInputError",
    "NonPositiveDiagonalError",
    "LineSearchFailedError",
    "NotADescentDirectionError",
]
