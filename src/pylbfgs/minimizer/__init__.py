"""
Minimizer module.

Provides the unconstrained minimization algorithms:
- Minimizer: Template for the outer iteration loop
- LBFGS: Limited-memory BFGS quasi-Newton method
- CorrectionHistory: Ring buffer of correction pairs
"""

from .history import CorrectionHistory, CorrectionPair
from .lbfgs import LBFGS, minimize
from .minimizer import Minimizer, OptimizationResult

__all__ = [
    "Minimizer",
    "OptimizationResult",
    "CorrectionHistory",
    "CorrectionPair",
    "LBFGS",
    "minimize",
]
