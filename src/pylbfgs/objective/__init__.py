"""
Objective module.

Provides the interface between the minimizer and the function being
minimized:
- Objective: Abstract base (value, gradient, optional diagonal)
- FunctionObjective: Adapter for plain callables
- SeparableQuadratic, Rosenbrock: Built-in benchmark problems
"""

from .benchmarks import (
    BENCHMARKS,
    Rosenbrock,
    SeparableQuadratic,
    make_benchmark,
    standard_start,
)
from .objective import FunctionObjective, Objective

__all__ = [
    "Objective",
    "FunctionObjective",
    "SeparableQuadratic",
    "Rosenbrock",
    "BENCHMARKS",
    "make_benchmark",
    "standard_start",
]
