"""
Numerical constants and option defaults for the L-BFGS minimizer.

This module provides the machine-dependent bounds used by the line
search and the default values of every tunable option.
"""
from typing import Final

import numpy as np

# Lower bound for the line-search step. Only badly scaled problems
# need a different value.
STEP_MIN: Final[float] = 1e-20

# Upper bound for the line-search step
STEP_MAX: Final[float] = 1e20

# Machine precision for float64
MACHINE_EPSILON: Final[float] = float(np.finfo(np.float64).eps)

# Unbracketed search window: stp + EXTRAPOLATION_FACTOR * (stp - stx)
EXTRAPOLATION_FACTOR: Final[float] = 4.0

# Required relative shrink of the interval of uncertainty over two
# trials; also the bracket safeguard stx + 0.66 * (sty - stx)
BISECTION_TRIGGER: Final[float] = 0.66

# Curvature tolerances below the floor are reset to GTOL_RESET
GTOL_FLOOR: Final[float] = 1e-4
GTOL_RESET: Final[float] = 0.9

# Option defaults
DEFAULT_CORRECTIONS_KEPT: Final[int] = 3
DEFAULT_ACCURACY_TOLERANCE: Final[float] = 1e-6
DEFAULT_DECREASE_TOLERANCE: Final[float] = 1e-4
DEFAULT_CURVATURE_TOLERANCE: Final[float] = 0.9
DEFAULT_MAX_EVALUATIONS: Final[int] = 20
DEFAULT_MAX_ITERATIONS: Final[int] = 10000
