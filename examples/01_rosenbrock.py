#!/usr/bin/env python3
"""
Example 1: Rosenbrock Valley

Minimize the classic two-dimensional Rosenbrock function from the
standard start [-1.2, 1] with L-BFGS, print progress every 5 iterations
and verify the minimizer against the known solution [1, 1].

Math:
    f(x) = (1 - x₁)² + 100 (x₂ - x₁²)²

    The minimum lies at the end of a long curved valley, which makes
    steepest descent crawl. L-BFGS should need a few dozen iterations.

Usage:
    python examples/01_rosenbrock.py
"""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
from pylbfgs import LBFGS
from pylbfgs.objective import Rosenbrock
from pylbfgs.observer import HistoryObserver, PrintObserver


def main():
    objective = Rosenbrock()
    x0 = Rosenbrock.standard_start(2)
    history = HistoryObserver()

    lbfgs = LBFGS(
        corrections_kept=5,
        accuracy_tolerance=1e-8,
        observers=[PrintObserver(interval=5), history],
    )
    result = lbfgs.minimize(x0, objective)

    print()
    print(f"Status:      {result.status.value}")
    print(f"x:           {result.x}")
    print(f"f(x):        {result.f:.3e}")
    print(f"Iterations:  {result.n_iterations}")
    print(f"Evaluations: {result.n_evaluations}")

    error = float(np.linalg.norm(result.x - np.ones(2)))
    print(f"|x - x*|:    {error:.3e}")
    assert error < 1e-5, "did not reach the known minimum"

    # Every accepted step must decrease f.
    decreasing = all(b < a for a, b in zip(history.f_values, history.f_values[1:]))
    print(f"Monotone f:  {decreasing}")


if __name__ == "__main__":
    main()
