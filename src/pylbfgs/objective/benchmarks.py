"""
Built-in benchmark objectives.

Classic smooth test problems with analytic gradients, used by the
command-line runner, the API and the test suite.
"""
from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .objective import Objective


class SeparableQuadratic(Objective):
    """
    Separable quadratic bowl.

    f(x) = Σ aᵢ xᵢ²,   g = 2 a x

    The minimum is the origin. The exact inverse Hessian diagonal
    1 / (2 aᵢ) is available through :meth:`diagonal`.

    Attributes:
        coefficients: (n,) positive curvature coefficients aᵢ.

    Example:
        >>> bowl = SeparableQuadratic([1.0, 10.0, 100.0])
        >>> f, g = bowl.evaluate(np.ones(3))
    """

    def __init__(self, coefficients: Sequence[float]) -> None:
        coefficients = np.asarray(coefficients, dtype=float)
        if coefficients.ndim != 1 or coefficients.size == 0:
            raise ValueError("coefficients must be a non-empty 1-D sequence")
        if np.any(coefficients <= 0):
            raise ValueError(f"coefficients must be positive, got {coefficients}")
        self.coefficients = coefficients

    def evaluate(
        self, x: NDArray[np.floating]
    ) -> Tuple[float, NDArray[np.floating]]:
        self._check_size(x)
        f = float(np.sum(self.coefficients * x * x))
        return f, 2.0 * self.coefficients * x

    def diagonal(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        self._check_size(x)
        return 0.5 / self.coefficients

    def get_name(self) -> str:
        return f"SeparableQuadratic(n={self.coefficients.size})"

    @staticmethod
    def standard_start(n: int) -> NDArray[np.floating]:
        return np.ones(n)

    def _check_size(self, x: NDArray[np.floating]) -> None:
        if x.shape != self.coefficients.shape:
            raise ValueError(
                f"x must have shape {self.coefficients.shape}, got {x.shape}"
            )


class Rosenbrock(Objective):
    """
    Extended Rosenbrock function.

    f(x) = Σᵢ (1 - x₂ᵢ)² + 100 (x₂ᵢ₊₁ - x₂ᵢ²)²   (0-based pairs)

    For n = 2 this is the classic banana valley with its minimum at
    [1, 1]. The dimension must be even.
    """

    def __init__(self, scale: float = 100.0) -> None:
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self.scale = scale

    def evaluate(
        self, x: NDArray[np.floating]
    ) -> Tuple[float, NDArray[np.floating]]:
        if x.ndim != 1 or x.size % 2 != 0:
            raise ValueError(f"Rosenbrock needs an even-length vector, got {x.shape}")
        odd = x[0::2]
        even = x[1::2]
        t1 = 1.0 - odd
        t2 = even - odd * odd
        f = float(np.sum(t1 * t1 + self.scale * t2 * t2))

        g = np.empty_like(x, dtype=float)
        g[0::2] = -2.0 * t1 - 4.0 * self.scale * odd * t2
        g[1::2] = 2.0 * self.scale * t2
        return f, g

    def get_name(self) -> str:
        return f"Rosenbrock(scale={self.scale})"

    @staticmethod
    def standard_start(n: int) -> NDArray[np.floating]:
        if n % 2 != 0:
            raise ValueError(f"Rosenbrock needs an even dimension, got {n}")
        x0 = np.empty(n)
        x0[0::2] = -1.2
        x0[1::2] = 1.0
        return x0


def _make_quadratic(n: int, coefficients: Optional[Sequence[float]] = None) -> Objective:
    if coefficients is None:
        coefficients = np.ones(n)
    if len(coefficients) != n:
        raise ValueError(f"Expected {n} coefficients, got {len(coefficients)}")
    return SeparableQuadratic(coefficients)


def _make_rosenbrock(n: int, scale: float = 100.0) -> Objective:
    if n % 2 != 0:
        raise ValueError(f"Rosenbrock needs an even dimension, got {n}")
    return Rosenbrock(scale=scale)


BENCHMARKS: Dict[str, Tuple[Callable[..., Objective], Callable[[int], NDArray]]] = {
    "quadratic": (_make_quadratic, SeparableQuadratic.standard_start),
    "rosenbrock": (_make_rosenbrock, Rosenbrock.standard_start),
}


def make_benchmark(name: str, n: int, **params) -> Objective:
    """
    Create a built-in objective by name.

    Args:
        name: One of ``BENCHMARKS``.
        n: Problem dimension.
        **params: Problem-specific parameters (``coefficients`` for
            quadratic, ``scale`` for rosenbrock).

    Returns:
        Configured Objective.

    Raises:
        ValueError: If the name is unknown or the parameters are invalid.
    """
    key = name.lower()
    if key not in BENCHMARKS:
        raise ValueError(
            f"Unknown problem '{name}'. Choose from: {', '.join(sorted(BENCHMARKS))}"
        )
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")
    factory, _ = BENCHMARKS[key]
    return factory(n, **params)


def standard_start(name: str, n: int) -> NDArray[np.floating]:
    """Conventional starting point for a built-in problem."""
    key = name.lower()
    if key not in BENCHMARKS:
        raise ValueError(
            f"Unknown problem '{name}'. Choose from: {', '.join(sorted(BENCHMARKS))}"
        )
    _, start = BENCHMARKS[key]
    return start(n)
