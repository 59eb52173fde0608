"""
Abstract base class for objective functions.

This module provides the Objective ABC that every function handed to
the minimizer must implement. The caller always supplies the gradient;
the inverse Hessian diagonal is optional.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

ValueAndGradient = Callable[[NDArray[np.floating]], Tuple[float, NDArray[np.floating]]]
DiagonalFunction = Callable[[NDArray[np.floating]], NDArray[np.floating]]


class Objective(ABC):
    """
    Abstract base for functions to be minimized.

    Implementations return the function value and its gradient at a
    point. Objectives that can estimate the diagonal of the inverse
    Hessian override :meth:`diagonal` and report ``has_diagonal``.

    Example:
        >>> class Sphere(Objective):
        ...     def evaluate(self, x):
        ...         return float(x @ x), 2.0 * x
        ...
        ...     def get_name(self):
        ...         return "Sphere"
    """

    @abstractmethod
    def evaluate(
        self, x: NDArray[np.floating]
    ) -> Tuple[float, NDArray[np.floating]]:
        """
        Compute the function value and gradient at x.

        Must not modify x.

        Args:
            x: (n,) parameter vector.

        Returns:
            Tuple of (f, g) with g of shape (n,).
        """
        pass

    def diagonal(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        """
        Estimate the diagonal of the inverse Hessian at x.

        Only called when the minimizer runs with ``use_caller_diagonal``.
        Every element must be positive.

        Args:
            x: (n,) parameter vector.

        Returns:
            (n,) diagonal estimate.
        """
        raise NotImplementedError(
            f"{self.get_name()} does not provide an inverse Hessian diagonal"
        )

    @property
    def has_diagonal(self) -> bool:
        """Whether :meth:`diagonal` is implemented."""
        return type(self).diagonal is not Objective.diagonal

    @abstractmethod
    def get_name(self) -> str:
        """Get human-readable name of this objective."""
        pass


class FunctionObjective(Objective):
    """
    Adapts plain callables to the Objective interface.

    Attributes:
        fun: Callable returning (f, g) at x.
        diagonal_fun: Optional callable returning the inverse Hessian
            diagonal at x.

    Example:
        >>> objective = FunctionObjective(lambda x: (float(x @ x), 2.0 * x))
        >>> f, g = objective.evaluate(np.ones(3))
    """

    def __init__(
        self,
        fun: ValueAndGradient,
        diagonal: Optional[DiagonalFunction] = None,
        name: Optional[str] = None,
    ) -> None:
        if not callable(fun):
            raise TypeError(f"fun must be callable, got {type(fun).__name__}")
        if diagonal is not None and not callable(diagonal):
            raise TypeError(
                f"diagonal must be callable, got {type(diagonal).__name__}"
            )
        self.fun = fun
        self.diagonal_fun = diagonal
        self._name = name or getattr(fun, "__name__", "function")

    def evaluate(
        self, x: NDArray[np.floating]
    ) -> Tuple[float, NDArray[np.floating]]:
        f, g = self.fun(x)
        return float(f), np.asarray(g, dtype=float)

    def diagonal(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        if self.diagonal_fun is None:
            return super().diagonal(x)
        return np.asarray(self.diagonal_fun(x), dtype=float)

    @property
    def has_diagonal(self) -> bool:
        return self.diagonal_fun is not None

    def get_name(self) -> str:
        return f"FunctionObjective({self._name})"
