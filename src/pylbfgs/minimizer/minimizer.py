"""
Abstract base class for unconstrained minimizers.

This module provides the Minimizer ABC that owns the outer iteration
loop (evaluation counting, convergence test, iteration cap, observer
notification) and the OptimizationResult dataclass.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylbfgs.core.constants import DEFAULT_ACCURACY_TOLERANCE, DEFAULT_MAX_ITERATIONS
from pylbfgs.core.errors import ImproperInputError
from pylbfgs.core.status import TerminationStatus
from pylbfgs.objective import Objective
from pylbfgs.observer import CompositeObserver, IterationReport, Observer

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    """
    Result of a minimization run.

    Attributes:
        x: Final iterate.
        f: Function value at x.
        g: Gradient at x.
        gnorm: Euclidean norm of g.
        n_iterations: Completed outer iterations.
        n_evaluations: Objective evaluations, line searches included.
        converged: Whether the convergence test holds at x.
        status: Why the run stopped.
        message: Human-readable description of the outcome.
        f_history: Function value at the start and after each iteration.
        gnorm_history: Gradient norm at the start and after each iteration.
    """

    x: NDArray[np.floating]
    f: float
    g: NDArray[np.floating]
    gnorm: float
    n_iterations: int
    n_evaluations: int
    converged: bool
    status: TerminationStatus
    message: str = ""
    f_history: List[float] = field(default_factory=list)
    gnorm_history: List[float] = field(default_factory=list)


class Minimizer(ABC):
    """
    Abstract base for minimization algorithms (Strategy + Template Method).

    The minimize() method implements the convergence loop (template),
    while subclasses provide the algorithm-specific _step() logic.

    A run stops when

        ||g|| / max(1, ||x||) <= accuracy_tolerance

    or when max_iterations iterations have been taken.

    Instances keep per-run state and must not be shared by concurrent
    minimize() calls.

    Attributes:
        accuracy_tolerance: Convergence threshold on the scaled gradient norm.
        max_iterations: Iteration cap, or None for no cap.
        observer: Composite of the observers notified during a run.

    Example:
        >>> from pylbfgs.minimizer import LBFGS
        >>> minimizer = LBFGS(corrections_kept=5)
        >>> result = minimizer.minimize(x0, objective)
        >>> print(result.converged, result.f)
    """

    def __init__(
        self,
        accuracy_tolerance: float = DEFAULT_ACCURACY_TOLERANCE,
        max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
        observers: Optional[Sequence[Observer]] = None,
    ) -> None:
        """
        Initialize minimizer.

        Args:
            accuracy_tolerance: Convergence threshold (>= 0).
            max_iterations: Maximum number of iterations, or None.
            observers: Progress observers.

        Raises:
            ImproperInputError: If any parameter is out of range.
        """
        if accuracy_tolerance < 0:
            raise ImproperInputError(
                f"accuracy_tolerance must be non-negative, got {accuracy_tolerance}"
            )
        if max_iterations is not None and max_iterations <= 0:
            raise ImproperInputError(
                f"max_iterations must be positive or None, got {max_iterations}"
            )

        self.accuracy_tolerance = accuracy_tolerance
        self.max_iterations = max_iterations
        self.observer = CompositeObserver(list(observers or []))

        self._objective: Optional[Objective] = None
        self._n_evaluations = 0

    def minimize(self, x0: ArrayLike, objective: Objective) -> OptimizationResult:
        """
        Minimize the objective starting from x0 (template method).

        Process:
        1. Validate the problem (no evaluation yet)
        2. Evaluate at x0 and check if already converged
        3. Call _initialize() for algorithm-specific setup
        4. Loop: _step() -> notify observers -> check convergence
        5. Return OptimizationResult

        Args:
            x0: (n,) starting point. Not modified.
            objective: Function to minimize.

        Returns:
            OptimizationResult with convergence info and history.

        Raises:
            ImproperInputError: If x0 is empty or not one-dimensional.
            LBFGSError: On any algorithm failure.
        """
        x = np.array(x0, dtype=float)
        if x.ndim != 1 or x.size == 0:
            raise ImproperInputError(
                f"x0 must be a non-empty 1-D array, got shape {x.shape}"
            )
        self._validate_problem(x, objective)

        self._objective = objective
        self._n_evaluations = 0

        f, g = self._evaluate(x)
        gnorm = float(np.linalg.norm(g))
        f_history = [f]
        gnorm_history = [gnorm]
        self.observer.begin(
            IterationReport(
                iteration=0,
                n_evaluations=self._n_evaluations,
                f=f,
                gnorm=gnorm,
                step=0.0,
                x=x.copy(),
                g=g.copy(),
            )
        )

        if self._converged(x, gnorm):
            self.observer.finalize()
            logger.info("Already converged at the starting point (gnorm=%.3e)", gnorm)
            return OptimizationResult(
                x=x,
                f=f,
                g=g,
                gnorm=gnorm,
                n_iterations=0,
                n_evaluations=self._n_evaluations,
                converged=True,
                status=TerminationStatus.ALREADY_CONVERGED,
                message="Already converged (gradient below tolerance)",
                f_history=f_history,
                gnorm_history=gnorm_history,
            )

        converged = False
        iteration = 0
        try:
            # Algorithm-specific initialization
            self._initialize(x, f, g)

            while self.max_iterations is None or iteration < self.max_iterations:
                iteration += 1
                x, f, g, step = self._step(x, f, g, iteration)
                gnorm = float(np.linalg.norm(g))
                f_history.append(f)
                gnorm_history.append(gnorm)

                converged = self._converged(x, gnorm)
                finished = converged or iteration == self.max_iterations
                self.observer.observe(
                    IterationReport(
                        iteration=iteration,
                        n_evaluations=self._n_evaluations,
                        f=f,
                        gnorm=gnorm,
                        step=step,
                        x=x.copy(),
                        g=g.copy(),
                        finished=finished,
                        converged=converged,
                    )
                )
                if converged:
                    break
        finally:
            self.observer.finalize()

        if converged:
            status = TerminationStatus.CONVERGED
            message = f"Converged after {iteration} iterations"
            logger.info("%s (f=%.6e, gnorm=%.3e)", message, f, gnorm)
        else:
            status = TerminationStatus.MAX_ITERATIONS
            message = f"Did not converge after {iteration} iterations (gnorm={gnorm:.2e})"
            logger.warning(message)

        return OptimizationResult(
            x=x,
            f=f,
            g=g,
            gnorm=gnorm,
            n_iterations=iteration,
            n_evaluations=self._n_evaluations,
            converged=converged,
            status=status,
            message=message,
            f_history=f_history,
            gnorm_history=gnorm_history,
        )

    @property
    def n_evaluations(self) -> int:
        """Objective evaluations in the current or last run."""
        return self._n_evaluations

    def _evaluate(self, x: NDArray[np.floating]) -> Tuple[float, NDArray[np.floating]]:
        """Evaluate the objective and count the call."""
        self._n_evaluations += 1
        f, g = self._objective.evaluate(x)
        g = np.asarray(g, dtype=float)
        if g.shape != x.shape:
            raise ImproperInputError(
                f"gradient must have shape {x.shape}, got {g.shape}"
            )
        return float(f), g

    def _converged(self, x: NDArray[np.floating], gnorm: float) -> bool:
        xnorm = float(np.linalg.norm(x))
        return gnorm / max(1.0, xnorm) <= self.accuracy_tolerance

    def _validate_problem(self, x: NDArray[np.floating], objective: Objective) -> None:
        """
        Optional algorithm-specific checks before the first evaluation.

        Args:
            x: Starting point.
            objective: Function to minimize.
        """
        pass

    def _initialize(
        self,
        x: NDArray[np.floating],
        f: float,
        g: NDArray[np.floating],
    ) -> None:
        """
        Optional algorithm-specific initialization.

        Called once before the iteration loop begins.

        Args:
            x: Starting point.
            f: Function value at x.
            g: Gradient at x.
        """
        pass

    @abstractmethod
    def _step(
        self,
        x: NDArray[np.floating],
        f: float,
        g: NDArray[np.floating],
        iteration: int,
    ) -> Tuple[NDArray[np.floating], float, NDArray[np.floating], float]:
        """
        Perform one iteration (algorithm-specific).

        Args:
            x: Current iterate. Must not be modified.
            f: Function value at x.
            g: Gradient at x.
            iteration: 1-based index of this iteration.

        Returns:
            Tuple of (new_x, new_f, new_g, step).
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get human-readable name of this minimizer."""
        pass
