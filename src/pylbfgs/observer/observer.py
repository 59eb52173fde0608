"""
Observer module for monitoring minimization progress.

Provides the Observer pattern for progress printing, logging, history
recording and user callbacks during an L-BFGS run.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@dataclass
class IterationReport:
    """
    Snapshot of the minimizer after an iteration.

    Attributes:
        iteration: Completed outer iterations (0 for the starting point).
        n_evaluations: Objective evaluations so far.
        f: Function value at x.
        gnorm: Euclidean norm of g.
        step: Step length accepted by the last line search.
        x: Current iterate (a copy).
        g: Gradient at x (a copy).
        finished: Whether this is the last report of the run.
        converged: Whether the convergence test holds at x.
    """

    iteration: int
    n_evaluations: int
    f: float
    gnorm: float
    step: float
    x: NDArray[np.floating]
    g: NDArray[np.floating]
    finished: bool = False
    converged: bool = False


class Observer(ABC):
    """
    Abstract base for minimization observers (Observer Pattern).

    Observers receive a report of the starting point, one report per
    completed iteration that passes :meth:`should_observe`, and a final
    call to :meth:`finalize`.

    Attributes:
        interval: Reporting frequency. 0 reports the first and last
            iterations only, k > 0 reports iteration 1, every k-th
            iteration after it and the last one.

    Example:
        >>> observer = PrintObserver(interval=10)
        >>> if observer.should_observe(report):
        ...     observer.observe(report)
    """

    def __init__(self, interval: int = 1) -> None:
        """
        Initialize observer.

        Args:
            interval: Observation interval in iterations. Default=1
                (every iteration).
        """
        if interval < 0:
            raise ValueError(f"Interval must be >= 0, got {interval}")
        self.interval = interval

    def should_observe(self, report: IterationReport) -> bool:
        """Whether this report falls on the observer's schedule."""
        if report.finished or report.iteration <= 1:
            return True
        if self.interval == 0:
            return False
        return (report.iteration - 1) % self.interval == 0

    def begin(self, report: IterationReport) -> None:
        """Called once with the starting point, before iterating."""
        pass

    @abstractmethod
    def observe(self, report: IterationReport) -> None:
        """
        Record observation.

        Args:
            report: State after the latest iteration.
        """
        pass

    def finalize(self) -> None:
        """Called at end of minimization for cleanup."""
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get observer name."""
        pass


class CompositeObserver(Observer):
    """
    Composite observer that wraps multiple observers.

    Delegates to child observers based on their individual intervals.
    """

    def __init__(self, observers: List[Observer]) -> None:
        super().__init__(interval=1)
        self.observers = list(observers)

    def should_observe(self, report: IterationReport) -> bool:
        return True

    def begin(self, report: IterationReport) -> None:
        for obs in self.observers:
            obs.begin(report)

    def observe(self, report: IterationReport) -> None:
        """Delegate to child observers based on their intervals."""
        for obs in self.observers:
            if obs.should_observe(report):
                obs.observe(report)

    def finalize(self) -> None:
        """Finalize all child observers."""
        for obs in self.observers:
            obs.finalize()

    def get_name(self) -> str:
        names = [o.get_name() for o in self.observers]
        return f"Composite[{', '.join(names)}]"


def _format_vector(label: str, v: NDArray[np.floating]) -> str:
    values = np.array2string(np.asarray(v), precision=3, separator="  ", max_line_width=80)
    return f" {label} = {values}"


class PrintObserver(Observer):
    """
    Prints minimization progress to the console.

    Attributes:
        detail: Amount of output per report.
            0: iteration, evaluations, f, ||g|| and step only.
            1: also x and g at the starting point.
            2: also x at every report.
            3: also g at every report.
    """

    def __init__(self, interval: int = 1, detail: int = 0) -> None:
        super().__init__(interval)
        if detail not in (0, 1, 2, 3):
            raise ValueError(f"detail must be 0, 1, 2 or 3, got {detail}")
        self.detail = detail

    def begin(self, report: IterationReport) -> None:
        print(
            f"N={report.x.size:d}  "
            f"F={report.f:.6e}  "
            f"GNORM={report.gnorm:.6e}"
        )
        if self.detail >= 1:
            print(_format_vector("X", report.x))
            print(_format_vector("G", report.g))
        print(f"{'I':>6s} {'NFN':>6s} {'FUNC':>14s} {'GNORM':>12s} {'STEPLENGTH':>12s}")

    def observe(self, report: IterationReport) -> None:
        """Print iteration info."""
        print(
            f"{report.iteration:6d} "
            f"{report.n_evaluations:6d} "
            f"{report.f:14.6e} "
            f"{report.gnorm:12.4e} "
            f"{report.step:12.4e}"
        )
        if self.detail >= 2 or (report.finished and self.detail >= 1):
            print(_format_vector("X", report.x))
        if self.detail >= 3:
            print(_format_vector("G", report.g))
        if report.finished and report.converged:
            print("THE MINIMIZATION TERMINATED WITHOUT DETECTING ERRORS.")
        elif report.finished:
            print("THE MINIMIZATION STOPPED AT THE ITERATION LIMIT.")

    def get_name(self) -> str:
        return f"PrintObserver(interval={self.interval}, detail={self.detail})"


class LoggingObserver(Observer):
    """Sends progress lines to a logger instead of stdout."""

    def __init__(
        self,
        interval: int = 1,
        level: int = logging.INFO,
        log: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(interval)
        self.level = level
        self.log = log if log is not None else logger

    def begin(self, report: IterationReport) -> None:
        self.log.log(
            self.level,
            "Starting L-BFGS: n=%d f=%.6e gnorm=%.6e",
            report.x.size, report.f, report.gnorm,
        )

    def observe(self, report: IterationReport) -> None:
        self.log.log(
            self.level,
            "iter=%d nfev=%d f=%.6e gnorm=%.4e step=%.4e",
            report.iteration, report.n_evaluations, report.f, report.gnorm, report.step,
        )

    def get_name(self) -> str:
        return f"LoggingObserver(interval={self.interval})"


class HistoryObserver(Observer):
    """
    Records scalar progress values at each observed iteration.

    Tracks function value, gradient norm, step length and evaluation
    count over the run.
    """

    def __init__(self, interval: int = 1) -> None:
        super().__init__(interval)
        self.iterations: List[int] = []
        self.f_values: List[float] = []
        self.gnorms: List[float] = []
        self.steps: List[float] = []
        self.n_evaluations: List[int] = []

    def observe(self, report: IterationReport) -> None:
        """Record progress values."""
        self.iterations.append(report.iteration)
        self.f_values.append(report.f)
        self.gnorms.append(report.gnorm)
        self.steps.append(report.step)
        self.n_evaluations.append(report.n_evaluations)

    def get_name(self) -> str:
        return f"HistoryObserver(interval={self.interval})"


class CallbackObserver(Observer):
    """Calls a user function with every observed report."""

    def __init__(
        self,
        callback: Callable[[IterationReport], None],
        interval: int = 1,
    ) -> None:
        super().__init__(interval)
        if not callable(callback):
            raise ValueError(f"callback must be callable, got {type(callback).__name__}")
        self.callback = callback

    def observe(self, report: IterationReport) -> None:
        self.callback(report)

    def get_name(self) -> str:
        name = getattr(self.callback, "__name__", type(self.callback).__name__)
        return f"CallbackObserver({name}, interval={self.interval})"
