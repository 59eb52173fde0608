"""
Correction pair storage for limited-memory quasi-Newton updates.
"""
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

import numpy as np
from numpy.typing import NDArray

from pylbfgs.core.errors import ImproperInputError, NoCurvatureError


@dataclass(frozen=True)
class CorrectionPair:
    """
    One curvature pair.

    Attributes:
        s: Step taken, x_{k+1} - x_k.
        y: Gradient change, g_{k+1} - g_k.
        rho: 1 / (y·s).
        iteration: Outer iteration that produced the pair.
    """

    s: NDArray[np.floating]
    y: NDArray[np.floating]
    rho: float
    iteration: int

    @property
    def ys(self) -> float:
        return 1.0 / self.rho


class CorrectionHistory:
    """
    Ring buffer of the most recent correction pairs.

    Holds at most ``capacity`` pairs. Appending to a full history drops
    the oldest pair.

    Example:
        >>> history = CorrectionHistory(capacity=5)
        >>> history.append(s, y, iteration=1)
        >>> for pair in history.newest_first():
        ...     ...
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ImproperInputError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._pairs: Deque[CorrectionPair] = deque(maxlen=capacity)

    def append(
        self,
        s: NDArray[np.floating],
        y: NDArray[np.floating],
        iteration: int,
    ) -> CorrectionPair:
        """
        Store a new pair, evicting the oldest one when full.

        Raises:
            NoCurvatureError: If y·s is zero.
        """
        ys = float(np.dot(y, s))
        if ys == 0.0:
            raise NoCurvatureError(iteration)
        pair = CorrectionPair(
            s=np.array(s, dtype=float),
            y=np.array(y, dtype=float),
            rho=1.0 / ys,
            iteration=iteration,
        )
        self._pairs.append(pair)
        return pair

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[CorrectionPair]:
        return self.oldest_first()

    def newest_first(self) -> Iterator[CorrectionPair]:
        return reversed(self._pairs)

    def oldest_first(self) -> Iterator[CorrectionPair]:
        return iter(self._pairs)

    @property
    def newest(self) -> Optional[CorrectionPair]:
        return self._pairs[-1] if self._pairs else None

    @property
    def iterations(self) -> List[int]:
        """Iterations of the stored pairs, oldest first."""
        return [pair.iteration for pair in self._pairs]

    def clear(self) -> None:
        self._pairs.clear()
