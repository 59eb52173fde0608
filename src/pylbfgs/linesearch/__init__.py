"""
Line search module.

Provides the safeguarded step-length search used by the minimizer:
- MoreThuenteLineSearch: Reverse-communication More-Thuente search
- Interval / safeguarded_step: Interval-of-uncertainty bookkeeping
"""

from .interval import Interval, safeguarded_step
from .more_thuente import LineSearchOutcome, LineSearchRequest, MoreThuenteLineSearch

__all__ = [
    "Interval",
    "safeguarded_step",
    "LineSearchOutcome",
    "LineSearchRequest",
    "MoreThuenteLineSearch",
]
