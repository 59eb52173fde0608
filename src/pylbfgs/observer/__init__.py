"""
Observer module.

Progress reporting hooks for the minimizer:
- PrintObserver: Tabular console output
- LoggingObserver: Progress through the logging module
- HistoryObserver: In-memory progress record
- CallbackObserver: User-supplied function
"""

from .observer import (
    CallbackObserver,
    CompositeObserver,
    HistoryObserver,
    IterationReport,
    LoggingObserver,
    Observer,
    PrintObserver,
)

__all__ = [
    "IterationReport",
    "Observer",
    "CompositeObserver",
    "PrintObserver",
    "LoggingObserver",
    "HistoryObserver",
    "CallbackObserver",
]
