"""
Builder module.

YAML configuration loading and minimizer assembly.
"""

from .config_loader import (
    build_minimizer_from_config,
    build_problem,
    load_and_run,
    load_yaml,
    parse_observers,
    parse_options,
    parse_problem,
)

__all__ = [
    "load_yaml",
    "parse_options",
    "parse_problem",
    "parse_observers",
    "build_problem",
    "build_minimizer_from_config",
    "load_and_run",
]
