"""
Configuration loader for YAML-based minimization setup.

Provides functions to load a problem, minimizer options and progress
output settings from YAML files.
"""
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pylbfgs.core.schemas import LBFGSOptions, ProblemConfig
from pylbfgs.minimizer import LBFGS, OptimizationResult
from pylbfgs.objective import Objective, make_benchmark, standard_start
from pylbfgs.observer import LoggingObserver, Observer, PrintObserver


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        path: Path to YAML file.

    Returns:
        Dictionary with configuration.
    """
    try:
        import yaml
    except ImportError:
        raise ImportError("PyYAML is required: pip install pyyaml")

    with open(path, "r") as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Top level of {path} must be a mapping, got {type(config).__name__}")
    return config


def parse_options(config: Dict[str, Any]) -> LBFGSOptions:
    """Parse minimizer options from config."""
    return LBFGSOptions.from_dict(config.get("options") or {})


def parse_problem(config: Dict[str, Any]) -> ProblemConfig:
    """Parse the problem section from config."""
    return ProblemConfig.from_dict(config.get("problem") or {})


def parse_observers(config: Dict[str, Any]) -> List[Observer]:
    """
    Parse progress output settings from config.

    ``output.interval`` < 0 disables printing, 0 prints the first and
    last iterations, k prints every k-th iteration. ``output.detail``
    is 0-3. ``output.log: true`` adds a LoggingObserver.
    """
    output = config.get("output") or {}
    observers: List[Observer] = []

    interval = int(output.get("interval", -1))
    if interval >= 0:
        observers.append(
            PrintObserver(interval=interval, detail=int(output.get("detail", 0)))
        )
    if output.get("log", False):
        observers.append(LoggingObserver(interval=max(interval, 0)))
    return observers


def build_problem(problem: ProblemConfig) -> Tuple[Objective, NDArray[np.floating]]:
    """
    Create the objective and starting point for a problem section.

    Raises:
        ValueError: If the problem name is unknown or x0 does not have
            n entries.
    """
    objective = make_benchmark(problem.name, problem.n, **problem.params)
    if problem.x0 is None:
        x0 = standard_start(problem.name, problem.n)
    else:
        x0 = np.asarray(problem.x0, dtype=float)
        if x0.size != problem.n:
            raise ValueError(f"x0 has {x0.size} entries, expected n={problem.n}")
    return objective, x0


def build_minimizer_from_config(config: Dict[str, Any]) -> LBFGS:
    """
    Build a configured L-BFGS minimizer from a configuration dictionary.

    Args:
        config: Configuration dictionary (typically from YAML).

    Returns:
        LBFGS minimizer with its observers attached.

    Example config:
        problem:
          name: rosenbrock
          n: 2
          x0: [-1.2, 1.0]
        options:
          corrections_kept: 5
          accuracy_tolerance: 1.0e-6
        output:
          interval: 10
          detail: 0
    """
    options = parse_options(config)
    return LBFGS.from_options(options, observers=parse_observers(config))


def load_and_run(path: Union[str, Path]) -> OptimizationResult:
    """
    Load configuration from YAML and run the minimization.

    Args:
        path: Path to YAML configuration file.

    Returns:
        OptimizationResult of the run.
    """
    config = load_yaml(path)
    objective, x0 = build_problem(parse_problem(config))
    minimizer = build_minimizer_from_config(config)
    return minimizer.minimize(x0, objective)
