"""
Command-line runner: python -m pylbfgs

Minimizes a built-in problem and prints the outcome.

Usage::

    python -m pylbfgs                                   # Rosenbrock, n=2
    python -m pylbfgs --problem quadratic --n 100 --interval 10
    python -m pylbfgs --config examples/rosenbrock.yaml --verbose
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import pylbfgs
from pylbfgs.builder import load_yaml, parse_observers
from pylbfgs.core.schemas import LBFGSOptions, OptimizationSummary, ProblemConfig
from pylbfgs.core.service import OptimizationService

logger = logging.getLogger("pylbfgs")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m pylbfgs",
        description=f"pylbfgs {pylbfgs.__version__}: minimize a built-in problem with L-BFGS.",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--problem", help="Problem name (quadratic, rosenbrock)")
    parser.add_argument("--n", type=int, help="Problem dimension")
    parser.add_argument("--corrections", type=int, help="Correction pairs kept (m)")
    parser.add_argument("--tolerance", type=float, help="Convergence tolerance (eps)")
    parser.add_argument(
        "--interval",
        type=int,
        help="Print progress every k iterations (0: first and last only)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def merge_arguments(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Overlay command-line arguments on a configuration dictionary."""
    merged = {key: dict(value or {}) for key, value in config.items()}
    problem = merged.setdefault("problem", {})
    options = merged.setdefault("options", {})
    output = merged.setdefault("output", {})

    if args.problem is not None:
        problem["name"] = args.problem
    if args.n is not None:
        if problem.get("x0") is not None and len(problem["x0"]) != args.n:
            problem.pop("x0")
        problem["n"] = args.n
    if args.corrections is not None:
        options["corrections_kept"] = args.corrections
    if args.tolerance is not None:
        options["accuracy_tolerance"] = args.tolerance
    if args.interval is not None:
        output["interval"] = args.interval
    return merged


def print_summary(summary: OptimizationSummary) -> None:
    print(f"Problem:      {summary.problem} (n={summary.n})")
    print(f"Status:       {summary.status}")
    print(f"Message:      {summary.message}")
    if summary.error_code:
        print(f"Error code:   {summary.error_code}")
    if summary.f is not None:
        print(f"f(x):         {summary.f:.10e}")
        print(f"||g||:        {summary.gnorm:.4e}")
        print(f"Iterations:   {summary.n_iterations}")
        print(f"Evaluations:  {summary.n_evaluations}")
    if summary.x is not None and len(summary.x) <= 10:
        print("x:            [" + ", ".join(f"{v:.8f}" for v in summary.x) + "]")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_yaml(args.config) if args.config else {}
        config = merge_arguments(config, args)
        problem = ProblemConfig.from_dict(config["problem"])
        options = LBFGSOptions.from_dict(config["options"])
        observers = parse_observers(config)
        summary = OptimizationService().run(problem, options, observers=observers)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    print_summary(summary)
    return 0 if summary.converged else 1


if __name__ == "__main__":
    sys.exit(main())
