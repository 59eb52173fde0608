"""
Unit tests for builder module and the command-line runner.
"""
import numpy as np
import pytest

from pylbfgs.__main__ import main
from pylbfgs.builder import (
    build_minimizer_from_config,
    build_problem,
    load_and_run,
    load_yaml,
    parse_observers,
    parse_options,
    parse_problem,
)
from pylbfgs.core.schemas import ProblemConfig
from pylbfgs.minimizer import LBFGS
from pylbfgs.objective import Rosenbrock, SeparableQuadratic
from pylbfgs.observer import LoggingObserver, PrintObserver

ROSENBROCK_YAML = """
problem:
  name: rosenbrock
  n: 2
  x0: [-1.2, 1.0]
options:
  corrections_kept: 5
  accuracy_tolerance: 1.0e-6
output:
  interval: -1
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "rosenbrock.yaml"
    path.write_text(ROSENBROCK_YAML)
    return path


class TestConfigLoader:
    """Tests for YAML loading and parsing."""

    def test_load_yaml(self, config_file) -> None:
        config = load_yaml(config_file)
        assert config["problem"]["name"] == "rosenbrock"
        assert config["options"]["corrections_kept"] == 5

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml(path) == {}

    def test_non_mapping_rejected(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_yaml(path)

    def test_parse_options(self) -> None:
        options = parse_options({"options": {"corrections_kept": 7, "max_iterations": None}})
        assert options.corrections_kept == 7
        assert options.max_iterations is None

    def test_parse_options_unknown_key(self) -> None:
        with pytest.raises(ValueError):
            parse_options({"options": {"m": 7}})

    def test_parse_problem(self) -> None:
        problem = parse_problem({"problem": {"name": "quadratic", "n": 4}})
        assert problem.name == "quadratic"
        assert problem.n == 4

    def test_parse_observers(self) -> None:
        assert parse_observers({}) == []
        observers = parse_observers({"output": {"interval": 10, "detail": 2, "log": True}})
        assert isinstance(observers[0], PrintObserver)
        assert observers[0].interval == 10
        assert observers[0].detail == 2
        assert isinstance(observers[1], LoggingObserver)

    def test_build_problem_standard_start(self) -> None:
        objective, x0 = build_problem(ProblemConfig(name="rosenbrock", n=4))
        assert isinstance(objective, Rosenbrock)
        np.testing.assert_array_equal(x0, [-1.2, 1.0, -1.2, 1.0])

    def test_build_problem_with_params(self) -> None:
        objective, x0 = build_problem(
            ProblemConfig(name="quadratic", n=2, x0=[3.0, 4.0], params={"coefficients": [1.0, 2.0]})
        )
        assert isinstance(objective, SeparableQuadratic)
        np.testing.assert_array_equal(x0, [3.0, 4.0])

    def test_build_problem_x0_length(self) -> None:
        with pytest.raises(ValueError):
            build_problem(ProblemConfig(name="quadratic", n=3, x0=[1.0, 2.0]))

    def test_build_minimizer(self) -> None:
        minimizer = build_minimizer_from_config(
            {"options": {"corrections_kept": 4}, "output": {"interval": 0}}
        )
        assert isinstance(minimizer, LBFGS)
        assert minimizer.options.corrections_kept == 4
        assert len(minimizer.observer.observers) == 1

    def test_load_and_run(self, config_file) -> None:
        result = load_and_run(config_file)
        assert result.converged
        np.testing.assert_allclose(result.x, [1.0, 1.0], atol=1e-4)


class TestCommandLine:
    """Tests for python -m pylbfgs."""

    def test_default_run(self, capsys) -> None:
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "rosenbrock" in out
        assert "converged" in out

    def test_quadratic_with_progress(self, capsys) -> None:
        assert main(["--problem", "quadratic", "--n", "6", "--interval", "1"]) == 0
        assert "THE MINIMIZATION TERMINATED" in capsys.readouterr().out

    def test_config_file(self, config_file) -> None:
        assert main(["--config", str(config_file), "--corrections", "3"]) == 0

    def test_iteration_cap_exit_code(self, tmp_path) -> None:
        path = tmp_path / "capped.yaml"
        path.write_text("options:\n  max_iterations: 2\n")
        assert main(["--config", str(path)]) == 1

    def test_failure_exit_code(self, capsys) -> None:
        # Invalid options come back as a failed summary.
        assert main(["--tolerance", "-1"]) == 1
        assert "improper_input" in capsys.readouterr().out

    def test_curvature_tolerance_above_one_exit_code(self, tmp_path, capsys) -> None:
        path = tmp_path / "gtol.yaml"
        path.write_text("options:\n  search_curvature_tolerance: 1.5\n")
        assert main(["--config", str(path)]) == 1
        assert "improper_input" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "argv",
        [
            ["--problem", "himmelblau"],
            ["--problem", "rosenbrock", "--n", "3"],
            ["--config", "does-not-exist.yaml"],
        ],
    )
    def test_bad_arguments(self, argv) -> None:
        assert main(argv) == 2
