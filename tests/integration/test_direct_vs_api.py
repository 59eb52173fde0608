"""
Integration tests: verify that the direct service path and the FastAPI
path produce consistent outputs for the same inputs.
"""
import pytest

from pylbfgs.core.schemas import LBFGSOptions, ProblemConfig
from pylbfgs.core.service import OptimizationService

# Skip API tests if fastapi/httpx are not installed.
fastapi = pytest.importorskip("fastapi")
httpx = pytest.importorskip("httpx")

from fastapi.testclient import TestClient
from pylbfgs.api.app import create_app


# ------------------------------------------------------------------ #
#  Fixtures
# ------------------------------------------------------------------ #

ROSENBROCK_REQUEST = {
    "problem": "rosenbrock",
    "n": 2,
    "x0": [-1.2, 1.0],
    "options": {"corrections_kept": 5, "accuracy_tolerance": 1e-6},
}


@pytest.fixture
def direct_service():
    return OptimizationService()


@pytest.fixture
def api_client():
    app = create_app()
    return TestClient(app)


# ------------------------------------------------------------------ #
#  Tests
# ------------------------------------------------------------------ #


class TestHealth:
    def test_health(self, api_client):
        resp = api_client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["problems"] == ["quadratic", "rosenbrock"]

    def test_problems(self, api_client, direct_service):
        resp = api_client.get("/api/problems")
        assert resp.status_code == 200
        assert resp.json()["problems"] == direct_service.list_problems()


class TestMinimizationConsistency:
    """Minimization must give the same answer via both paths."""

    def test_minimize_api(self, api_client):
        resp = api_client.post("/api/minimize", json=ROSENBROCK_REQUEST)
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["result"]["converged"]
        assert body["result"]["x"][0] == pytest.approx(1.0, abs=1e-4)

    def test_same_result(self, direct_service, api_client):
        problem = ProblemConfig(name="rosenbrock", n=2, x0=[-1.2, 1.0])
        options = LBFGSOptions(corrections_kept=5, accuracy_tolerance=1e-6)
        direct = direct_service.run(problem, options)

        api = api_client.post("/api/minimize", json=ROSENBROCK_REQUEST).json()["result"]

        assert api["n_iterations"] == direct.n_iterations
        assert api["n_evaluations"] == direct.n_evaluations
        assert api["x"] == pytest.approx(direct.x)
        assert api["f"] == pytest.approx(direct.f)

    def test_failure_summary(self, api_client):
        resp = api_client.post("/api/minimize", json={
            "problem": "rosenbrock",
            "n": 2,
            "options": {"use_caller_diagonal": True},
        })
        assert resp.status_code == 200
        result = resp.json()["result"]
        assert not result["converged"]
        assert result["error_code"] == -3


class TestValidation:
    """Invalid requests are rejected before any work is done."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"problem": "himmelblau"},
            {"problem": "quadratic", "n": 0},
            {"problem": "quadratic", "n": 3, "x0": [1.0, 2.0]},
            {"options": {"corrections_kept": 0}},
            {"options": {"search_curvature_tolerance": 1.5}},
        ],
    )
    def test_rejected_by_model(self, api_client, payload):
        resp = api_client.post("/api/minimize", json=payload)
        assert resp.status_code == 422

    def test_rejected_by_service(self, api_client):
        resp = api_client.post("/api/minimize", json={"problem": "rosenbrock", "n": 3})
        assert resp.status_code == 400
        assert "even" in resp.json()["detail"]
