"""
API routes: thin adapters that delegate to :class:`OptimizationService`.
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from pylbfgs.api.models import MinimizeRequest, MinimizeResponse, ProblemsResponse
from pylbfgs.core.schemas import LBFGSOptions, ProblemConfig
from pylbfgs.core.service import OptimizationService

router = APIRouter()

# The service is stateless, one instance serves every request.
_service = OptimizationService()


def get_service() -> OptimizationService:
    return _service


# ------------------------------------------------------------------ #
#  Endpoints
# ------------------------------------------------------------------ #


@router.get("/problems", response_model=ProblemsResponse)
def list_problems():
    return {"ok": True, "problems": get_service().list_problems()}


@router.post("/minimize", response_model=MinimizeResponse)
def run_minimization(req: MinimizeRequest):
    try:
        problem = ProblemConfig(
            name=req.problem,
            n=req.n,
            x0=req.x0,
            params=req.params,
        )
        options = LBFGSOptions.from_dict(req.options.model_dump())
        summary = get_service().run(problem, options)
        return {"ok": True, "result": summary.to_dict()}
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
