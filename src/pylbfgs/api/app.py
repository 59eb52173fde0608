"""
FastAPI application factory.

Usage::

    uvicorn pylbfgs.api.app:create_app --factory
    python -m pylbfgs.api --port 9000
"""
from fastapi import FastAPI

import pylbfgs
from pylbfgs.api.models import HealthResponse
from pylbfgs.api.routes import get_service, router


def create_app() -> FastAPI:
    application = FastAPI(
        title="pylbfgs API",
        version=pylbfgs.__version__,
        description="Minimize the built-in problems with L-BFGS over HTTP.",
    )

    @application.get("/health", response_model=HealthResponse)
    def health():
        problems = [p["name"] for p in get_service().list_problems()]
        return HealthResponse(version=pylbfgs.__version__, problems=problems)

    application.include_router(router, prefix="/api")
    return application
