"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from budget_health.api.middleware import RequestIDMiddleware, MetricsMiddleware
from budget_health.api.v1 import allocation, savings, score, snapshot
from budget_health.infrastructure.observability.logging import setup_logging
from budget_health.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Budget Health Engine",
        description="Budget health scoring and savings shortfall reallocation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first: request ID is set before metrics are recorded
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(snapshot.router, prefix="/v1", tags=["snapshot"])
    app.include_router(score.router, prefix="/v1", tags=["budget-score"])
    app.include_router(savings.router, prefix="/v1", tags=["savings"])
    app.include_router(allocation.router, prefix="/v1", tags=["allocation"])

    return app


app = create_app()
