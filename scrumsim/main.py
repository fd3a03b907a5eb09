"""
Main application entry point.

Builds the FastAPI application that serves the simulation engine over HTTP.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from scrumsim import __version__
from scrumsim.api import simulation_router
from scrumsim.config import get_settings
from scrumsim.models.schemas import HealthResponse
from scrumsim.utils import configure_logging, configure_middleware

logger = structlog.get_logger(__name__)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Log startup with the effective simulation defaults, and shutdown."""
    settings = get_settings()
    simulation = settings.simulation

    logger.info(
        "application_started",
        app=settings.app_name,
        environment=settings.environment,
        default_seed=simulation.default_seed,
        max_batch_runs=simulation.max_batch_runs,
    )

    yield

    logger.info("application_stopped", app=settings.app_name)


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Day-by-day Scrum delivery simulation engine",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    configure_middleware(app)

    register_exception_handlers(app)
    register_routes(app)

    if settings.metrics_enabled:
        add_metrics_middleware(app)

    return app


def _error_body(error: str, message: str, details=None) -> dict:
    body = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """Map validation failures to 422 and anything unexpected to 500."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.info("request_rejected", path=request.url.path, errors=len(details))

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body("validation_error", "Request validation failed", details),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception("unhandled_exception", path=request.url.path)

        details = str(exc) if get_settings().debug else None

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("internal_error", "An unexpected error occurred", details),
        )


def register_routes(app: FastAPI) -> None:
    """Register system routes and the simulation router."""

    @app.get("/health", tags=["system"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        # the engine has no external dependencies to probe
        return HealthResponse(
            status="healthy",
            version=__version__,
            environment=get_settings().environment,
        )

    @app.get("/metrics", tags=["system"])
    async def metrics():
        """Prometheus scrape endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", tags=["system"])
    async def root():
        settings = get_settings()

        return {
            "name": settings.app_name,
            "version": __version__,
            "documentation": "/docs" if settings.debug else "disabled",
            "endpoints": {
                "health": "/health",
                "metrics": "/metrics",
                "simulate": {
                    "run": "POST /simulate/run",
                    "summary": "POST /simulate/summary",
                    "batch": "POST /simulate/batch",
                },
            },
        }

    app.include_router(simulation_router)


def add_metrics_middleware(app: FastAPI) -> None:
    """Count and time every request by method and path."""

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        started = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - started

        path = request.url.path
        REQUEST_COUNT.labels(method=request.method, endpoint=path, status=response.status_code).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=path).observe(elapsed)

        return response


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "scrumsim.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
    )
