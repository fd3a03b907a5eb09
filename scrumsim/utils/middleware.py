"""
HTTP middleware: CORS and per-request context.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from scrumsim.config import get_settings
from scrumsim.utils.logging import bind_request_context, log_request

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000


def configure_cors(app: FastAPI) -> None:
    """Allow the configured front-end origins to call the API."""
    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Accept", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER, "X-Response-Time"],
        max_age=600,
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id, binds it into the log context, and logs
    the request once the response is ready.

    A caller-supplied ``X-Request-ID`` is reused; otherwise a new one is made.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        bind_request_context(request_id, request.method, request.url.path)

        started = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        log_request(
            request.method,
            request.url.path,
            response.status_code,
            round(duration_ms, 2),
            slow=duration_ms > SLOW_REQUEST_MS,
        )
        return response


def configure_middleware(app: FastAPI) -> None:
    """Install CORS and request context middleware."""
    app.add_middleware(RequestContextMiddleware)
    # added last so it runs first
    configure_cors(app)

    logger.debug("middleware_configured")
