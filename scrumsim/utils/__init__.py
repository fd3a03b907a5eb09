"""
Utilities package.

Contains logging setup and HTTP middleware.
"""

from scrumsim.utils.logging import (
    bind_request_context,
    configure_logging,
    log_request,
)
from scrumsim.utils.middleware import (
    RequestContextMiddleware,
    configure_cors,
    configure_middleware,
)

__all__ = [
    # Logging
    "bind_request_context",
    "configure_logging",
    "log_request",
    # Middleware
    "RequestContextMiddleware",
    "configure_cors",
    "configure_middleware",
]
