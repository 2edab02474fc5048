"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from neometing.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and propagate X-Correlation-ID."""

    def __init__(self, app: ASGIApp, log_query_params: bool = False) -> None:
        """Initialize middleware.

        Args:
            app: ASGI application
            log_query_params: Whether to add the query string to the log record
        """
        super().__init__(app)
        self.log_query_params = log_query_params

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        set_correlation_id(request.headers.get("X-Correlation-ID"))

        method = request.method
        path = request.url.path
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"Request failed: {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": int((time.perf_counter() - start_time) * 1000),
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status_mark = "✓" if response.status_code < 400 else "✗"
        extra = {
            "method": method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": int(duration_ms),
            "client_ip": request.client.host if request.client else "unknown",
        }
        if self.log_query_params:
            extra["query_params"] = str(request.query_params)
        logger.info(
            f"{status_mark} {method} {path} → {response.status_code} ({duration_ms:.0f}ms)",
            extra=extra,
        )

        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response
