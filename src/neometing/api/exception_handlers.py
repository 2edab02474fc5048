"""Custom exception handlers for the FastAPI application.

Converts domain errors raised by providers into HTTP responses. Providers never
format user-facing text, this is the only place that picks status codes.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from neometing.domain.exceptions import ErrorKind, MetingError

logger = logging.getLogger(__name__)

# Hey future me - upstream data problems (missing/mistyped fields) are the
# upstream's fault, so they are 502, not 500. Encode failures are ours.
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.REMOTE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.SERVER: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.ENCODE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.NO_FIELD: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.TYPE_MISMATCH: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.NONE: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNIMPLEMENTED: status.HTTP_501_NOT_IMPLEMENTED,
}


def status_for(exc: MetingError) -> int:
    """HTTP status for a provider error."""
    return STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for provider errors.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(MetingError)
    async def meting_error_handler(request: Request, exc: MetingError) -> JSONResponse:
        """Map a provider error to its status code."""
        status_code = status_for(exc)
        log = logger.info if exc.kind in (ErrorKind.NONE, ErrorKind.UNIMPLEMENTED) else logger.warning
        log(
            "%s error at %s: %s",
            exc.kind.value,
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "kind": exc.kind.value},
            exc_info=exc if status_code >= 500 and exc.__cause__ is not None else None,
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "kind": exc.kind.value},
        )
