"""Error handler middleware for the HRPulse API.

Routes translate service errors themselves (see ``http_error``); this
middleware catches any ``HRPulseError`` that still escapes, for example from
a dependency, and renders it in the standard error envelope.
"""

from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from hrpulse.api.middleware.request_id import get_request_id
from hrpulse.schemas.base import error_envelope
from hrpulse.utils.exceptions import HRPulseError
from hrpulse.utils.logger import get_api_logger

logger = get_api_logger()


def status_code_for(error: HRPulseError) -> int:
    """HTTP status code for an application exception."""
    return error.status_code


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Render escaping application exceptions as JSON error responses."""

    def __init__(self, app: ASGIApp, debug: bool = False):
        """Initialize error handler middleware.

        Args:
            app: The ASGI application
            debug: Include details of server-side (5xx) errors in responses
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except HRPulseError as e:
            return self._error_response(e, request)

    def _error_response(self, error: HRPulseError, request: Request) -> JSONResponse:
        status_code = status_code_for(error)
        request_id = getattr(request.state, "request_id", None) or get_request_id()

        log = logger.error if status_code >= 500 else logger.warning
        log(
            f"{error.__class__.__name__} escaped route {request.method} {request.url.path}: {error.message}",
            extra={
                "error_code": error.error_code,
                "status_code": status_code,
                "details": error.details,
            },
        )

        # 5xx details can carry collection names and queries
        show_details = bool(error.details) and (self.debug or status_code < 500)
        return JSONResponse(
            status_code=status_code,
            content=error_envelope(
                error.error_code,
                error.message,
                request_id=request_id,
                details=error.details if show_details else None,
            ),
        )


__all__ = ["ErrorHandlerMiddleware", "status_code_for"]
