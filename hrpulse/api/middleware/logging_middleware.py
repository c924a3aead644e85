"""Logging middleware for the HRPulse API.

This middleware logs incoming requests and outgoing responses with their
durations. Candidate-identifying query parameters are masked.
"""

import time
from typing import Callable, Dict, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from hrpulse.utils.logger import get_api_logger, log_api_request, log_api_response

logger = get_api_logger()


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses."""

    def __init__(
        self,
        app: ASGIApp,
        exclude_paths: Optional[List[str]] = None,
        mask_fields: Optional[List[str]] = None
    ):
        """Initialize logging middleware.

        Args:
            app: The ASGI application
            exclude_paths: Path prefixes to exclude from logging
            mask_fields: Query parameter names to mask in logs
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/health", "/metrics", "/docs", "/openapi.json"]
        self.mask_fields = mask_fields or ["candidate_email", "email", "token"]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log the request, call the endpoint and log the response."""
        path = request.url.path
        if any(path.startswith(prefix) for prefix in self.exclude_paths):
            return await call_next(request)

        start_time = time.perf_counter()
        log_api_request(request.method, path, logger=logger)
        logger.debug(
            f"Request details: {request.method} {path}",
            extra={
                "query_params": self._mask_query_params(dict(request.query_params)),
                "client_host": request.client.host if request.client else None,
                "content_length": request.headers.get("content-length"),
            }
        )

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers["X-Process-Time"] = f"{duration_ms / 1000:.3f}"
        log_api_response(request.method, path, response.status_code, duration_ms, logger=logger)
        return response

    def _mask_query_params(self, params: Dict[str, str]) -> Dict[str, str]:
        return {
            key: "***MASKED***" if key.lower() in self.mask_fields else value
            for key, value in params.items()
        }


__all__ = ["LoggingMiddleware"]
