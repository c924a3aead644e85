"""Middleware components for the HRPulse API."""

from hrpulse.api.middleware.error_handler import ErrorHandlerMiddleware
from hrpulse.api.middleware.logging_middleware import LoggingMiddleware
from hrpulse.api.middleware.request_id import RequestIDMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "LoggingMiddleware",
    "RequestIDMiddleware",
]
