"""Common dependencies for FastAPI routes.

This module provides request context helpers and the service providers
routes depend on, so tests can swap them through ``dependency_overrides``.
"""

from typing import Optional

from fastapi import HTTPException, Request

from hrpulse.api.middleware.error_handler import status_code_for
from hrpulse.services.attempt_service import AttemptService
from hrpulse.services.scoring_service import ScoringEngine
from hrpulse.services.test_service import TestService
from hrpulse.utils.exceptions import HRPulseError


def get_request_id(request: Request) -> Optional[str]:
    """Get request ID from request state."""
    return getattr(request.state, "request_id", None)


def get_client_ip(request: Request) -> Optional[str]:
    """Get client IP address from request.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else None


def get_user_agent(request: Request) -> Optional[str]:
    """Get user agent from request headers."""
    return request.headers.get("User-Agent")


def get_scoring_engine(request: Request) -> ScoringEngine:
    """Scoring engine built at startup with the configured rule table."""
    engine = getattr(request.app.state, "scoring_engine", None)
    return engine or ScoringEngine()


def get_test_service() -> TestService:
    return TestService()


def get_attempt_service(request: Request) -> AttemptService:
    return AttemptService(engine=get_scoring_engine(request))


def http_error(error: HRPulseError) -> HTTPException:
    """Translate a service exception into an HTTP error.

    Args:
        error: Exception raised by the service layer

    Returns:
        HTTPException: Exception to raise from the route
    """
    return HTTPException(status_code=status_code_for(error), detail=error.message)
