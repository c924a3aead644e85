"""API routers for HRPulse.

This module exposes the FastAPI routers that define the API endpoints
for each functional area of the service.
"""

from hrpulse.routers.attempts import router as attempts_router
from hrpulse.routers.dashboard import router as dashboard_router
from hrpulse.routers.health import router as health_router
from hrpulse.routers.questions import router as questions_router
from hrpulse.routers.tests import router as tests_router

__all__ = [
    "attempts_router",
    "dashboard_router",
    "health_router",
    "questions_router",
    "tests_router",
]
