"""Request and response schemas for the HRPulse API."""

from hrpulse.schemas.attempt_schemas import (
    AttemptDetailResponse,
    AttemptSubmissionRequest,
    AttemptUpdateRequest,
    DashboardStatsResponse,
)
from hrpulse.schemas.base import (
    ErrorEnvelope,
    SuccessResponse,
    create_success_response,
    error_envelope,
)
from hrpulse.schemas.test_schemas import (
    QuestionCreateRequest,
    QuestionResponse,
    QuestionUpdateRequest,
    TestCreateRequest,
    TestExportResponse,
    TestResponse,
    TestUpdateRequest,
)

__all__ = [
    "AttemptDetailResponse",
    "AttemptSubmissionRequest",
    "AttemptUpdateRequest",
    "DashboardStatsResponse",
    "ErrorEnvelope",
    "QuestionCreateRequest",
    "QuestionResponse",
    "QuestionUpdateRequest",
    "SuccessResponse",
    "TestCreateRequest",
    "TestExportResponse",
    "TestResponse",
    "TestUpdateRequest",
    "create_success_response",
    "error_envelope",
]
