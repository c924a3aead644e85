"""Attempt and dashboard schemas for the HRPulse API.

This module defines request and response schemas for candidate attempt
submission, attempt administration and dashboard statistics.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import EmailStr, Field

from hrpulse.models.attempt import AttemptResponse, AttemptResults, ScoringDiagnostics
from hrpulse.schemas.base import BaseSchema
from hrpulse.utils.constants import AttemptStatus


# Request Schemas

class AttemptSubmissionRequest(BaseSchema):
    """Request schema for submitting a finished attempt."""

    candidate_email: EmailStr
    candidate_name: str = Field(..., min_length=1, max_length=200)
    test_id: int = Field(..., ge=1)
    responses: List[AttemptResponse] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    time_spent: Optional[int] = Field(default=None, ge=0, description="Seconds")
    status: AttemptStatus = Field(default=AttemptStatus.COMPLETED)
    onboarding_checklist_item_id: Optional[int] = Field(
        default=None,
        ge=1,
        description="Checklist item to link the attempt to"
    )


class AttemptUpdateRequest(BaseSchema):
    """Partial update of a stored attempt. Scores are not recomputed."""

    candidate_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    completed_at: Optional[datetime] = None
    time_spent: Optional[int] = Field(default=None, ge=0)
    status: Optional[AttemptStatus] = None


# Response Schemas

class AttemptDetailResponse(BaseSchema):
    """Response schema for a stored attempt."""

    id: int
    candidate_email: str
    candidate_name: str
    test_id: int
    responses: List[AttemptResponse] = Field(default_factory=list)
    started_at: datetime
    completed_at: Optional[datetime] = None
    time_spent: Optional[int] = None
    status: str
    total_score: Optional[int] = None
    percentage_score: Optional[int] = None
    results: Optional[AttemptResults] = None
    scoring_diagnostics: Optional[ScoringDiagnostics] = None


class DashboardStatsResponse(BaseSchema):
    """Aggregate statistics for the psychometric dashboard."""

    total_tests: int = Field(..., ge=0)
    total_attempts: int = Field(..., ge=0)
    completed_attempts: int = Field(..., ge=0)
    average_score: int = Field(..., ge=0)
    score_distribution: Dict[str, int] = Field(default_factory=dict)


__all__ = [
    "AttemptDetailResponse",
    "AttemptSubmissionRequest",
    "AttemptUpdateRequest",
    "DashboardStatsResponse",
]
