"""Attempt models for psychometric tests.

An attempt is one candidate's run through a test. Score fields stay unset
until the scoring engine has processed the submitted responses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from hrpulse.models.base import BaseDocument, EmbeddedDocument
from hrpulse.utils.constants import AttemptStatus
from hrpulse.utils.datetime_utils import utc_now


def coerce_answer(value: Any) -> Optional[str]:
    """Convert a submitted answer to its stored string form.

    Args:
        value: Raw answer from the client (string, number, bool or null)

    Returns:
        Optional[str]: String answer, None for null
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError("answer must be a string, number, boolean or null")


class AttemptResponse(EmbeddedDocument):
    """One submitted answer."""

    question_id: int
    answer: Optional[str] = None
    category: Optional[str] = None

    @field_validator("answer", mode="before")
    @classmethod
    def validate_answer(cls, value: Any) -> Optional[str]:
        return coerce_answer(value)


class AttemptResults(EmbeddedDocument):
    """Category breakdown and recommendations for a scored attempt."""

    personality_traits: Optional[Dict[str, int]] = None
    cognitive_scores: Optional[Dict[str, int]] = None
    recommendations: List[str] = Field(default_factory=list)


class ScoringDiagnostics(EmbeddedDocument):
    """Responses the scoring engine could not score.

    Diagnostics are for operators; they never change candidate-facing scores.
    """

    answered_count: int = Field(default=0, ge=0)
    unmatched_question_ids: List[int] = Field(default_factory=list)
    duplicate_question_ids: List[int] = Field(default_factory=list)
    unparseable_question_ids: List[int] = Field(default_factory=list)
    unscored_question_ids: List[int] = Field(default_factory=list)
    unanswered_question_ids: List[int] = Field(default_factory=list)

    @property
    def has_data_quality_issues(self) -> bool:
        """True when responses were dropped or could not be parsed."""
        return bool(
            self.unmatched_question_ids
            or self.duplicate_question_ids
            or self.unparseable_question_ids
        )


class AttemptScore(EmbeddedDocument):
    """Output of one scoring run."""

    total_score: int = Field(..., ge=0)
    percentage_score: int = Field(..., ge=0)
    results: AttemptResults
    diagnostics: ScoringDiagnostics


class PsychometricAttempt(BaseDocument):
    """A candidate's attempt at a psychometric test."""

    candidate_email: EmailStr
    candidate_name: str = Field(..., min_length=1, max_length=200)
    test_id: int = Field(..., ge=1)
    responses: List[AttemptResponse] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    time_spent: Optional[int] = Field(default=None, ge=0, description="Seconds")
    status: AttemptStatus = Field(default=AttemptStatus.IN_PROGRESS)

    # Computed by the scoring engine
    total_score: Optional[int] = Field(default=None, ge=0)
    percentage_score: Optional[int] = Field(default=None, ge=0)
    results: Optional[AttemptResults] = None
    scoring_diagnostics: Optional[ScoringDiagnostics] = None

    # Client metadata
    ip_address: Optional[str] = None
    user_agent: Optional[str] = Field(default=None, max_length=500)

    @property
    def is_scored(self) -> bool:
        """Check if scores have been computed."""
        return self.total_score is not None

    @property
    def is_completed(self) -> bool:
        """Check if the attempt was submitted as completed."""
        return self.status == AttemptStatus.COMPLETED


__all__ = [
    "AttemptResponse",
    "AttemptResults",
    "AttemptScore",
    "PsychometricAttempt",
    "ScoringDiagnostics",
    "coerce_answer",
]
