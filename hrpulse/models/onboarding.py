"""Onboarding checklist model.

Only the psychometric link fields are managed by this service; the rest of
the checklist belongs to the surrounding HR application.
"""

from typing import Optional

from pydantic import Field

from hrpulse.models.base import TimestampedDocument


class OnboardingChecklistItem(TimestampedDocument):
    """Checklist item that may require a psychometric test."""

    employee_id: int = Field(..., ge=1)
    item_title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    is_completed: bool = Field(default=False)
    order: int = Field(default=0)

    requires_psychometric_test: bool = Field(default=False)
    psychometric_test_id: Optional[int] = None
    psychometric_test_attempt_id: Optional[int] = None
    psychometric_test_completed: bool = Field(default=False)
    psychometric_test_score: Optional[int] = Field(default=None, ge=0)


__all__ = ["OnboardingChecklistItem"]
