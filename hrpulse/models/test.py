"""Psychometric test model.

A test defines an assessment; its questions live in their own collection
and are owned by the test through ``Question.test_id``.
"""

from typing import Optional

from pydantic import Field

from hrpulse.models.base import TimestampedDocument
from hrpulse.utils.constants import TestType


class PsychometricTest(TimestampedDocument):
    """Psychometric assessment definition."""

    test_name: str = Field(..., min_length=1, max_length=100)
    test_type: TestType
    description: Optional[str] = Field(default=None, max_length=2000)
    instructions: Optional[str] = Field(default=None, max_length=5000)
    time_limit: Optional[int] = Field(default=None, ge=1, description="Minutes")
    total_questions: int = Field(default=0, ge=0)
    is_active: bool = Field(default=True)

    @property
    def test_type_enum(self) -> TestType:
        """Test type as an enum member."""
        return TestType(self.test_type)


__all__ = ["PsychometricTest"]
