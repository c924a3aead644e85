"""Question model for psychometric tests.

This module defines question definitions as consumed by the scoring engine,
and the ordering rule applied to a test's question bank.
"""

from typing import Iterable, List, Optional

from pydantic import Field, field_validator, model_validator

from hrpulse.models.base import BaseDocument
from hrpulse.utils.constants import QuestionType


class Question(BaseDocument):
    """A single question belonging to one test."""

    test_id: int = Field(..., ge=1)
    question_text: str = Field(..., min_length=1, max_length=1000)
    question_type: QuestionType
    options: List[str] = Field(default_factory=list)
    correct_answer: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    order: int = Field(default=0)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: Optional[str]) -> Optional[str]:
        """Treat blank categories as absent."""
        if value is not None and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def validate_question_content(self) -> "Question":
        """Validate options and correct answer against the question type."""
        if self.question_type == QuestionType.MULTIPLE_CHOICE:
            if not self.options:
                raise ValueError("multiple_choice questions must have at least one option")
            if self.correct_answer is not None and self.correct_answer not in self.options:
                raise ValueError("correct_answer must be one of the options")
        return self

    @property
    def is_scored(self) -> bool:
        """Whether the question can award points for a correct answer.

        Multiple-choice questions without a correct answer are attitudinal
        and always contribute zero points.
        """
        if self.question_type == QuestionType.MULTIPLE_CHOICE:
            return self.correct_answer is not None
        return True


def order_question_bank(questions: Iterable[Question]) -> List[Question]:
    """Sort questions by ``order`` then ``id``.

    Args:
        questions: Questions of one test

    Returns:
        List[Question]: Ordered question bank
    """
    return sorted(questions, key=lambda q: (q.order, q.id if q.id is not None else 0))


__all__ = ["Question", "order_question_bank"]
