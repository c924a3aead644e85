"""Constants and enums for the HRPulse psychometrics service.

This module defines the enums, scoring constants and collection names used
throughout the application for consistency and type safety.
"""

from enum import Enum
from typing import Dict, FrozenSet


# ============================================================================
# CORE ENUMS
# ============================================================================

class TestType(str, Enum):
    """Kinds of psychometric assessment."""

    __test__ = False  # keep pytest from collecting this as a test class

    PERSONALITY = "personality"
    COGNITIVE = "cognitive"
    APTITUDE = "aptitude"
    EMOTIONAL_INTELLIGENCE = "emotional_intelligence"
    INTEGRITY = "integrity"

    @property
    def display_name(self) -> str:
        """Get display name for the test type."""
        return TEST_TYPE_DISPLAY_NAMES[self]

    @property
    def has_category_breakdown(self) -> bool:
        """Check if scoring produces per-category sub-scores."""
        return self in CATEGORY_BREAKDOWN_FIELDS


class QuestionType(str, Enum):
    """Types of questions in a psychometric test."""

    MULTIPLE_CHOICE = "multiple_choice"
    SCALE = "scale"
    YES_NO = "yes_no"

    @property
    def display_name(self) -> str:
        """Get display name for the question type."""
        return QUESTION_TYPE_DISPLAY_NAMES[self]


class AttemptStatus(str, Enum):
    """Status values for a candidate's attempt."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        """Check if no further status change is allowed."""
        return self in TERMINAL_ATTEMPT_STATUSES

    def can_transition_to(self, target: "AttemptStatus") -> bool:
        """Check if the lifecycle allows moving to ``target``.

        Args:
            target: Requested status

        Returns:
            bool: True if the transition is allowed
        """
        if target == self:
            return True
        return self == AttemptStatus.IN_PROGRESS


class ScoreBand(str, Enum):
    """Percentage bands used for reporting and recommendations."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"

    @classmethod
    def from_percentage(cls, percentage: float) -> "ScoreBand":
        """Classify a percentage score.

        Args:
            percentage: Percentage score (0-100)

        Returns:
            ScoreBand: Band containing the score
        """
        if percentage >= EXCELLENT_BAND_MIN:
            return cls.EXCELLENT
        if percentage >= GOOD_BAND_MIN:
            return cls.GOOD
        return cls.NEEDS_IMPROVEMENT


# ============================================================================
# SCORING CONSTANTS
# ============================================================================

MAX_POINTS_PER_QUESTION = 5
MIN_SCALE_VALUE = 1
MAX_SCALE_VALUE = 5

YES_ANSWER = "yes"
YES_POINTS = 5
NO_POINTS = 1
CORRECT_ANSWER_POINTS = 5
INCORRECT_ANSWER_POINTS = 0

EXCELLENT_BAND_MIN = 80
GOOD_BAND_MIN = 60

TERMINAL_ATTEMPT_STATUSES: FrozenSet[AttemptStatus] = frozenset(
    {AttemptStatus.COMPLETED, AttemptStatus.ABANDONED}
)

# Result field holding the per-category breakdown for each test type
CATEGORY_BREAKDOWN_FIELDS: Dict[TestType, str] = {
    TestType.PERSONALITY: "personality_traits",
    TestType.COGNITIVE: "cognitive_scores",
}


# ============================================================================
# DISPLAY NAMES
# ============================================================================

TEST_TYPE_DISPLAY_NAMES: Dict[TestType, str] = {
    TestType.PERSONALITY: "Personality",
    TestType.COGNITIVE: "Cognitive Ability",
    TestType.APTITUDE: "Aptitude",
    TestType.EMOTIONAL_INTELLIGENCE: "Emotional Intelligence",
    TestType.INTEGRITY: "Integrity",
}

QUESTION_TYPE_DISPLAY_NAMES: Dict[QuestionType, str] = {
    QuestionType.MULTIPLE_CHOICE: "Multiple Choice",
    QuestionType.SCALE: "Scale (1-5)",
    QuestionType.YES_NO: "Yes / No",
}


# ============================================================================
# STORAGE
# ============================================================================

class Collections:
    """MongoDB collection names."""

    TESTS = "psychometric_tests"
    QUESTIONS = "psychometric_questions"
    ATTEMPTS = "psychometric_test_attempts"
    ONBOARDING_CHECKLISTS = "onboarding_checklists"
    COUNTERS = "counters"
