"""Data models for HRPulse."""

from hrpulse.models.attempt import (
    AttemptResponse,
    AttemptResults,
    AttemptScore,
    PsychometricAttempt,
    ScoringDiagnostics,
)
from hrpulse.models.onboarding import OnboardingChecklistItem
from hrpulse.models.question import Question, order_question_bank
from hrpulse.models.test import PsychometricTest

__all__ = [
    "AttemptResponse",
    "AttemptResults",
    "AttemptScore",
    "OnboardingChecklistItem",
    "PsychometricAttempt",
    "PsychometricTest",
    "Question",
    "ScoringDiagnostics",
    "order_question_bank",
]
