"""Business services for HRPulse."""

from hrpulse.services.attempt_service import AttemptService
from hrpulse.services.onboarding_service import OnboardingService
from hrpulse.services.recommendation_rules import (
    DEFAULT_RECOMMENDATION_RULES,
    RecommendationRule,
    RecommendationRuleTable,
)
from hrpulse.services.scoring_service import ScoringEngine
from hrpulse.services.test_service import TestService

__all__ = [
    "AttemptService",
    "DEFAULT_RECOMMENDATION_RULES",
    "OnboardingService",
    "RecommendationRule",
    "RecommendationRuleTable",
    "ScoringEngine",
    "TestService",
]
