"""Recommendation rule table for scored attempts.

Guidance text is data, not logic: an ordered list of rules, each naming a
test type, a percentage band and the sentences to show. The first matching
rule wins. The built-in table can be replaced by a JSON file named in
``RECOMMENDATION_RULES_PATH``.
"""

import json
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from hrpulse.utils.constants import EXCELLENT_BAND_MIN, GOOD_BAND_MIN, TestType
from hrpulse.utils.exceptions import ConfigurationError
from hrpulse.utils.logger import get_scoring_logger

logger = get_scoring_logger()


class RecommendationRule(BaseModel):
    """One band of guidance text for a test type."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    test_type: TestType
    min_score: float = Field(default=0, ge=0, le=100)
    max_score: Optional[float] = Field(default=None, ge=0, le=100)
    lines: Tuple[str, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_band(self) -> "RecommendationRule":
        if self.max_score is not None and self.max_score < self.min_score:
            raise ValueError("max_score must not be lower than min_score")
        return self

    def matches(self, test_type: Union[TestType, str], percentage_score: float) -> bool:
        """Check if the rule applies to a test type and score.

        Args:
            test_type: Test type of the scored attempt
            percentage_score: Overall percentage score

        Returns:
            bool: True if the score lies in this rule's band
        """
        if TestType(test_type) != self.test_type:
            return False
        if percentage_score < self.min_score:
            return False
        return self.max_score is None or percentage_score <= self.max_score


_RULE_LIST_ADAPTER = TypeAdapter(List[RecommendationRule])


DEFAULT_RECOMMENDATION_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        test_type=TestType.PERSONALITY,
        min_score=EXCELLENT_BAND_MIN,
        lines=(
            "Excellent personality fit for the role with strong interpersonal skills.",
            "Consider for leadership development opportunities.",
        ),
    ),
    RecommendationRule(
        test_type=TestType.PERSONALITY,
        min_score=GOOD_BAND_MIN,
        max_score=EXCELLENT_BAND_MIN - 1,
        lines=(
            "Good personality match with potential for growth.",
            "Recommend mentoring and skill development programs.",
        ),
    ),
    RecommendationRule(
        test_type=TestType.PERSONALITY,
        min_score=0,
        max_score=GOOD_BAND_MIN - 1,
        lines=(
            "Consider additional personality development training.",
            "May benefit from team-based collaboration exercises.",
        ),
    ),
    RecommendationRule(
        test_type=TestType.COGNITIVE,
        min_score=EXCELLENT_BAND_MIN,
        lines=(
            "Strong cognitive abilities suitable for complex problem-solving roles.",
            "Consider for analytical and strategic positions.",
        ),
    ),
    RecommendationRule(
        test_type=TestType.COGNITIVE,
        min_score=GOOD_BAND_MIN,
        max_score=EXCELLENT_BAND_MIN - 1,
        lines=(
            "Good cognitive performance with room for improvement.",
            "Recommend continued learning and development opportunities.",
        ),
    ),
    RecommendationRule(
        test_type=TestType.COGNITIVE,
        min_score=0,
        max_score=GOOD_BAND_MIN - 1,
        lines=(
            "May benefit from additional training in analytical thinking.",
            "Consider roles that leverage existing strengths.",
        ),
    ),
)


class RecommendationRuleTable:
    """Ordered, first-match recommendation rules."""

    def __init__(self, rules: Optional[Iterable[RecommendationRule]] = None):
        """Initialize the table.

        Args:
            rules: Rules in evaluation order, defaults to the built-in table
        """
        self._rules: Tuple[RecommendationRule, ...] = (
            tuple(rules) if rules is not None else DEFAULT_RECOMMENDATION_RULES
        )

    @property
    def rules(self) -> Tuple[RecommendationRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def recommend(self, test_type: Union[TestType, str], percentage_score: float) -> List[str]:
        """Select guidance for a scored attempt.

        Args:
            test_type: Test type of the attempt
            percentage_score: Overall percentage score

        Returns:
            List[str]: Recommendation lines, empty when no rule matches
        """
        for rule in self._rules:
            if rule.matches(test_type, percentage_score):
                return list(rule.lines)
        return []

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RecommendationRuleTable":
        """Load a rule table from a JSON file holding a list of rules.

        Args:
            path: Path to the JSON file

        Returns:
            RecommendationRuleTable: Loaded table

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        rules_path = Path(path)
        try:
            raw = json.loads(rules_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read recommendation rules from {rules_path}",
                config_key="RECOMMENDATION_RULES_PATH",
                config_value=str(rules_path),
                cause=e,
            )

        try:
            rules = _RULE_LIST_ADAPTER.validate_python(raw)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid recommendation rules in {rules_path}",
                config_key="RECOMMENDATION_RULES_PATH",
                config_value=str(rules_path),
                details={"validation_errors": [err["msg"] for err in e.errors()]},
                cause=e,
            )

        logger.info(
            "Loaded recommendation rules",
            extra={"path": str(rules_path), "rule_count": len(rules)}
        )
        return cls(rules)

    @classmethod
    def from_settings(cls, rules_path: Optional[str]) -> "RecommendationRuleTable":
        """Build the table configured for this deployment."""
        if rules_path:
            return cls.from_file(rules_path)
        return cls()


__all__ = [
    "DEFAULT_RECOMMENDATION_RULES",
    "RecommendationRule",
    "RecommendationRuleTable",
]
