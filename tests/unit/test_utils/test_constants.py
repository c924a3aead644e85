"""Unit tests for constants and enums."""

import pytest

from hrpulse.utils.constants import (
    CATEGORY_BREAKDOWN_FIELDS,
    AttemptStatus,
    QuestionType,
    ScoreBand,
    TestType,
)


class TestScoreBand:
    """Test cases for ScoreBand classification."""

    @pytest.mark.parametrize("percentage,expected", [
        (100, ScoreBand.EXCELLENT),
        (80, ScoreBand.EXCELLENT),
        (79, ScoreBand.GOOD),
        (60, ScoreBand.GOOD),
        (59, ScoreBand.NEEDS_IMPROVEMENT),
        (0, ScoreBand.NEEDS_IMPROVEMENT),
    ])
    def test_from_percentage(self, percentage, expected):
        assert ScoreBand.from_percentage(percentage) == expected


class TestAttemptStatus:
    """Test cases for the attempt lifecycle."""

    @pytest.mark.parametrize("target", list(AttemptStatus))
    def test_in_progress_can_move_anywhere(self, target):
        assert AttemptStatus.IN_PROGRESS.can_transition_to(target)

    @pytest.mark.parametrize("current", [AttemptStatus.COMPLETED, AttemptStatus.ABANDONED])
    def test_terminal_statuses_are_final(self, current):
        assert current.is_terminal
        assert current.can_transition_to(current)
        assert not current.can_transition_to(AttemptStatus.IN_PROGRESS)

    def test_completed_cannot_become_abandoned(self):
        assert not AttemptStatus.COMPLETED.can_transition_to(AttemptStatus.ABANDONED)
        assert not AttemptStatus.ABANDONED.can_transition_to(AttemptStatus.COMPLETED)


class TestTestType:
    """Test cases for TestType."""

    def test_only_personality_and_cognitive_have_breakdowns(self):
        with_breakdown = {t for t in TestType if t.has_category_breakdown}

        assert with_breakdown == {TestType.PERSONALITY, TestType.COGNITIVE}
        assert CATEGORY_BREAKDOWN_FIELDS[TestType.PERSONALITY] == "personality_traits"
        assert CATEGORY_BREAKDOWN_FIELDS[TestType.COGNITIVE] == "cognitive_scores"

    def test_values_match_wire_format(self):
        assert TestType("emotional_intelligence") is TestType.EMOTIONAL_INTELLIGENCE
        assert QuestionType("yes_no") is QuestionType.YES_NO

    def test_display_names(self):
        assert TestType.COGNITIVE.display_name == "Cognitive Ability"
        assert QuestionType.SCALE.display_name == "Scale (1-5)"
