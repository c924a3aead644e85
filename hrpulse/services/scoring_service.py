"""Scoring engine for psychometric test attempts.

The engine is a pure function of its inputs: it matches submitted responses
against a test's question bank, awards points per question type, folds the
points into category tallies and selects recommendation text. It performs
no I/O and never raises for malformed responses; anything it cannot score
contributes zero points and is reported in ``ScoringDiagnostics``.
"""

import math
import re
from functools import reduce
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from hrpulse.models.attempt import (
    AttemptResponse,
    AttemptResults,
    AttemptScore,
    PsychometricAttempt,
    ScoringDiagnostics,
)
from hrpulse.models.question import Question
from hrpulse.models.test import PsychometricTest
from hrpulse.services.recommendation_rules import RecommendationRuleTable
from hrpulse.utils.constants import (
    CATEGORY_BREAKDOWN_FIELDS,
    CORRECT_ANSWER_POINTS,
    INCORRECT_ANSWER_POINTS,
    MAX_POINTS_PER_QUESTION,
    MAX_SCALE_VALUE,
    MIN_SCALE_VALUE,
    NO_POINTS,
    YES_ANSWER,
    YES_POINTS,
    QuestionType,
    TestType,
)
from hrpulse.utils.logger import get_scoring_logger

logger = get_scoring_logger()

_LEADING_INTEGER = re.compile(r"^\s*([+-]?[0-9]+)")

# Outcome markers for a single response
UNPARSEABLE = "unparseable"
UNSCORED = "unscored"


class CategoryTally(NamedTuple):
    """Points and question count accumulated for one category."""

    total: int = 0
    count: int = 0

    def add(self, points: int) -> "CategoryTally":
        return CategoryTally(self.total + points, self.count + 1)


class ScoredResponse(NamedTuple):
    """A response matched to its question, with the points it earned."""

    question: Question
    points: int
    issue: Optional[str] = None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (``2.5 -> 3``)."""
    return int(math.floor(value + 0.5))


def parse_scale_answer(answer: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a scale answer.

    Args:
        answer: Raw answer, e.g. ``"4"``, ``" 3"`` or ``"4.5"``

    Returns:
        Optional[int]: Parsed value, None when the answer has no leading integer
    """
    if answer is None:
        return None
    match = _LEADING_INTEGER.match(answer)
    if match is None:
        return None
    return int(match.group(1))


def points_for_answer(question: Question, answer: Optional[str]) -> Tuple[int, Optional[str]]:
    """Compute the points a single answer earns.

    Args:
        question: Question being answered
        answer: Candidate's answer

    Returns:
        Tuple of points awarded and an issue marker (``UNPARSEABLE``,
        ``UNSCORED`` or None)
    """
    question_type = QuestionType(question.question_type)

    if question_type == QuestionType.SCALE:
        value = parse_scale_answer(answer)
        if value is None or not MIN_SCALE_VALUE <= value <= MAX_SCALE_VALUE:
            return 0, UNPARSEABLE
        return value, None

    if question_type == QuestionType.YES_NO:
        return (YES_POINTS if answer == YES_ANSWER else NO_POINTS), None

    if not question.is_scored:
        return 0, UNSCORED
    if answer == question.correct_answer:
        return CORRECT_ANSWER_POINTS, None
    return INCORRECT_ANSWER_POINTS, None


def tally_categories(scored: Iterable[ScoredResponse]) -> Dict[str, CategoryTally]:
    """Fold scored responses into per-category tallies.

    Categories keep the order in which they were first seen. Each step
    produces a new mapping; no tally is mutated.
    """
    def step(acc: Mapping[str, CategoryTally], item: ScoredResponse) -> Dict[str, CategoryTally]:
        category = item.question.category
        if not category:
            return dict(acc)
        return {**acc, category: acc.get(category, CategoryTally()).add(item.points)}

    return reduce(step, scored, {})


def percentage_of(points: int, question_count: int) -> int:
    """Percentage of the maximum attainable points, half-up rounded."""
    return round_half_up(points / (question_count * MAX_POINTS_PER_QUESTION) * 100)


class ScoringEngine:
    """Scores attempts against a question bank.

    Example:
        >>> engine = ScoringEngine()
        >>> score = engine.score(attempt.responses, test, questions)
        >>> score.percentage_score
        67
    """

    def __init__(self, rule_table: Optional[RecommendationRuleTable] = None):
        """Initialize the engine.

        Args:
            rule_table: Recommendation rules, defaults to the built-in table
        """
        self.rule_table = rule_table or RecommendationRuleTable()

    def score(
        self,
        responses: Sequence[AttemptResponse],
        test: Optional[PsychometricTest],
        questions: Optional[Sequence[Question]],
    ) -> Optional[AttemptScore]:
        """Score a set of responses.

        Args:
            responses: Submitted responses
            test: Test the responses belong to
            questions: The test's question bank

        Returns:
            Optional[AttemptScore]: Scores, or None when the test or its
            question bank is missing
        """
        if test is None or not questions:
            logger.info(
                "Scoring skipped: test or question bank unavailable",
                extra={"test_id": test.id if test else None}
            )
            return None

        index: Dict[int, Question] = {}
        for question in questions:
            if question.id is not None:
                index.setdefault(question.id, question)

        scored: List[ScoredResponse] = []
        seen: List[int] = []
        unmatched: List[int] = []
        duplicates: List[int] = []
        for response in responses:
            question = index.get(response.question_id)
            if question is None:
                unmatched.append(response.question_id)
                continue
            if response.question_id in seen:
                duplicates.append(response.question_id)
            else:
                seen.append(response.question_id)
            points, issue = points_for_answer(question, response.answer)
            scored.append(ScoredResponse(question, points, issue))

        total_score = sum(item.points for item in scored)
        percentage_score = percentage_of(total_score, len(questions))

        results = AttemptResults(
            recommendations=self.rule_table.recommend(test.test_type, percentage_score)
        )
        breakdown_field = CATEGORY_BREAKDOWN_FIELDS.get(TestType(test.test_type))
        if breakdown_field is not None:
            breakdown = {
                category: percentage_of(tally.total, tally.count)
                for category, tally in tally_categories(scored).items()
            }
            results = results.model_copy(update={breakdown_field: breakdown})

        answered = set(seen)
        diagnostics = ScoringDiagnostics(
            answered_count=len(scored),
            unmatched_question_ids=unmatched,
            duplicate_question_ids=duplicates,
            unparseable_question_ids=[
                item.question.id for item in scored if item.issue == UNPARSEABLE
            ],
            unscored_question_ids=[
                item.question.id for item in scored if item.issue == UNSCORED
            ],
            unanswered_question_ids=[
                question_id for question_id in index if question_id not in answered
            ],
        )

        logger.debug(
            "Scored attempt",
            extra={
                "test_id": test.id,
                "question_count": len(questions),
                "answered_count": diagnostics.answered_count,
                "total_score": total_score,
                "percentage_score": percentage_score,
            }
        )
        if diagnostics.has_data_quality_issues:
            logger.warning(
                "Attempt contained responses that could not be scored",
                extra={
                    "test_id": test.id,
                    "unmatched_question_ids": diagnostics.unmatched_question_ids,
                    "unparseable_question_ids": diagnostics.unparseable_question_ids,
                    "duplicate_question_ids": diagnostics.duplicate_question_ids,
                }
            )

        return AttemptScore(
            total_score=total_score,
            percentage_score=percentage_score,
            results=results,
            diagnostics=diagnostics,
        )

    def apply(
        self,
        attempt: PsychometricAttempt,
        test: Optional[PsychometricTest],
        questions: Optional[Sequence[Question]],
    ) -> PsychometricAttempt:
        """Return a copy of the attempt with score fields filled in.

        The attempt is returned unchanged when the test or question bank
        is missing.
        """
        score = self.score(attempt.responses, test, questions)
        if score is None:
            return attempt

        return attempt.model_copy(
            update={
                "total_score": score.total_score,
                "percentage_score": score.percentage_score,
                "results": score.results,
                "scoring_diagnostics": score.diagnostics,
            }
        )


__all__ = [
    "CategoryTally",
    "ScoringEngine",
    "parse_scale_answer",
    "percentage_of",
    "points_for_answer",
    "round_half_up",
    "tally_categories",
]
