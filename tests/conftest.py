"""Shared pytest fixtures for HRPulse tests."""

import os

os.environ["APP_ENV"] = "test"
os.environ.setdefault("ENABLE_CACHE", "false")

import pytest

from hrpulse.models.question import Question
from hrpulse.models.test import PsychometricTest
from hrpulse.utils.constants import QuestionType, TestType


@pytest.fixture
def cognitive_test():
    """Cognitive test with three multiple choice questions."""
    return PsychometricTest(id=1, test_name="Logical Reasoning", test_type=TestType.COGNITIVE)


@pytest.fixture
def personality_test():
    """Personality test."""
    return PsychometricTest(id=2, test_name="Big Five Inventory", test_type=TestType.PERSONALITY)


@pytest.fixture
def cognitive_questions():
    """Three scored multiple choice questions in ``logical_reasoning``."""
    return [
        Question(
            id=10 + i,
            test_id=1,
            question_text=f"Which value completes sequence {i}?",
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=["A", "B", "C", "D"],
            correct_answer="B",
            category="logical_reasoning",
            order=i,
        )
        for i in range(3)
    ]


@pytest.fixture
def extraversion_questions():
    """Two scale questions in ``extraversion``."""
    return [
        Question(
            id=20,
            test_id=2,
            question_text="I enjoy meeting new people.",
            question_type=QuestionType.SCALE,
            category="extraversion",
            order=1,
        ),
        Question(
            id=21,
            test_id=2,
            question_text="I feel energised in large groups.",
            question_type=QuestionType.SCALE,
            category="extraversion",
            order=2,
        ),
    ]
