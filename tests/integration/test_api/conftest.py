"""Fixtures for API integration tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from hrpulse.api.dependencies import get_attempt_service, get_test_service
from hrpulse.api.main import app
from hrpulse.models.question import Question
from hrpulse.models.test import PsychometricTest
from hrpulse.utils.constants import QuestionType, TestType

CREATED_AT = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_test_service():
    return AsyncMock()


@pytest.fixture
def mock_attempt_service():
    return AsyncMock()


@pytest.fixture
async def client(mock_test_service, mock_attempt_service):
    """HTTP client with the service providers replaced by mocks."""
    app.dependency_overrides[get_test_service] = lambda: mock_test_service
    app.dependency_overrides[get_attempt_service] = lambda: mock_attempt_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def stored_test():
    return PsychometricTest(
        id=1,
        test_name="Logical Reasoning",
        test_type=TestType.COGNITIVE,
        time_limit=20,
        total_questions=1,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )


@pytest.fixture
def stored_question():
    return Question(
        id=10,
        test_id=1,
        question_text="Which number completes 2, 4, 8, ...?",
        question_type=QuestionType.MULTIPLE_CHOICE,
        options=["10", "12", "16"],
        correct_answer="16",
        category="numerical_reasoning",
        order=1,
        created_at=CREATED_AT,
    )
