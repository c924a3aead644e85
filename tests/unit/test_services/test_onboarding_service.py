"""Unit tests for OnboardingService."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from hrpulse.models.attempt import PsychometricAttempt
from hrpulse.services.onboarding_service import OnboardingService
from hrpulse.utils.constants import AttemptStatus, Collections
from hrpulse.utils.exceptions import ResourceNotFoundError, ValidationError

NOW = datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)


def item_document(item_id=3, **overrides):
    document = {
        "_id": item_id,
        "employee_id": 42,
        "item_title": "Complete personality assessment",
        "description": None,
        "is_completed": False,
        "order": 2,
        "requires_psychometric_test": True,
        "psychometric_test_id": 1,
        "psychometric_test_attempt_id": None,
        "psychometric_test_completed": False,
        "psychometric_test_score": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    document.update(overrides)
    return document


@pytest.fixture
def service():
    return OnboardingService(db=AsyncMock())


@pytest.fixture
def scored_attempt():
    return PsychometricAttempt(
        id=5,
        candidate_email="priya.shah@example.com",
        candidate_name="Priya Shah",
        test_id=1,
        status=AttemptStatus.COMPLETED,
        total_score=10,
        percentage_score=67,
    )


class TestOnboardingService:
    """Test cases for the onboarding checklist link."""

    @pytest.mark.asyncio
    async def test_missing_item(self, service):
        service.db.find_one = AsyncMock(return_value=None)

        with pytest.raises(ResourceNotFoundError):
            await service.get_item(3)

    @pytest.mark.asyncio
    async def test_item_for_other_test_is_not_linkable(self, service):
        service.db.find_one = AsyncMock(return_value=item_document(psychometric_test_id=2))

        with pytest.raises(ValidationError):
            await service.check_linkable(3, 1)

    @pytest.mark.asyncio
    async def test_item_without_test_is_linkable(self, service):
        service.db.find_one = AsyncMock(return_value=item_document(psychometric_test_id=None))

        item = await service.check_linkable(3, 1)

        assert item.id == 3

    @pytest.mark.asyncio
    async def test_link_attempt_records_outcome(self, service, scored_attempt):
        service.db.find_one = AsyncMock(return_value=item_document())
        service.db.update_one = AsyncMock(return_value=item_document(
            psychometric_test_attempt_id=5,
            psychometric_test_completed=True,
            psychometric_test_score=67,
        ))

        item = await service.link_attempt(3, scored_attempt)

        collection, query, update = service.db.update_one.await_args.args
        assert collection == Collections.ONBOARDING_CHECKLISTS
        assert query == {"_id": 3}
        assert update["$set"]["psychometric_test_attempt_id"] == 5
        assert update["$set"]["psychometric_test_completed"] is True
        assert update["$set"]["psychometric_test_score"] == 67
        assert item.psychometric_test_score == 67
