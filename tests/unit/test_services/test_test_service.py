"""Unit tests for TestService.

This module contains unit tests for the test administration service,
covering test CRUD, question bank caching, question count maintenance
and guarded deletion.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from hrpulse.cache.cache_keys import CacheKeys
from hrpulse.models.question import Question
from hrpulse.models.test import PsychometricTest
from hrpulse.schemas.test_schemas import (
    QuestionCreateRequest,
    QuestionUpdateRequest,
    TestCreateRequest,
    TestUpdateRequest,
)
from hrpulse.services.test_service import TestService
from hrpulse.utils.constants import Collections, QuestionType, TestType
from hrpulse.utils.exceptions import BusinessLogicError, ResourceNotFoundError, ValidationError

CREATED_AT = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


def make_test_document(test_id=1, **overrides):
    document = {
        "_id": test_id,
        "test_name": "Logical Reasoning",
        "test_type": "cognitive",
        "description": "Pattern and deduction questions",
        "time_limit": 20,
        "total_questions": 2,
        "is_active": True,
        "created_at": CREATED_AT,
        "updated_at": CREATED_AT,
    }
    document.update(overrides)
    return document


def question_document(question_id, order, test_id=1):
    return {
        "_id": question_id,
        "test_id": test_id,
        "question_text": f"Question {question_id}",
        "question_type": "scale",
        "options": [],
        "correct_answer": None,
        "category": "openness",
        "order": order,
        "created_at": CREATED_AT,
    }


@pytest.fixture
def service():
    """Create TestService instance with mocked dependencies."""
    db = AsyncMock()
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    return TestService(db=db, cache=cache)


class TestTestAdministration:
    """Test cases for test CRUD."""

    @pytest.mark.asyncio
    async def test_create_test(self, service):
        # Arrange
        service.db.next_sequence = AsyncMock(return_value=4)
        request = TestCreateRequest(test_name="Big Five", test_type=TestType.PERSONALITY)

        # Act
        test = await service.create_test(request)

        # Assert
        assert test.id == 4
        assert test.test_type == "personality"
        assert test.total_questions == 0
        service.db.next_sequence.assert_awaited_once_with(Collections.TESTS)
        inserted = service.db.insert_one.await_args.args[1]
        assert inserted["_id"] == 4
        service.cache.delete.assert_awaited_once_with(CacheKeys.dashboard_stats())

    @pytest.mark.asyncio
    async def test_get_test_not_found(self, service):
        service.db.find_one = AsyncMock(return_value=None)

        with pytest.raises(ResourceNotFoundError):
            await service.get_test(99)

    @pytest.mark.asyncio
    async def test_list_active_tests(self, service):
        service.db.find_many = AsyncMock(return_value=[make_test_document(2), make_test_document(1)])

        tests = await service.list_tests(active_only=True)

        assert [t.id for t in tests] == [2, 1]
        args = service.db.find_many.await_args
        assert args.args[1] == {"is_active": True}
        assert args.kwargs["sort"] == [("created_at", -1), ("_id", -1)]

    @pytest.mark.asyncio
    async def test_update_test_sets_only_changed_fields(self, service):
        service.db.find_one = AsyncMock(return_value=make_test_document())
        service.db.update_one = AsyncMock(
            return_value=make_test_document(test_name="Logical Reasoning II")
        )

        test = await service.update_test(1, TestUpdateRequest(test_name="Logical Reasoning II"))

        assert test.test_name == "Logical Reasoning II"
        update = service.db.update_one.await_args.args[2]["$set"]
        assert set(update) == {"test_name", "updated_at"}

    @pytest.mark.asyncio
    async def test_update_test_rejects_invalid_value(self, service):
        service.db.find_one = AsyncMock(return_value=make_test_document())

        with pytest.raises(ValidationError):
            await service.update_test(1, TestUpdateRequest(test_name=None))

        service.db.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_test_with_attempts_requires_force(self, service):
        service.db.find_one = AsyncMock(return_value=make_test_document())
        service.db.count_documents = AsyncMock(return_value=3)

        with pytest.raises(BusinessLogicError):
            await service.delete_test(1)

        service.db.delete_many.assert_not_awaited()
        service.db.delete_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_forced_delete_cascades_to_questions(self, service):
        service.db.find_one = AsyncMock(return_value=make_test_document())
        service.db.count_documents = AsyncMock(return_value=3)
        service.db.delete_many = AsyncMock(return_value=2)

        deleted = await service.delete_test(1, force=True)

        assert deleted == 2
        service.db.delete_many.assert_awaited_once_with(Collections.QUESTIONS, {"test_id": 1})
        service.db.delete_one.assert_awaited_once_with(Collections.TESTS, {"_id": 1})
        service.cache.delete.assert_awaited_once_with(
            CacheKeys.question_bank(1), CacheKeys.dashboard_stats()
        )

    @pytest.mark.asyncio
    async def test_delete_unreferenced_test(self, service):
        service.db.find_one = AsyncMock(return_value=make_test_document())
        service.db.count_documents = AsyncMock(return_value=0)
        service.db.delete_many = AsyncMock(return_value=0)

        assert await service.delete_test(1) == 0


class TestQuestionBank:
    """Test cases for question bank access and maintenance."""

    @pytest.mark.asyncio
    async def test_get_questions_orders_and_caches(self, service):
        service.db.find_many = AsyncMock(return_value=[
            question_document(12, order=2),
            question_document(11, order=1),
            question_document(10, order=2),
        ])

        questions = await service.get_questions(1)

        assert [q.id for q in questions] == [11, 10, 12]
        key, snapshot = service.cache.set.await_args.args
        assert key == CacheKeys.question_bank(1)
        assert [item["_id"] for item in snapshot] == [11, 10, 12]

    @pytest.mark.asyncio
    async def test_get_questions_served_from_cache(self, service):
        cached = [
            Question.from_dict(question_document(10, order=1)).model_dump(mode="json", by_alias=True)
        ]
        service.cache.get = AsyncMock(return_value=cached)

        questions = await service.get_questions(1)

        assert [q.id for q in questions] == [10]
        assert questions[0].question_type == "scale"
        service.db.find_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_cached_snapshot_is_discarded(self, service):
        service.cache.get = AsyncMock(return_value=[{"unexpected": True}])
        service.db.find_many = AsyncMock(return_value=[question_document(10, order=1)])

        questions = await service.get_questions(1)

        assert [q.id for q in questions] == [10]
        service.cache.delete.assert_awaited_once_with(CacheKeys.question_bank(1))

    @pytest.mark.asyncio
    async def test_empty_question_bank_is_not_cached(self, service):
        service.db.find_many = AsyncMock(return_value=[])

        assert await service.get_questions(1) == []
        service.cache.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_question_refreshes_count(self, service):
        service.db.find_one = AsyncMock(return_value=make_test_document())
        service.db.next_sequence = AsyncMock(return_value=31)
        service.db.count_documents = AsyncMock(return_value=3)
        request = QuestionCreateRequest(
            test_id=1,
            question_text="Which shape comes next?",
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=["Circle", "Square"],
            correct_answer="Square",
            category="pattern_recognition",
            order=3,
        )

        question = await service.create_question(request)

        assert question.id == 31
        service.db.insert_one.assert_awaited_once()
        refresh = service.db.update_one.await_args
        assert refresh.args[1] == {"_id": 1}
        assert refresh.args[2]["$set"]["total_questions"] == 3
        service.cache.delete.assert_awaited_with(CacheKeys.question_bank(1))

    @pytest.mark.asyncio
    async def test_create_question_for_missing_test(self, service):
        service.db.find_one = AsyncMock(return_value=None)
        request = QuestionCreateRequest(
            test_id=5, question_text="Rate", question_type=QuestionType.SCALE
        )

        with pytest.raises(ResourceNotFoundError):
            await service.create_question(request)

        service.db.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_question_with_inconsistent_answer(self, service):
        service.db.find_one = AsyncMock(return_value=make_test_document())
        request = QuestionCreateRequest(
            test_id=1,
            question_text="Pick one",
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=["A", "B"],
            correct_answer="Z",
        )

        with pytest.raises(ValidationError):
            await service.create_question(request)

    @pytest.mark.asyncio
    async def test_update_question_invalidates_snapshot(self, service):
        service.db.find_one = AsyncMock(return_value=question_document(10, order=1))

        question = await service.update_question(10, QuestionUpdateRequest(order=7))

        assert question.order == 7
        update = service.db.update_one.await_args.args[2]["$set"]
        assert update == {"order": 7}
        service.cache.delete.assert_awaited_once_with(CacheKeys.question_bank(1))

    @pytest.mark.asyncio
    async def test_delete_question_refreshes_count(self, service):
        service.db.find_one = AsyncMock(return_value=question_document(10, order=1))
        service.db.count_documents = AsyncMock(return_value=1)

        question = await service.delete_question(10)

        assert question.id == 10
        service.db.delete_one.assert_awaited_once_with(Collections.QUESTIONS, {"_id": 10})
        assert service.db.update_one.await_args.args[2]["$set"]["total_questions"] == 1

    @pytest.mark.asyncio
    async def test_export_pairs_tests_with_questions(self, service):
        service.db.find_many = AsyncMock(side_effect=[
            [make_test_document(1)],
            [question_document(10, order=1)],
        ])

        exported = await service.export_tests()

        assert len(exported) == 1
        test, questions = exported[0]
        assert isinstance(test, PsychometricTest)
        assert [q.id for q in questions] == [10]
