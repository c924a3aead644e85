"""Test administration service for HRPulse.

This service manages psychometric tests and their question banks, and
serves ordered question bank snapshots to the scoring path.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from hrpulse.cache.cache_keys import CacheKeys
from hrpulse.cache.cache_manager import CacheManager
from hrpulse.core.config import get_settings
from hrpulse.database.mongodb import MongoDBOperations
from hrpulse.models.question import Question, order_question_bank
from hrpulse.models.test import PsychometricTest
from hrpulse.schemas.test_schemas import (
    QuestionCreateRequest,
    QuestionUpdateRequest,
    TestCreateRequest,
    TestUpdateRequest,
)
from hrpulse.utils.constants import Collections
from hrpulse.utils.datetime_utils import utc_now
from hrpulse.utils.exceptions import (
    BusinessLogicError,
    ResourceNotFoundError,
    validation_error_from_pydantic,
)
from hrpulse.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


class TestService:
    """Service for managing psychometric tests and question banks."""

    __test__ = False

    def __init__(self, db=None, cache: Optional[CacheManager] = None):
        """Initialize test service.

        Args:
            db: Database operations (defaults to MongoDBOperations)
            cache: Cache manager (defaults to a Redis-backed CacheManager)
        """
        self.db = db or MongoDBOperations
        self.cache = cache or CacheManager()

    # Tests

    async def list_tests(self, active_only: bool = False) -> List[PsychometricTest]:
        """List tests, newest first.

        Args:
            active_only: Only return tests flagged active

        Returns:
            List[PsychometricTest]: Tests
        """
        filter_dict: Dict[str, Any] = {"is_active": True} if active_only else {}
        documents = await self.db.find_many(
            Collections.TESTS,
            filter_dict,
            sort=[("created_at", -1), ("_id", -1)],
        )
        return [PsychometricTest.from_dict(doc) for doc in documents]

    async def get_test(self, test_id: int) -> PsychometricTest:
        """Get a test by id.

        Raises:
            ResourceNotFoundError: If the test does not exist
        """
        document = await self.db.find_one(Collections.TESTS, {"_id": test_id})
        if document is None:
            raise ResourceNotFoundError(
                f"Psychometric test {test_id} not found",
                resource_type="psychometric_test",
                resource_id=test_id,
            )
        return PsychometricTest.from_dict(document)

    async def create_test(self, request: TestCreateRequest) -> PsychometricTest:
        """Create a test with an empty question bank.

        Args:
            request: Test creation request

        Returns:
            PsychometricTest: Created test
        """
        test_id = await self.db.next_sequence(Collections.TESTS)
        test = PsychometricTest(id=test_id, **request.model_dump())

        await self.db.insert_one(Collections.TESTS, test.to_dict())
        await self.cache.delete(CacheKeys.dashboard_stats())

        logger.info(
            f"Psychometric test created: {test.id}",
            extra={"test_id": test.id, "test_type": test.test_type}
        )
        return test

    async def update_test(self, test_id: int, request: TestUpdateRequest) -> PsychometricTest:
        """Apply a partial update to a test.

        Raises:
            ResourceNotFoundError: If the test does not exist
            ValidationError: If the update produces an invalid test
        """
        existing = await self.get_test(test_id)
        changes = request.model_dump(exclude_unset=True)
        changes["updated_at"] = utc_now()

        try:
            updated = PsychometricTest.model_validate({**existing.to_dict(), **changes})
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, "Invalid test update")

        document = await self.db.update_one(
            Collections.TESTS,
            {"_id": test_id},
            {"$set": updated.to_dict(include=set(changes))},
        )
        if document is None:
            raise ResourceNotFoundError(
                f"Psychometric test {test_id} not found",
                resource_type="psychometric_test",
                resource_id=test_id,
            )

        logger.info(f"Psychometric test updated: {test_id}", extra={"fields": sorted(changes)})
        return PsychometricTest.from_dict(document)

    async def delete_test(self, test_id: int, force: bool = False) -> int:
        """Delete a test and its questions.

        Attempts are retained. A test referenced by attempts is only deleted
        when ``force`` is set.

        Args:
            test_id: Test to delete
            force: Delete even if attempts reference the test

        Returns:
            int: Number of questions deleted with the test

        Raises:
            ResourceNotFoundError: If the test does not exist
            BusinessLogicError: If attempts reference the test and force is not set
        """
        await self.get_test(test_id)

        attempt_count = await self.db.count_documents(Collections.ATTEMPTS, {"test_id": test_id})
        if attempt_count and not force:
            raise BusinessLogicError(
                f"Psychometric test {test_id} has {attempt_count} attempts; "
                "pass force=true to delete it anyway",
                operation="delete_test",
                resource_id=test_id,
                details={"attempt_count": attempt_count},
            )

        deleted_questions = await self.db.delete_many(Collections.QUESTIONS, {"test_id": test_id})
        await self.db.delete_one(Collections.TESTS, {"_id": test_id})
        await self.cache.delete(CacheKeys.question_bank(test_id), CacheKeys.dashboard_stats())

        logger.info(
            f"Psychometric test deleted: {test_id}",
            extra={
                "test_id": test_id,
                "deleted_questions": deleted_questions,
                "retained_attempts": attempt_count,
            }
        )
        return deleted_questions

    # Question bank

    async def get_questions(self, test_id: int) -> List[Question]:
        """Get the ordered question bank of a test.

        Served from the cached snapshot when present. A test without
        questions yields an empty list.

        Args:
            test_id: Test id

        Returns:
            List[Question]: Questions sorted by order, then id
        """
        cache_key = CacheKeys.question_bank(test_id)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            try:
                return [Question.model_validate(item) for item in cached]
            except PydanticValidationError as e:
                logger.warning(f"Discarding stale question bank snapshot for test {test_id}: {str(e)}")
                await self.cache.delete(cache_key)

        documents = await self.db.find_many(
            Collections.QUESTIONS,
            {"test_id": test_id},
            sort=[("order", 1), ("_id", 1)],
        )
        questions = order_question_bank(Question.from_dict(doc) for doc in documents)

        if questions:
            await self.cache.set(
                cache_key,
                [q.model_dump(mode="json", by_alias=True) for q in questions],
                ttl=settings.QUESTION_BANK_CACHE_TTL,
            )
        return questions

    async def get_question(self, question_id: int) -> Question:
        """Get a question by id.

        Raises:
            ResourceNotFoundError: If the question does not exist
        """
        document = await self.db.find_one(Collections.QUESTIONS, {"_id": question_id})
        if document is None:
            raise ResourceNotFoundError(
                f"Psychometric question {question_id} not found",
                resource_type="psychometric_question",
                resource_id=question_id,
            )
        return Question.from_dict(document)

    async def create_question(self, request: QuestionCreateRequest) -> Question:
        """Add a question to a test and recompute its question count.

        Raises:
            ResourceNotFoundError: If the owning test does not exist
            ValidationError: If options or correct answer are inconsistent
        """
        await self.get_test(request.test_id)

        try:
            question = Question(**request.model_dump())
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, "Invalid question")

        question.id = await self.db.next_sequence(Collections.QUESTIONS)
        await self.db.insert_one(Collections.QUESTIONS, question.to_dict())
        await self._refresh_question_bank(question.test_id)

        logger.info(
            f"Psychometric question created: {question.id}",
            extra={"question_id": question.id, "test_id": question.test_id}
        )
        return question

    async def update_question(self, question_id: int, request: QuestionUpdateRequest) -> Question:
        """Apply a partial update to a question.

        Raises:
            ResourceNotFoundError: If the question does not exist
            ValidationError: If the update produces an invalid question
        """
        existing = await self.get_question(question_id)
        changes = request.model_dump(exclude_unset=True)

        try:
            updated = Question.model_validate({**existing.to_dict(), **changes})
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, "Invalid question update")

        await self.db.update_one(
            Collections.QUESTIONS,
            {"_id": question_id},
            {"$set": updated.to_dict(include=set(changes))},
        )
        await self.cache.delete(CacheKeys.question_bank(updated.test_id))

        logger.info(f"Psychometric question updated: {question_id}", extra={"fields": sorted(changes)})
        return updated

    async def delete_question(self, question_id: int) -> Question:
        """Delete a question and recompute its test's question count.

        Returns:
            Question: The deleted question
        """
        question = await self.get_question(question_id)
        await self.db.delete_one(Collections.QUESTIONS, {"_id": question_id})
        await self._refresh_question_bank(question.test_id)

        logger.info(
            f"Psychometric question deleted: {question_id}",
            extra={"question_id": question_id, "test_id": question.test_id}
        )
        return question

    async def export_tests(self) -> List[Tuple[PsychometricTest, List[Question]]]:
        """Every test paired with its ordered question bank."""
        tests = await self.list_tests()
        return [(test, await self.get_questions(test.id)) for test in tests]

    async def _refresh_question_bank(self, test_id: int) -> None:
        """Recompute total_questions and drop the cached snapshot."""
        total = await self.db.count_documents(Collections.QUESTIONS, {"test_id": test_id})
        await self.db.update_one(
            Collections.TESTS,
            {"_id": test_id},
            {"$set": {"total_questions": total, "updated_at": utc_now()}},
        )
        await self.cache.delete(CacheKeys.question_bank(test_id))


__all__ = ["TestService"]
