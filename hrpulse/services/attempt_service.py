"""Attempt submission and query service for HRPulse.

This service runs the submission path: it fetches the test and its question
bank, scores the attempt, persists it and optionally links it into an
onboarding checklist item. It also serves attempt queries, administrative
rescoring and dashboard statistics.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from hrpulse.cache.cache_keys import CacheKeys
from hrpulse.cache.cache_manager import CacheManager
from hrpulse.core.config import get_settings
from hrpulse.database.mongodb import MongoDBOperations
from hrpulse.models.attempt import PsychometricAttempt
from hrpulse.schemas.attempt_schemas import (
    AttemptSubmissionRequest,
    AttemptUpdateRequest,
    DashboardStatsResponse,
)
from hrpulse.services.onboarding_service import OnboardingService
from hrpulse.services.scoring_service import ScoringEngine, round_half_up
from hrpulse.services.test_service import TestService
from hrpulse.utils.constants import AttemptStatus, Collections, ScoreBand
from hrpulse.utils.datetime_utils import calculate_duration_seconds, utc_now
from hrpulse.utils.exceptions import (
    BusinessLogicError,
    ResourceNotFoundError,
    validation_error_from_pydantic,
)
from hrpulse.utils.logger import PerformanceLogger, get_logger

settings = get_settings()
logger = get_logger(__name__)

SCORE_FIELDS = ("total_score", "percentage_score", "results", "scoring_diagnostics")


class AttemptService:
    """Service for psychometric test attempts."""

    def __init__(
        self,
        db=None,
        cache: Optional[CacheManager] = None,
        test_service: Optional[TestService] = None,
        onboarding_service: Optional[OnboardingService] = None,
        engine: Optional[ScoringEngine] = None,
    ):
        """Initialize attempt service.

        Args:
            db: Database operations (defaults to MongoDBOperations)
            cache: Cache manager
            test_service: Question bank accessor
            onboarding_service: Onboarding checklist link
            engine: Scoring engine (defaults to the built-in rule table)
        """
        self.db = db or MongoDBOperations
        self.cache = cache or CacheManager()
        self.test_service = test_service or TestService(db=self.db, cache=self.cache)
        self.onboarding_service = onboarding_service or OnboardingService(db=self.db)
        self.engine = engine or ScoringEngine()

    async def submit_attempt(
        self,
        request: AttemptSubmissionRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> PsychometricAttempt:
        """Score and store a submitted attempt.

        Args:
            request: Submission payload
            ip_address: Client address
            user_agent: Client user agent

        Returns:
            PsychometricAttempt: Stored attempt with scores and diagnostics

        Raises:
            ResourceNotFoundError: If the test or checklist item does not exist
            ValidationError: If the checklist item requires a different test
        """
        test = await self.test_service.get_test(request.test_id)
        if request.onboarding_checklist_item_id is not None:
            await self.onboarding_service.check_linkable(
                request.onboarding_checklist_item_id, test.id
            )

        questions = await self.test_service.get_questions(test.id)

        started_at = request.started_at or utc_now()
        completed_at = request.completed_at
        if completed_at is None and request.status == AttemptStatus.COMPLETED:
            completed_at = utc_now()
        time_spent = request.time_spent
        if time_spent is None and completed_at is not None:
            time_spent = calculate_duration_seconds(started_at, completed_at)

        attempt = PsychometricAttempt(
            candidate_email=request.candidate_email,
            candidate_name=request.candidate_name,
            test_id=test.id,
            responses=request.responses,
            started_at=started_at,
            completed_at=completed_at,
            time_spent=time_spent,
            status=request.status,
            ip_address=ip_address,
            user_agent=user_agent[:500] if user_agent else None,
        )

        with PerformanceLogger("score_attempt", logger=logger, extra={"test_id": test.id}):
            attempt = self.engine.apply(attempt, test, questions)

        attempt.id = await self.db.next_sequence(Collections.ATTEMPTS)
        await self.db.insert_one(Collections.ATTEMPTS, attempt.to_dict())
        await self.cache.delete(CacheKeys.dashboard_stats())

        logger.info(
            f"Attempt submitted: {attempt.id}",
            extra={
                "attempt_id": attempt.id,
                "test_id": test.id,
                "status": attempt.status,
                "percentage_score": attempt.percentage_score,
                "response_count": len(attempt.responses),
            }
        )

        if request.onboarding_checklist_item_id is not None:
            await self.onboarding_service.link_attempt(
                request.onboarding_checklist_item_id, attempt
            )

        return attempt

    async def list_attempts(
        self,
        test_id: Optional[int] = None,
        candidate_email: Optional[str] = None,
    ) -> List[PsychometricAttempt]:
        """List attempts, most recently started first.

        Args:
            test_id: Only attempts at this test
            candidate_email: Only attempts by this candidate

        Returns:
            List[PsychometricAttempt]: Attempts
        """
        filter_dict: Dict[str, Any] = {}
        if test_id is not None:
            filter_dict["test_id"] = test_id
        if candidate_email:
            filter_dict["candidate_email"] = candidate_email

        documents = await self.db.find_many(
            Collections.ATTEMPTS,
            filter_dict,
            sort=[("started_at", -1), ("_id", -1)],
        )
        return [PsychometricAttempt.from_dict(doc) for doc in documents]

    async def get_attempt(self, attempt_id: int) -> PsychometricAttempt:
        """Get an attempt by id.

        Raises:
            ResourceNotFoundError: If the attempt does not exist
        """
        document = await self.db.find_one(Collections.ATTEMPTS, {"_id": attempt_id})
        if document is None:
            raise ResourceNotFoundError(
                f"Psychometric test attempt {attempt_id} not found",
                resource_type="psychometric_test_attempt",
                resource_id=attempt_id,
            )
        return PsychometricAttempt.from_dict(document)

    async def update_attempt(
        self,
        attempt_id: int,
        request: AttemptUpdateRequest,
    ) -> PsychometricAttempt:
        """Apply a partial update to an attempt without rescoring it.

        Raises:
            ResourceNotFoundError: If the attempt does not exist
            BusinessLogicError: If the status change is not allowed
            ValidationError: If the update produces an invalid attempt
        """
        existing = await self.get_attempt(attempt_id)
        changes = request.model_dump(exclude_unset=True)

        if "status" in changes:
            current = AttemptStatus(existing.status)
            target = AttemptStatus(changes["status"])
            if not current.can_transition_to(target):
                raise BusinessLogicError(
                    f"Attempt {attempt_id} is {current.value} and cannot become {target.value}",
                    operation="update_attempt",
                    resource_id=attempt_id,
                )
            if (
                target == AttemptStatus.COMPLETED
                and existing.completed_at is None
                and changes.get("completed_at") is None
            ):
                changes["completed_at"] = utc_now()

        try:
            updated = PsychometricAttempt.model_validate({**existing.to_dict(), **changes})
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, "Invalid attempt update")

        if changes:
            await self.db.update_one(
                Collections.ATTEMPTS,
                {"_id": attempt_id},
                {"$set": updated.to_dict(include=set(changes))},
            )
            await self.cache.delete(CacheKeys.dashboard_stats())

        logger.info(f"Attempt updated: {attempt_id}", extra={"fields": sorted(changes)})
        return updated

    async def rescore_attempt(self, attempt_id: int) -> PsychometricAttempt:
        """Recompute an attempt's scores against the current question bank.

        Raises:
            ResourceNotFoundError: If the attempt or its test does not exist
        """
        attempt = await self.get_attempt(attempt_id)
        test = await self.test_service.get_test(attempt.test_id)
        questions = await self.test_service.get_questions(test.id)

        rescored = self.engine.apply(attempt, test, questions)
        if rescored is attempt:
            logger.warning(
                f"Attempt {attempt_id} not rescored: test {test.id} has no questions",
                extra={"attempt_id": attempt_id, "test_id": test.id}
            )
            return attempt

        await self.db.update_one(
            Collections.ATTEMPTS,
            {"_id": attempt_id},
            {"$set": rescored.to_dict(include=set(SCORE_FIELDS))},
        )
        await self.cache.delete(CacheKeys.dashboard_stats())

        logger.info(
            f"Attempt rescored: {attempt_id}",
            extra={
                "attempt_id": attempt_id,
                "previous_percentage_score": attempt.percentage_score,
                "percentage_score": rescored.percentage_score,
            }
        )
        return rescored

    async def get_dashboard_stats(self) -> DashboardStatsResponse:
        """Aggregate test and attempt statistics.

        The average covers completed attempts; an unscored completed attempt
        counts as zero.
        """
        cache_key = CacheKeys.dashboard_stats()
        cached = await self.cache.get(cache_key)
        if cached is not None:
            try:
                return DashboardStatsResponse.model_validate(cached)
            except PydanticValidationError:
                await self.cache.delete(cache_key)

        total_tests = await self.db.count_documents(Collections.TESTS)
        total_attempts = await self.db.count_documents(Collections.ATTEMPTS)
        completed = await self.db.find_many(
            Collections.ATTEMPTS,
            {"status": AttemptStatus.COMPLETED.value},
            projection={"percentage_score": 1},
        )

        scores = [doc.get("percentage_score") for doc in completed]
        average_score = (
            round_half_up(sum(score or 0 for score in scores) / len(scores)) if scores else 0
        )

        distribution = {band.value: 0 for band in ScoreBand}
        for score in scores:
            if score is not None:
                distribution[ScoreBand.from_percentage(score).value] += 1

        stats = DashboardStatsResponse(
            total_tests=total_tests,
            total_attempts=total_attempts,
            completed_attempts=len(completed),
            average_score=average_score,
            score_distribution=distribution,
        )
        await self.cache.set(cache_key, stats.model_dump(mode="json"), ttl=settings.DASHBOARD_CACHE_TTL)
        return stats


__all__ = ["AttemptService"]
