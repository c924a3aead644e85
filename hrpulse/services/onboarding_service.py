"""Onboarding checklist link for psychometric attempts."""

from typing import Optional

from hrpulse.database.mongodb import MongoDBOperations
from hrpulse.models.attempt import PsychometricAttempt
from hrpulse.models.onboarding import OnboardingChecklistItem
from hrpulse.utils.constants import Collections
from hrpulse.utils.datetime_utils import utc_now
from hrpulse.utils.exceptions import ResourceNotFoundError, ValidationError
from hrpulse.utils.logger import get_logger

logger = get_logger(__name__)


class OnboardingService:
    """Links attempts into onboarding checklist items."""

    def __init__(self, db=None):
        self.db = db or MongoDBOperations

    async def get_item(self, item_id: int) -> OnboardingChecklistItem:
        """Get a checklist item by id.

        Raises:
            ResourceNotFoundError: If the item does not exist
        """
        document = await self.db.find_one(Collections.ONBOARDING_CHECKLISTS, {"_id": item_id})
        if document is None:
            raise ResourceNotFoundError(
                f"Onboarding checklist item {item_id} not found",
                resource_type="onboarding_checklist_item",
                resource_id=item_id,
            )
        return OnboardingChecklistItem.from_dict(document)

    async def check_linkable(self, item_id: int, test_id: int) -> OnboardingChecklistItem:
        """Check that an attempt at ``test_id`` may be linked to the item.

        Args:
            item_id: Checklist item id
            test_id: Test of the attempt

        Returns:
            OnboardingChecklistItem: The item

        Raises:
            ResourceNotFoundError: If the item does not exist
            ValidationError: If the item requires a different test
        """
        item = await self.get_item(item_id)
        if item.psychometric_test_id is not None and item.psychometric_test_id != test_id:
            raise ValidationError(
                f"Checklist item {item_id} requires psychometric test "
                f"{item.psychometric_test_id}, not {test_id}",
                field="onboarding_checklist_item_id",
                value=item_id,
            )
        return item

    async def link_attempt(
        self,
        item_id: int,
        attempt: PsychometricAttempt,
    ) -> Optional[OnboardingChecklistItem]:
        """Record an attempt and its outcome on a checklist item.

        Args:
            item_id: Checklist item id
            attempt: Stored attempt

        Returns:
            OnboardingChecklistItem: Updated item
        """
        await self.check_linkable(item_id, attempt.test_id)

        document = await self.db.update_one(
            Collections.ONBOARDING_CHECKLISTS,
            {"_id": item_id},
            {
                "$set": {
                    "psychometric_test_id": attempt.test_id,
                    "psychometric_test_attempt_id": attempt.id,
                    "psychometric_test_completed": attempt.is_completed,
                    "psychometric_test_score": attempt.percentage_score,
                    "updated_at": utc_now(),
                }
            },
        )

        logger.info(
            f"Linked attempt {attempt.id} to onboarding checklist item {item_id}",
            extra={"attempt_id": attempt.id, "item_id": item_id}
        )
        return OnboardingChecklistItem.from_dict(document) if document else None


__all__ = ["OnboardingService"]
