#!/usr/bin/env python3
"""Sample data seeding script for the HRPulse psychometric engine.

Creates a Big Five personality test with scale questions and a short
cognitive test with multiple-choice questions, so a fresh database has
something to score against.

Usage:
    python scripts/setup/seed_psychometric_data.py [--force] [--database NAME]
"""

import argparse
import asyncio
from typing import Any, Dict, List

from hrpulse.core.config import get_settings
from hrpulse.database.mongodb import MongoDB
from hrpulse.schemas.test_schemas import QuestionCreateRequest, TestCreateRequest
from hrpulse.services.test_service import TestService
from hrpulse.utils.constants import QuestionType, TestType
from hrpulse.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

BIG_FIVE_STATEMENTS: Dict[str, List[str]] = {
    "openness": [
        "I enjoy trying new approaches to familiar problems.",
        "I am curious about ideas outside my own field.",
    ],
    "conscientiousness": [
        "I finish tasks before their deadlines.",
        "I keep my work organised and easy to follow.",
    ],
    "extraversion": [
        "I feel energised after working with a group.",
        "I am comfortable presenting to people I do not know.",
    ],
    "agreeableness": [
        "I try to see a disagreement from the other side.",
        "I go out of my way to help new colleagues.",
    ],
    "neuroticism": [
        "I stay calm when plans change at short notice.",
        "Criticism of my work rarely unsettles me.",
    ],
}

COGNITIVE_QUESTIONS: List[Dict[str, Any]] = [
    {
        "question_text": "Which number completes the series 3, 6, 12, 24, ...?",
        "options": ["30", "36", "48", "60"],
        "correct_answer": "48",
        "category": "numerical_reasoning",
    },
    {
        "question_text": "All analysts are graduates. Some graduates are managers. Which statement must be true?",
        "options": [
            "All managers are analysts",
            "Some analysts are managers",
            "No conclusion about analysts and managers follows",
            "All graduates are analysts",
        ],
        "correct_answer": "No conclusion about analysts and managers follows",
        "category": "logical_reasoning",
    },
    {
        "question_text": "A report takes 6 hours for 2 people. How long for 3 people at the same rate?",
        "options": ["3 hours", "4 hours", "5 hours", "9 hours"],
        "correct_answer": "4 hours",
        "category": "numerical_reasoning",
    },
    {
        "question_text": "Which word is closest in meaning to 'concise'?",
        "options": ["Brief", "Careful", "Accurate", "Complete"],
        "correct_answer": "Brief",
        "category": "verbal_reasoning",
    },
]


class PsychometricSeeder:
    """Creates sample tests and question banks through the test service."""

    def __init__(self, service: TestService):
        self.service = service

    async def seed(self, force: bool = False) -> bool:
        """Seed the sample tests.

        Args:
            force: Create the tests even if tests already exist

        Returns:
            bool: True if anything was created
        """
        existing = await self.service.list_tests()
        if existing and not force:
            logger.warning(
                f"{len(existing)} tests already exist. Use --force to seed anyway."
            )
            return False

        await self._seed_personality_test()
        await self._seed_cognitive_test()
        return True

    async def _seed_personality_test(self) -> None:
        test = await self.service.create_test(TestCreateRequest(
            test_name="Big Five Personality Profile",
            test_type=TestType.PERSONALITY,
            description="Self-rated statements across the five personality factors.",
            instructions="Rate each statement from 1 (strongly disagree) to 5 (strongly agree).",
            time_limit=15,
        ))

        order = 1
        for trait, statements in BIG_FIVE_STATEMENTS.items():
            for statement in statements:
                await self.service.create_question(QuestionCreateRequest(
                    test_id=test.id,
                    question_text=statement,
                    question_type=QuestionType.SCALE,
                    category=trait,
                    order=order,
                ))
                order += 1

        logger.info(f"Created {TestType.PERSONALITY.display_name} test {test.id} with {order - 1} questions")

    async def _seed_cognitive_test(self) -> None:
        test = await self.service.create_test(TestCreateRequest(
            test_name="General Reasoning",
            test_type=TestType.COGNITIVE,
            description="Short numerical, logical and verbal reasoning items.",
            instructions="Choose the single best answer for each question.",
            time_limit=10,
        ))

        for order, question in enumerate(COGNITIVE_QUESTIONS, start=1):
            await self.service.create_question(QuestionCreateRequest(
                test_id=test.id,
                question_type=QuestionType.MULTIPLE_CHOICE,
                order=order,
                **question,
            ))

        logger.info(
            f"Created {TestType.COGNITIVE.display_name} test {test.id} "
            f"with {len(COGNITIVE_QUESTIONS)} questions"
        )


async def run(args: argparse.Namespace) -> bool:
    settings = get_settings()
    await MongoDB.connect(db_name=args.database or settings.get_database_name())
    try:
        await MongoDB.create_indexes()
        return await PsychometricSeeder(TestService()).seed(force=args.force)
    finally:
        await MongoDB.disconnect()


def main() -> int:
    """Main entry point for the seeding script."""
    parser = argparse.ArgumentParser(description="Seed sample psychometric tests")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Seed even if tests already exist",
    )
    parser.add_argument(
        "--database",
        help="Database name (defaults to the configured database)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level",
    )

    args = parser.parse_args()
    setup_logging(environment=get_settings().APP_ENV, log_level=args.log_level)

    if asyncio.run(run(args)):
        logger.info("Sample psychometric data seeded")
        return 0
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
