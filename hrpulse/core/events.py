"""Startup and shutdown of the HRPulse service.

Startup loads the recommendation rule table into ``app.state.scoring_engine``,
connects MongoDB and ensures its indexes, then connects Redis. Only the rule
table and the database connection are required; any other failure is
logged and startup continues.
"""

from typing import Awaitable, Callable, List, NamedTuple

from fastapi import FastAPI

from hrpulse.core.config import get_settings
from hrpulse.database.mongodb import MongoDB
from hrpulse.database.redis_client import RedisClient
from hrpulse.services.recommendation_rules import RecommendationRuleTable
from hrpulse.services.scoring_service import ScoringEngine
from hrpulse.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


class LifecycleTask(NamedTuple):
    name: str
    run: Callable[[], Awaitable[None]]
    critical: bool = False


def startup_tasks(app: FastAPI) -> List[LifecycleTask]:
    async def load_rules() -> None:
        rule_table = RecommendationRuleTable.from_settings(settings.RECOMMENDATION_RULES_PATH)
        app.state.scoring_engine = ScoringEngine(rule_table=rule_table)
        logger.info(
            f"Loaded {len(rule_table)} recommendation rules",
            extra={"source": settings.RECOMMENDATION_RULES_PATH or "built-in"},
        )

    async def connect_database() -> None:
        await MongoDB.connect(url=settings.get_database_url(), db_name=settings.get_database_name())

    async def ensure_indexes() -> None:
        await MongoDB.create_indexes()

    async def connect_cache() -> None:
        if not settings.ENABLE_CACHE:
            logger.info("Caching disabled, not connecting to Redis")
            return
        await RedisClient.connect(url=settings.get_redis_url())

    return [
        LifecycleTask("recommendation rules", load_rules, critical=True),
        LifecycleTask("database connection", connect_database, critical=True),
        LifecycleTask("database indexes", ensure_indexes),
        LifecycleTask("redis connection", connect_cache),
    ]


def shutdown_tasks(app: FastAPI) -> List[LifecycleTask]:
    return [
        LifecycleTask("redis connection", RedisClient.disconnect),
        LifecycleTask("database connection", MongoDB.disconnect),
    ]


async def run_startup(app: FastAPI) -> List[str]:
    """Run the startup tasks in order.

    Returns:
        Names of the non-critical tasks that failed

    Raises:
        RuntimeError: If a critical task fails
    """
    failed: List[str] = []
    for task in startup_tasks(app):
        try:
            await task.run()
        except Exception as e:
            logger.error(f"Startup task '{task.name}' failed: {e}", exc_info=True)
            if task.critical:
                raise RuntimeError(f"Critical startup task failed: {task.name}") from e
            failed.append(task.name)
        else:
            logger.info(f"Startup task '{task.name}' done")

    if failed:
        logger.warning(f"Started with {len(failed)} failed tasks", extra={"failed_tasks": failed})
    else:
        logger.info("Application startup complete")
    return failed


async def run_shutdown(app: FastAPI) -> None:
    """Run every shutdown task, logging failures instead of raising."""
    for task in shutdown_tasks(app):
        try:
            await task.run()
        except Exception as e:
            logger.error(f"Shutdown task '{task.name}' failed: {e}", exc_info=True)
    logger.info("Application shutdown complete")


def create_start_app_handler(app: FastAPI) -> Callable[[], Awaitable[List[str]]]:
    async def start_app() -> List[str]:
        return await run_startup(app)

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable[[], Awaitable[None]]:
    async def stop_app() -> None:
        await run_shutdown(app)

    return stop_app


__all__ = ["create_start_app_handler", "create_stop_app_handler", "run_startup", "run_shutdown"]
