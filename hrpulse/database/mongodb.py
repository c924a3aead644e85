"""MongoDB access for HRPulse.

``MongoDB`` owns the motor client for the process; ``MongoDBOperations`` is
the small document API the services are written against (and that their
tests replace with an ``AsyncMock``). Driver failures always surface as
``DatabaseError``, never as an empty result.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING, IndexModel, ReturnDocument
from pymongo.errors import PyMongoError

from hrpulse.core.config import get_settings
from hrpulse.utils.constants import Collections
from hrpulse.utils.exceptions import DatabaseError
from hrpulse.utils.logger import get_database_logger, log_database_operation

settings = get_settings()
logger = get_database_logger()

INDEXES: Dict[str, List[IndexModel]] = {
    Collections.TESTS: [
        IndexModel([("created_at", DESCENDING)]),
        IndexModel([("test_type", ASCENDING), ("is_active", ASCENDING)]),
    ],
    Collections.QUESTIONS: [
        IndexModel([("test_id", ASCENDING), ("order", ASCENDING), ("_id", ASCENDING)]),
    ],
    Collections.ATTEMPTS: [
        IndexModel([("test_id", ASCENDING), ("started_at", DESCENDING)]),
        IndexModel([("candidate_email", ASCENDING), ("started_at", DESCENDING)]),
        IndexModel([("status", ASCENDING)]),
    ],
    Collections.ONBOARDING_CHECKLISTS: [
        IndexModel([("employee_id", ASCENDING), ("order", ASCENDING)]),
    ],
}


class MongoDB:
    """Process-wide motor client, used through its classmethods."""

    _client: Optional[AsyncIOMotorClient] = None
    _database: Optional[AsyncIOMotorDatabase] = None
    _lock: asyncio.Lock = asyncio.Lock()

    @classmethod
    async def connect(cls, url: Optional[str] = None, db_name: Optional[str] = None) -> None:
        """Open the client and check the server answers.

        Raises:
            DatabaseError: If the server cannot be reached
        """
        async with cls._lock:
            if cls._client is not None:
                logger.warning("MongoDB already connected")
                return

            database_name = db_name or settings.get_database_name()
            client = AsyncIOMotorClient(
                url or settings.get_database_url(),
                maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
                minPoolSize=settings.MONGODB_MIN_POOL_SIZE,
                maxIdleTimeMS=settings.MONGODB_MAX_IDLE_TIME_MS,
                connectTimeoutMS=settings.MONGODB_CONNECT_TIMEOUT_MS,
                serverSelectionTimeoutMS=5000,
                retryWrites=True,
                retryReads=True,
                tz_aware=True,
            )
            try:
                await client.admin.command("ping")
            except PyMongoError as e:
                client.close()
                raise DatabaseError(
                    f"MongoDB connection failed: {e}",
                    operation="connect",
                    database=database_name,
                    cause=e,
                ) from e

            cls._client, cls._database = client, client[database_name]
            logger.info(
                "MongoDB connected",
                extra={"database": database_name, "pool_size": settings.MONGODB_MAX_POOL_SIZE},
            )

    @classmethod
    async def disconnect(cls) -> None:
        async with cls._lock:
            if cls._client is None:
                return
            cls._client.close()
            cls._client, cls._database = None, None
            logger.info("MongoDB disconnected")

    @classmethod
    async def ping(cls) -> bool:
        """True when connected and the server answers ``ping``."""
        if cls._client is None:
            return False
        try:
            await cls._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False
        return True

    @classmethod
    def get_collection(cls, name: str) -> AsyncIOMotorCollection:
        if cls._database is None:
            raise DatabaseError("MongoDB not connected", collection=name)
        return cls._database[name]

    @classmethod
    async def create_indexes(cls) -> Dict[str, List[str]]:
        """Ensure ``INDEXES``; returns the index names per collection."""
        created: Dict[str, List[str]] = {}
        for collection_name, indexes in INDEXES.items():
            async with driver_call("create_indexes", collection_name):
                created[collection_name] = await cls.get_collection(collection_name).create_indexes(indexes)
            logger.info(
                f"Ensured {len(indexes)} indexes on {collection_name}",
                extra={"indexes": created[collection_name]},
            )
        return created


@asynccontextmanager
async def driver_call(
    operation: str,
    collection: str,
    query: Optional[Dict[str, Any]] = None,
) -> AsyncIterator[None]:
    """Time a driver call and turn ``PyMongoError`` into ``DatabaseError``."""
    started = time.perf_counter()
    try:
        yield
    except PyMongoError as e:
        raise DatabaseError(
            f"MongoDB {operation} on {collection} failed",
            operation=operation,
            collection=collection,
            query=query,
            cause=e,
        ) from e
    log_database_operation(operation, collection, (time.perf_counter() - started) * 1000)


class MongoDBOperations:
    """Document operations used by the services.

    Every method raises ``DatabaseError`` when the driver fails.
    """

    @staticmethod
    async def find_one(
        collection_name: str,
        filter_dict: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        async with driver_call("find_one", collection_name, filter_dict):
            return await MongoDB.get_collection(collection_name).find_one(filter_dict, projection=projection)

    @staticmethod
    async def find_many(
        collection_name: str,
        filter_dict: Optional[Dict[str, Any]] = None,
        projection: Optional[Dict[str, int]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """All matching documents; ``limit=0`` means no limit."""
        cursor = MongoDB.get_collection(collection_name).find(
            filter_dict or {},
            projection=projection,
            sort=sort,
            skip=skip,
            limit=limit,
        )
        async with driver_call("find", collection_name, filter_dict):
            return await cursor.to_list(length=None)

    @staticmethod
    async def count_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> int:
        async with driver_call("count", collection_name, filter_dict):
            return await MongoDB.get_collection(collection_name).count_documents(filter_dict or {})

    @staticmethod
    async def insert_one(collection_name: str, document: Dict[str, Any]) -> Any:
        """Insert ``document`` and return its ``_id``."""
        async with driver_call("insert", collection_name):
            result = await MongoDB.get_collection(collection_name).insert_one(document)
        return result.inserted_id

    @staticmethod
    async def update_one(
        collection_name: str,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Apply ``update_dict`` to one document.

        Returns:
            The document as stored after the update, or None if nothing matched
        """
        async with driver_call("update", collection_name, filter_dict):
            return await MongoDB.get_collection(collection_name).find_one_and_update(
                filter_dict,
                update_dict,
                return_document=ReturnDocument.AFTER,
            )

    @staticmethod
    async def delete_one(collection_name: str, filter_dict: Dict[str, Any]) -> int:
        async with driver_call("delete", collection_name, filter_dict):
            result = await MongoDB.get_collection(collection_name).delete_one(filter_dict)
        return result.deleted_count

    @staticmethod
    async def delete_many(collection_name: str, filter_dict: Dict[str, Any]) -> int:
        async with driver_call("delete_many", collection_name, filter_dict):
            result = await MongoDB.get_collection(collection_name).delete_many(filter_dict)
        return result.deleted_count

    @staticmethod
    async def next_sequence(name: str) -> int:
        """Next integer id for ``name`` (normally a collection), starting at 1."""
        async with driver_call("next_sequence", Collections.COUNTERS):
            counter = await MongoDB.get_collection(Collections.COUNTERS).find_one_and_update(
                {"_id": name},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return int(counter["seq"])


__all__ = ["MongoDB", "MongoDBOperations", "INDEXES", "driver_call"]
