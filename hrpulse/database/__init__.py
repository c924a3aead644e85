"""Database connection managers for MongoDB and Redis."""

from hrpulse.database.mongodb import MongoDB, MongoDBOperations
from hrpulse.database.redis_client import RedisClient

__all__ = [
    "MongoDB",
    "MongoDBOperations",
    "RedisClient",
]
