"""Cache key definitions for HRPulse.

This module defines the cache key patterns used for question bank
snapshots and dashboard statistics.
"""

from enum import Enum
from typing import Union


class CacheNamespace(str, Enum):
    """Cache namespaces for different data types."""

    QUESTION_BANK = "question_bank"
    DASHBOARD = "dashboard"


class CacheKeys:
    """Cache key generation."""

    SEPARATOR = ":"
    PREFIX = "hrpulse"

    PATTERNS = {
        "question_bank": "{prefix}:{namespace}:test:{test_id}",
        "dashboard_stats": "{prefix}:{namespace}:stats",
    }

    @classmethod
    def question_bank(cls, test_id: Union[int, str]) -> str:
        """Key for the ordered question bank snapshot of a test."""
        return cls.PATTERNS["question_bank"].format(
            prefix=cls.PREFIX,
            namespace=CacheNamespace.QUESTION_BANK.value,
            test_id=test_id,
        )

    @classmethod
    def dashboard_stats(cls) -> str:
        """Key for the dashboard statistics snapshot."""
        return cls.PATTERNS["dashboard_stats"].format(
            prefix=cls.PREFIX,
            namespace=CacheNamespace.DASHBOARD.value,
        )


__all__ = ["CacheKeys", "CacheNamespace"]
