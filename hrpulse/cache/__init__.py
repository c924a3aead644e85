"""Cache module for HRPulse.

This module provides Redis backed caching for question banks and dashboard
statistics.
"""

from hrpulse.cache.cache_keys import CacheKeys, CacheNamespace
from hrpulse.cache.cache_manager import CacheManager

__all__ = [
    "CacheKeys",
    "CacheManager",
    "CacheNamespace",
]
