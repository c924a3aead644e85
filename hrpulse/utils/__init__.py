"""HRPulse utilities package.

This package provides constants, exceptions, logging and datetime helpers
used throughout the service.
"""

from hrpulse.utils.constants import (
    AttemptStatus,
    QuestionType,
    ScoreBand,
    TestType,
)
from hrpulse.utils.datetime_utils import calculate_duration_seconds, utc_now
from hrpulse.utils.exceptions import (
    BusinessLogicError,
    CacheError,
    ConfigurationError,
    DatabaseError,
    HRPulseError,
    ResourceNotFoundError,
    ValidationError,
)

__all__ = [
    "AttemptStatus",
    "BusinessLogicError",
    "CacheError",
    "ConfigurationError",
    "DatabaseError",
    "HRPulseError",
    "QuestionType",
    "ResourceNotFoundError",
    "ScoreBand",
    "TestType",
    "ValidationError",
    "calculate_duration_seconds",
    "utc_now",
]
