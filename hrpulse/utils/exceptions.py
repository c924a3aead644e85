"""Exception hierarchy for the HRPulse psychometrics service.

Only the collaborators around the scoring engine raise these: the engine
turns unscoreable input into zero points and diagnostics instead. Each class
carries the application error code and the HTTP status routes translate it
to.
"""

from typing import Any, Dict, List, Optional


class HRPulseError(Exception):
    """Base exception class for all HRPulse application errors."""

    default_error_code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """Initialize HRPulse error.

        Args:
            message: Error message
            error_code: Overrides the class error code
            details: Extra details merged with ``context``
            cause: Underlying exception
            **context: Named details (``resource_id``, ``operation``, ...);
                ``None`` values are dropped
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = dict(details or {})
        self.details.update({k: v for k, v in context.items() if v is not None})
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        if not self.details:
            return f"{self.message} [{self.error_code}]"
        return f"{self.message} [{self.error_code}] {self.details}"


class ValidationError(HRPulseError):
    """Input that the service cannot accept (bad question definition, bad update)."""

    default_error_code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[List[str]] = None,
        **kwargs: Any,
    ):
        super().__init__(
            message,
            field=field,
            value=value,
            validation_errors=validation_errors or None,
            **kwargs,
        )
        self.field = field
        self.value = value
        self.validation_errors = validation_errors or []


class ResourceNotFoundError(HRPulseError):
    """A test, question, attempt or checklist item that does not exist."""

    default_error_code = "NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
        **kwargs: Any,
    ):
        super().__init__(message, resource_type=resource_type, resource_id=resource_id, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id


class BusinessLogicError(HRPulseError):
    """A rule violation: status lifecycle, deleting a test that has attempts."""

    default_error_code = "BUSINESS_RULE_VIOLATION"
    status_code = 409

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        resource_id: Optional[Any] = None,
        **kwargs: Any,
    ):
        super().__init__(message, operation=operation, resource_id=resource_id, **kwargs)
        self.operation = operation
        self.resource_id = resource_id


class DatabaseError(HRPulseError):
    """A failed MongoDB operation.

    Candidate identifiers in ``query`` are masked before they reach
    ``details``, since details end up in logs.
    """

    default_error_code = "DATABASE_ERROR"
    status_code = 503

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        query: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ):
        super().__init__(
            message,
            operation=operation,
            collection=collection,
            query=_mask_sensitive_query_data(query) if query else None,
            **kwargs,
        )
        self.operation = operation
        self.collection = collection
        self.query = query


class CacheError(HRPulseError):
    """A Redis failure outside the request path (connecting at startup)."""

    default_error_code = "CACHE_ERROR"
    status_code = 503

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        cache_key: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, operation=operation, cache_key=cache_key, **kwargs)
        self.operation = operation
        self.cache_key = cache_key


class ConfigurationError(HRPulseError):
    """Invalid settings or an unreadable recommendation rules file."""

    default_error_code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs: Any,
    ):
        super().__init__(
            message,
            config_key=config_key,
            config_value=str(config_value) if config_value is not None else None,
            **kwargs,
        )
        self.config_key = config_key
        self.config_value = config_value


def _mask_email(email: str) -> str:
    """``jane.doe@example.com`` -> ``j***@example.com``."""
    local, sep, domain = email.partition("@")
    if not sep or not local:
        return "***"
    return f"{local[0]}***@{domain}"


def _mask_sensitive_query_data(query: Dict[str, Any]) -> Dict[str, Any]:
    """Mask candidate e-mail, name and IP address in a query, recursively."""
    masked: Dict[str, Any] = {}
    for key, value in query.items():
        if key == "candidate_email" and isinstance(value, str):
            masked[key] = _mask_email(value)
        elif key in {"candidate_name", "ip_address"}:
            masked[key] = "***MASKED***"
        elif isinstance(value, dict):
            masked[key] = _mask_sensitive_query_data(value)
        else:
            masked[key] = value
    return masked


def validation_error_from_pydantic(
    error: Exception,
    message: str = "Validation failed",
) -> ValidationError:
    """Wrap a pydantic validation error in the application hierarchy.

    Args:
        error: ``pydantic.ValidationError`` raised while building a model
        message: Error message

    Returns:
        ValidationError: One ``"loc: msg"`` entry per pydantic error
    """
    errors = getattr(error, "errors", None)
    messages = [
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" if item.get("loc") else item["msg"]
        for item in (errors() if callable(errors) else [])
    ]
    return ValidationError(message, validation_errors=messages or [str(error)], cause=error)


__all__ = [
    "HRPulseError",
    "ValidationError",
    "BusinessLogicError",
    "ResourceNotFoundError",
    "DatabaseError",
    "CacheError",
    "ConfigurationError",
    "validation_error_from_pydantic",
]
