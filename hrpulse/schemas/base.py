"""Shared schema configuration and the HRPulse response envelopes.

Successful calls return ``{"success": true, "message", "data", "meta"}``.
Failures of any kind (service errors, request validation, unknown routes,
unexpected exceptions) return ``{"error": {"code", "message", "request_id"}}``
with optional ``details``.
"""

from datetime import datetime
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from hrpulse.utils.datetime_utils import utc_now

DataType = TypeVar("DataType")

API_VERSION = "v1"


class BaseSchema(BaseModel):
    """Base for request and response schemas.

    ``from_attributes`` lets routes validate response schemas straight from
    stored models.
    """

    model_config = ConfigDict(
        use_enum_values=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class ResponseMetadata(BaseSchema):
    request_id: Optional[str] = Field(None, description="Correlates with the X-Request-ID header")
    timestamp: datetime = Field(default_factory=utc_now)
    api_version: str = Field(default=API_VERSION)


class SuccessResponse(BaseSchema, Generic[DataType]):
    """Envelope for every successful API response."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[DataType] = None
    meta: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ErrorBody(BaseSchema):
    """Error payload; ``code`` is the HTTP status or an application error code."""

    code: Any
    message: Any
    request_id: Optional[str] = None
    details: Optional[Any] = None


class ErrorEnvelope(BaseSchema):
    error: ErrorBody


def create_success_response(
    data: Any,
    message: Optional[str] = None,
    request_id: Optional[str] = None,
) -> SuccessResponse:
    """Wrap route output in the success envelope.

    Args:
        data: Response payload (a schema, list of schemas or plain dict)
        message: Optional human-readable message
        request_id: Request ID of the current request

    Returns:
        SuccessResponse: Envelope with metadata filled in
    """
    return SuccessResponse(
        data=data,
        message=message,
        meta=ResponseMetadata(request_id=request_id),
    )


def error_envelope(
    code: Any,
    message: Any,
    request_id: Optional[str] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Build the JSON body of an error response.

    ``details`` is left out entirely when not given.
    """
    envelope = ErrorEnvelope(
        error=ErrorBody(code=code, message=message, request_id=request_id, details=details)
    )
    return envelope.model_dump(mode="json", exclude_none=True)


__all__ = [
    "BaseSchema",
    "ErrorBody",
    "ErrorEnvelope",
    "ResponseMetadata",
    "SuccessResponse",
    "create_success_response",
    "error_envelope",
]
