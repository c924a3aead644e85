"""Psychometric test attempt API endpoints.

This module provides FastAPI routes for submitting attempts (which scores
them), querying and updating stored attempts, and rescoring.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from hrpulse.api.dependencies import (
    get_attempt_service,
    get_client_ip,
    get_request_id,
    get_user_agent,
    http_error,
)
from hrpulse.schemas.attempt_schemas import (
    AttemptDetailResponse,
    AttemptSubmissionRequest,
    AttemptUpdateRequest,
)
from hrpulse.schemas.base import SuccessResponse, create_success_response
from hrpulse.services.attempt_service import AttemptService
from hrpulse.utils.exceptions import HRPulseError
from hrpulse.utils.logger import get_api_logger

router = APIRouter(
    responses={
        404: {"description": "Attempt, test or checklist item not found"},
        409: {"description": "Status change not allowed"},
        422: {"description": "Validation error"},
    }
)

logger = get_api_logger()


async def list_attempts_response(
    request: Request,
    test_id: Optional[int],
    candidate_email: Optional[str],
    service: AttemptService,
) -> SuccessResponse[List[AttemptDetailResponse]]:
    """Shared body of the attempt listing and candidate routes."""
    try:
        attempts = await service.list_attempts(test_id=test_id, candidate_email=candidate_email)
    except HRPulseError as e:
        logger.error(f"Failed to list attempts: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=[AttemptDetailResponse.model_validate(attempt) for attempt in attempts],
        request_id=get_request_id(request),
    )


@router.get(
    "",
    response_model=SuccessResponse[List[AttemptDetailResponse]],
    summary="List attempts",
)
async def list_attempts(
    request: Request,
    test_id: Optional[int] = Query(None, ge=1, description="Filter by test"),
    candidate_email: Optional[str] = Query(None, description="Filter by candidate"),
    service: AttemptService = Depends(get_attempt_service),
) -> SuccessResponse[List[AttemptDetailResponse]]:
    """List attempts, most recently started first."""
    return await list_attempts_response(request, test_id, candidate_email, service)


@router.post(
    "",
    response_model=SuccessResponse[AttemptDetailResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit attempt",
    description="Score and store a candidate's attempt, optionally linking it to an onboarding checklist item",
)
async def submit_attempt(
    submission: AttemptSubmissionRequest,
    request: Request,
    service: AttemptService = Depends(get_attempt_service),
) -> SuccessResponse[AttemptDetailResponse]:
    """Submit an attempt for scoring."""
    try:
        attempt = await service.submit_attempt(
            submission,
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request),
        )
    except HRPulseError as e:
        logger.warning(f"Attempt submission failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=AttemptDetailResponse.model_validate(attempt),
        message="Attempt submitted successfully",
        request_id=get_request_id(request),
    )


@router.get(
    "/{attempt_id}",
    response_model=SuccessResponse[AttemptDetailResponse],
    summary="Get attempt",
)
async def get_attempt(
    attempt_id: int,
    request: Request,
    service: AttemptService = Depends(get_attempt_service),
) -> SuccessResponse[AttemptDetailResponse]:
    """Get a stored attempt by id."""
    try:
        attempt = await service.get_attempt(attempt_id)
    except HRPulseError as e:
        raise http_error(e)

    return create_success_response(
        data=AttemptDetailResponse.model_validate(attempt),
        request_id=get_request_id(request),
    )


@router.put(
    "/{attempt_id}",
    response_model=SuccessResponse[AttemptDetailResponse],
    summary="Update attempt",
    description="Partial update; completed and abandoned attempts cannot change status",
)
async def update_attempt(
    attempt_id: int,
    update_request: AttemptUpdateRequest,
    request: Request,
    service: AttemptService = Depends(get_attempt_service),
) -> SuccessResponse[AttemptDetailResponse]:
    """Update a stored attempt without rescoring it."""
    try:
        attempt = await service.update_attempt(attempt_id, update_request)
    except HRPulseError as e:
        logger.warning(f"Attempt update failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=AttemptDetailResponse.model_validate(attempt),
        message="Attempt updated successfully",
        request_id=get_request_id(request),
    )


@router.post(
    "/{attempt_id}/rescore",
    response_model=SuccessResponse[AttemptDetailResponse],
    summary="Rescore attempt",
    description="Recompute scores against the test's current question bank",
)
async def rescore_attempt(
    attempt_id: int,
    request: Request,
    service: AttemptService = Depends(get_attempt_service),
) -> SuccessResponse[AttemptDetailResponse]:
    """Rescore a stored attempt."""
    try:
        attempt = await service.rescore_attempt(attempt_id)
    except HRPulseError as e:
        logger.warning(f"Attempt rescoring failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=AttemptDetailResponse.model_validate(attempt),
        message="Attempt rescored successfully",
        request_id=get_request_id(request),
    )
