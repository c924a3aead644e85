"""Psychometric question API endpoints."""

from fastapi import APIRouter, Depends, Request, status

from hrpulse.api.dependencies import get_request_id, get_test_service, http_error
from hrpulse.schemas.base import SuccessResponse, create_success_response
from hrpulse.schemas.test_schemas import (
    QuestionCreateRequest,
    QuestionResponse,
    QuestionUpdateRequest,
)
from hrpulse.services.test_service import TestService
from hrpulse.utils.exceptions import HRPulseError
from hrpulse.utils.logger import get_api_logger

router = APIRouter(
    responses={
        404: {"description": "Question or test not found"},
        422: {"description": "Validation error"},
    }
)

logger = get_api_logger()


@router.post(
    "",
    response_model=SuccessResponse[QuestionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add question",
    description="Add a question to a test; the test's question count is recomputed",
)
async def create_question(
    question_request: QuestionCreateRequest,
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[QuestionResponse]:
    """Add a question to a test."""
    try:
        question = await service.create_question(question_request)
    except HRPulseError as e:
        logger.warning(f"Question creation failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=QuestionResponse.model_validate(question),
        message="Question created successfully",
        request_id=get_request_id(request),
    )


@router.put(
    "/{question_id}",
    response_model=SuccessResponse[QuestionResponse],
    summary="Update question",
)
async def update_question(
    question_id: int,
    update_request: QuestionUpdateRequest,
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[QuestionResponse]:
    """Partially update a question."""
    try:
        question = await service.update_question(question_id, update_request)
    except HRPulseError as e:
        logger.warning(f"Question update failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=QuestionResponse.model_validate(question),
        message="Question updated successfully",
        request_id=get_request_id(request),
    )


@router.delete(
    "/{question_id}",
    response_model=SuccessResponse[QuestionResponse],
    summary="Delete question",
)
async def delete_question(
    question_id: int,
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[QuestionResponse]:
    """Delete a question."""
    try:
        question = await service.delete_question(question_id)
    except HRPulseError as e:
        logger.warning(f"Question deletion failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=QuestionResponse.model_validate(question),
        message="Question deleted successfully",
        request_id=get_request_id(request),
    )
