"""Psychometric test API endpoints.

This module provides FastAPI routes for administering tests, reading their
question banks and exporting them.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Request, status

from hrpulse.api.dependencies import get_request_id, get_test_service, http_error
from hrpulse.schemas.base import SuccessResponse, create_success_response
from hrpulse.schemas.test_schemas import (
    QuestionResponse,
    TestCreateRequest,
    TestExportResponse,
    TestResponse,
    TestUpdateRequest,
)
from hrpulse.services.test_service import TestService
from hrpulse.utils.exceptions import HRPulseError
from hrpulse.utils.logger import get_api_logger

router = APIRouter(
    responses={
        404: {"description": "Test not found"},
        409: {"description": "Test still referenced by attempts"},
        422: {"description": "Validation error"},
    }
)

logger = get_api_logger()


@router.get(
    "",
    response_model=SuccessResponse[List[TestResponse]],
    summary="List tests",
)
async def list_tests(
    request: Request,
    active_only: bool = Query(False, description="Only return active tests"),
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[List[TestResponse]]:
    """List psychometric tests, newest first."""
    try:
        tests = await service.list_tests(active_only=active_only)
    except HRPulseError as e:
        logger.error(f"Failed to list tests: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=[TestResponse.model_validate(test) for test in tests],
        request_id=get_request_id(request),
    )


@router.get(
    "/export",
    response_model=SuccessResponse[List[TestExportResponse]],
    summary="Export tests with questions",
    description="Every test with its ordered question bank, for report generation",
)
async def export_tests(
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[List[TestExportResponse]]:
    """Export all tests together with their questions."""
    try:
        exported = await service.export_tests()
    except HRPulseError as e:
        logger.error(f"Failed to export tests: {str(e)}")
        raise http_error(e)

    data = [
        TestExportResponse.model_validate(
            {
                **TestResponse.model_validate(test).model_dump(),
                "questions": [QuestionResponse.model_validate(q) for q in questions],
            }
        )
        for test, questions in exported
    ]
    return create_success_response(data=data, request_id=get_request_id(request))


@router.post(
    "",
    response_model=SuccessResponse[TestResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create test",
)
async def create_test(
    test_request: TestCreateRequest,
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[TestResponse]:
    """Create a psychometric test."""
    try:
        test = await service.create_test(test_request)
    except HRPulseError as e:
        logger.warning(f"Test creation failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=TestResponse.model_validate(test),
        message="Test created successfully",
        request_id=get_request_id(request),
    )


@router.get(
    "/{test_id}",
    response_model=SuccessResponse[TestResponse],
    summary="Get test",
)
async def get_test(
    test_id: int,
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[TestResponse]:
    """Get a psychometric test by id."""
    try:
        test = await service.get_test(test_id)
    except HRPulseError as e:
        raise http_error(e)

    return create_success_response(
        data=TestResponse.model_validate(test),
        request_id=get_request_id(request),
    )


@router.put(
    "/{test_id}",
    response_model=SuccessResponse[TestResponse],
    summary="Update test",
)
async def update_test(
    test_id: int,
    update_request: TestUpdateRequest,
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[TestResponse]:
    """Partially update a psychometric test."""
    try:
        test = await service.update_test(test_id, update_request)
    except HRPulseError as e:
        logger.warning(f"Test update failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data=TestResponse.model_validate(test),
        message="Test updated successfully",
        request_id=get_request_id(request),
    )


@router.delete(
    "/{test_id}",
    response_model=SuccessResponse[dict],
    summary="Delete test",
    description="Delete a test and its questions. Refused while attempts exist unless force=true.",
)
async def delete_test(
    test_id: int,
    request: Request,
    force: bool = Query(False, description="Delete even if attempts reference the test"),
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[dict]:
    """Delete a psychometric test."""
    try:
        deleted_questions = await service.delete_test(test_id, force=force)
    except HRPulseError as e:
        logger.warning(f"Test deletion failed: {str(e)}")
        raise http_error(e)

    return create_success_response(
        data={"test_id": test_id, "deleted_questions": deleted_questions},
        message="Test deleted successfully",
        request_id=get_request_id(request),
    )


@router.get(
    "/{test_id}/questions",
    response_model=SuccessResponse[List[QuestionResponse]],
    summary="Get question bank",
)
async def get_test_questions(
    test_id: int,
    request: Request,
    service: TestService = Depends(get_test_service),
) -> SuccessResponse[List[QuestionResponse]]:
    """Get the ordered question bank of a test."""
    try:
        await service.get_test(test_id)
        questions = await service.get_questions(test_id)
    except HRPulseError as e:
        raise http_error(e)

    return create_success_response(
        data=[QuestionResponse.model_validate(q) for q in questions],
        request_id=get_request_id(request),
    )
