"""Dashboard and candidate listing endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from hrpulse.api.dependencies import get_attempt_service, get_request_id, http_error
from hrpulse.routers.attempts import list_attempts_response
from hrpulse.schemas.attempt_schemas import AttemptDetailResponse, DashboardStatsResponse
from hrpulse.schemas.base import SuccessResponse, create_success_response
from hrpulse.services.attempt_service import AttemptService
from hrpulse.utils.exceptions import HRPulseError
from hrpulse.utils.logger import get_api_logger

router = APIRouter()

logger = get_api_logger()


@router.get(
    "/dashboard/stats",
    response_model=SuccessResponse[DashboardStatsResponse],
    summary="Dashboard statistics",
)
async def get_dashboard_stats(
    request: Request,
    service: AttemptService = Depends(get_attempt_service),
) -> SuccessResponse[DashboardStatsResponse]:
    """Test and attempt counts, average score and score band distribution."""
    try:
        stats = await service.get_dashboard_stats()
    except HRPulseError as e:
        logger.error(f"Failed to compute dashboard statistics: {str(e)}")
        raise http_error(e)

    return create_success_response(data=stats, request_id=get_request_id(request))


@router.get(
    "/candidates",
    response_model=SuccessResponse[List[AttemptDetailResponse]],
    summary="List candidates",
    description="Alias of the attempt listing",
)
async def list_candidates(
    request: Request,
    test_id: Optional[int] = Query(None, ge=1),
    candidate_email: Optional[str] = Query(None),
    service: AttemptService = Depends(get_attempt_service),
) -> SuccessResponse[List[AttemptDetailResponse]]:
    """List candidate attempts."""
    return await list_attempts_response(request, test_id, candidate_email, service)
