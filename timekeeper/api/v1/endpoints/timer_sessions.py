"""Timer session API endpoint."""

from fastapi import APIRouter, Depends, status

from timekeeper.api.v1.deps import get_tracking_service
from timekeeper.models.schemas import CreateTimerSessionRequest, DataResponse, TimerSession
from timekeeper.services.tracking_service import TrackingService
from timekeeper.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=DataResponse[TimerSession], status_code=status.HTTP_201_CREATED)
async def create_timer_session(
    request: CreateTimerSessionRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    logger.info(f"POST /zeit/timer-sessions: module={request.moduleId}")
    return DataResponse(data=service.create_timer_session(request))
