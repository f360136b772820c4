"""Full-state endpoint: the whole dataset of the signed-in user."""

from fastapi import APIRouter, Depends

from timekeeper.api.v1.deps import get_tracking_service
from timekeeper.models.schemas import DataResponse, StatePayload
from timekeeper.services.tracking_service import TrackingService
from timekeeper.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=DataResponse[StatePayload])
async def get_state(service: TrackingService = Depends(get_tracking_service)):
    """Return profile, folders, modules and entries in one payload."""
    logger.info(f"GET /zeit/state: user_id={service.user_id}")
    return DataResponse(data=service.fetch_state())
