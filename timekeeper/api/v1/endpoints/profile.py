"""Profile API endpoint."""

from fastapi import APIRouter, Depends

from timekeeper.api.v1.deps import get_tracking_service
from timekeeper.models.schemas import DataResponse, Profile, UpdateProfileRequest
from timekeeper.services.tracking_service import TrackingService
from timekeeper.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.patch("", response_model=DataResponse[Profile])
async def upsert_profile(
    request: UpdateProfileRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    """Create or partially update the signed-in user's profile."""
    logger.info(f"PATCH /zeit/profile: user_id={service.user_id}")
    return DataResponse(data=service.upsert_profile(request))
