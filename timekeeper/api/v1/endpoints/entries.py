"""Time entry API endpoints.

Durations travel as hours and are stored as whole minutes.
"""

from fastapi import APIRouter, Depends, status

from timekeeper.api.v1.deps import get_tracking_service
from timekeeper.models.schemas import (
    CreateEntryRequest,
    DataResponse,
    Entry,
    SuccessResponse,
    UpdateEntryRequest,
)
from timekeeper.services.tracking_service import TrackingService
from timekeeper.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=DataResponse[Entry], status_code=status.HTTP_201_CREATED)
async def create_entry(
    request: CreateEntryRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    logger.info(f"POST /zeit/entries: module={request.moduleId}, hours={request.durationHours}")
    return DataResponse(data=service.create_entry(request))


@router.patch("/{entry_id}", response_model=DataResponse[Entry])
async def update_entry(
    entry_id: str,
    request: UpdateEntryRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    logger.info(f"PATCH /zeit/entries/{entry_id}")
    return DataResponse(data=service.update_entry(entry_id, request))


@router.delete("/{entry_id}", response_model=DataResponse[SuccessResponse])
async def delete_entry(entry_id: str, service: TrackingService = Depends(get_tracking_service)):
    logger.info(f"DELETE /zeit/entries/{entry_id}")
    service.delete_entry(entry_id)
    return DataResponse(data=SuccessResponse())
