"""Module API endpoints."""

from fastapi import APIRouter, Depends, status

from timekeeper.api.v1.deps import get_tracking_service
from timekeeper.models.schemas import (
    CreateModuleRequest,
    DataResponse,
    Module,
    SuccessResponse,
    UpdateModuleRequest,
)
from timekeeper.services.tracking_service import TrackingService
from timekeeper.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=DataResponse[Module], status_code=status.HTTP_201_CREATED)
async def create_module(
    request: CreateModuleRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    logger.info(f"POST /zeit/modules: name={request.name}, folder={request.folderId}")
    return DataResponse(data=service.create_module(request))


@router.patch("/{module_id}", response_model=DataResponse[Module])
async def update_module(
    module_id: str,
    request: UpdateModuleRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    """Partial update; an explicit null clears targetHours or notes."""
    logger.info(f"PATCH /zeit/modules/{module_id}")
    return DataResponse(data=service.update_module(module_id, request))


@router.delete("/{module_id}", response_model=DataResponse[SuccessResponse])
async def delete_module(module_id: str, service: TrackingService = Depends(get_tracking_service)):
    """Delete a module and its entries."""
    logger.info(f"DELETE /zeit/modules/{module_id}")
    service.delete_module(module_id)
    return DataResponse(data=SuccessResponse())
