"""Folder API endpoints.

Folders form a per-user forest. Deleting a folder cascades to its
subfolders, their modules and all entries of those modules.
"""

from fastapi import APIRouter, Depends, status

from timekeeper.api.v1.deps import get_tracking_service
from timekeeper.models.schemas import (
    CreateFolderRequest,
    DataResponse,
    Folder,
    SuccessResponse,
    UpdateFolderRequest,
)
from timekeeper.services.tracking_service import TrackingService
from timekeeper.utils import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=DataResponse[Folder], status_code=status.HTTP_201_CREATED)
async def create_folder(
    request: CreateFolderRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    """Create a new folder.

    The folder is appended to its siblings: ``order`` is the current number
    of folders under the same parent.
    """
    logger.info(f"POST /zeit/folders: name={request.name}, parent={request.parentId}")
    return DataResponse(data=service.create_folder(request))


@router.patch("/{folder_id}", response_model=DataResponse[Folder])
async def update_folder(
    folder_id: str,
    request: UpdateFolderRequest,
    service: TrackingService = Depends(get_tracking_service),
):
    """Rename, move or reorder a folder.

    Raises:
        404: Folder or new parent not found
        400: Move would create a cycle
    """
    logger.info(f"PATCH /zeit/folders/{folder_id}")
    return DataResponse(data=service.update_folder(folder_id, request))


@router.delete("/{folder_id}", response_model=DataResponse[SuccessResponse])
async def delete_folder(folder_id: str, service: TrackingService = Depends(get_tracking_service)):
    logger.info(f"DELETE /zeit/folders/{folder_id}")
    service.delete_folder(folder_id)
    return DataResponse(data=SuccessResponse())
