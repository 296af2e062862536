from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from files_manager.dependencies.auth import get_current_user
from files_manager.dependencies.services import get_file_service, get_listing_service
from files_manager.models.user import User
from files_manager.schemas.file import FileCreate, FileResponse
from files_manager.services.file_service import FileService
from files_manager.services.listing import ListingService

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
async def create_file(
    payload: FileCreate,
    current_user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    entity = await files.create_entity(current_user, payload)
    return FileResponse.from_entity(entity)


@router.get("", response_model=List[FileResponse])
async def list_files(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    page: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    listing: ListingService = Depends(get_listing_service),
):
    entities = await listing.list_children(current_user, parent_id, page)
    return [FileResponse.from_entity(e) for e in entities]


@router.get("/{file_id}", response_model=FileResponse)
async def get_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return FileResponse.from_entity(await files.get_entity(current_user, file_id))


@router.put("/{file_id}/publish", response_model=FileResponse)
async def publish_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return FileResponse.from_entity(await files.set_visibility(current_user, file_id, True))


@router.put("/{file_id}/unpublish", response_model=FileResponse)
async def unpublish_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return FileResponse.from_entity(await files.set_visibility(current_user, file_id, False))
