from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from files_manager.dependencies.auth import get_optional_user
from files_manager.dependencies.services import get_content_service
from files_manager.models.user import User
from files_manager.services.content_service import ContentService

router = APIRouter(tags=["Download"])


@router.get("/files/{file_id}/data")
async def get_file_data(
    file_id: str,
    size: Optional[str] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    content: ContentService = Depends(get_content_service),
):
    blob = await content.read_blob(current_user, file_id, size)
    return StreamingResponse(blob.chunks, media_type=blob.media_type)
