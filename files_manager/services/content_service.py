import mimetypes
from typing import AsyncIterator, NamedTuple, Optional, Sequence

from files_manager.core.exceptions import BadRequest, NotFound
from files_manager.models.file import FileType
from files_manager.models.user import User
from files_manager.schemas.file import FileEntity, to_entity
from files_manager.services.blob_storage import BlobStorage
from files_manager.services.credential_store import CredentialStore

DEFAULT_MEDIA_TYPE = "application/octet-stream"


class BlobContent(NamedTuple):
    media_type: str
    chunks: AsyncIterator[bytes]


def resolve_media_type(name: str) -> str:
    media_type, _ = mimetypes.guess_type(name)
    return media_type or DEFAULT_MEDIA_TYPE


def thumbnail_path(local_path: str, width: int) -> str:
    return f"{local_path}_{width}"


def can_read(entity: FileEntity, user: Optional[User]) -> bool:
    if entity.is_public:
        return True
    return user is not None and entity.owner_id == str(user.id)


class ContentService:
    """Streams stored bytes back to readers allowed to see them."""

    def __init__(
        self,
        credential_store: CredentialStore,
        blob_storage: BlobStorage,
        thumbnail_widths: Sequence[int] = (500, 250, 100),
    ):
        self.credential_store = credential_store
        self.blob_storage = blob_storage
        self.thumbnail_widths = tuple(thumbnail_widths)

    async def read_blob(self, user: Optional[User], file_id: str, size=None) -> BlobContent:
        row = await self.credential_store.find_file_entity_by_id(file_id)
        if not row:
            raise NotFound()
        entity = to_entity(row)
        # invisible entities look exactly like missing ones
        if not can_read(entity, user):
            raise NotFound()
        if entity.type == FileType.FOLDER.value:
            raise BadRequest("A folder doesn't have content")

        path = entity.local_path
        if size is not None and size != "":
            path = thumbnail_path(path, self._thumbnail_width(size))

        if not await self.blob_storage.exists(path):
            raise NotFound()
        return BlobContent(resolve_media_type(entity.name), self.blob_storage.stream(path))

    def _thumbnail_width(self, size) -> int:
        try:
            width = int(size)
        except (TypeError, ValueError):
            raise BadRequest("Invalid size")
        if width not in self.thumbnail_widths:
            raise BadRequest("Invalid size")
        return width
