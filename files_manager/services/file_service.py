import base64
import binascii
import logging

from files_manager.core.exceptions import BadRequest, InternalError, NotFound
from files_manager.models.file import ROOT_PARENT_ID, File, FileType
from files_manager.models.user import User
from files_manager.monitoring.setup import blobs_written_bytes, entities_created, leaked_blobs
from files_manager.schemas.file import FileCreate, FileEntity, to_entity
from files_manager.services.blob_storage import BlobStorage
from files_manager.services.credential_store import CredentialStore

logger = logging.getLogger("files-manager")

ENTITY_TYPES = {t.value for t in FileType}


def normalize_parent_id(parent_id) -> str:
    """Map the accepted spellings of the root (absent, ``0``, ``"0"``) onto one value."""
    if parent_id is None or parent_id == "":
        return ROOT_PARENT_ID
    parent_id = str(parent_id).strip()
    return parent_id or ROOT_PARENT_ID


class FileService:
    """Creates file entities and changes their visibility.

    Folders are pure metadata. Files and images carry a blob that is written
    before the metadata row is inserted; when the insert fails the blob is
    left behind on storage and the failure is reported to the caller.
    """

    def __init__(self, credential_store: CredentialStore, blob_storage: BlobStorage, thumbnails=None):
        self.credential_store = credential_store
        self.blob_storage = blob_storage
        self.thumbnails = thumbnails

    async def create_entity(self, user: User, payload: FileCreate) -> FileEntity:
        if not payload.name:
            raise BadRequest("Missing name")
        if not payload.type or payload.type not in ENTITY_TYPES:
            raise BadRequest("Missing type")
        if payload.type != FileType.FOLDER.value and not payload.data:
            raise BadRequest("Missing data")

        parent_id = normalize_parent_id(payload.parent_id)
        if parent_id != ROOT_PARENT_ID:
            # the parent may belong to someone else; only its existence and type are checked
            parent = await self.credential_store.find_file_entity_by_id(parent_id)
            if not parent:
                raise BadRequest("Parent not found")
            if parent.type != FileType.FOLDER.value:
                raise BadRequest("Parent is not a folder")

        row = File(
            name=payload.name,
            type=payload.type,
            parent_id=parent_id,
            is_public=bool(payload.is_public),
            owner_id=str(user.id),
        )

        if payload.type == FileType.FOLDER.value:
            await self.credential_store.insert_file_entity(row)
        else:
            content = _decode_data(payload.data)
            path = self.blob_storage.new_path()
            await self.blob_storage.prepare()
            await self.blob_storage.write_blob(path, content)
            blobs_written_bytes.inc(len(content))
            row.local_path = path
            try:
                await self.credential_store.insert_file_entity(row)
            except InternalError:
                leaked_blobs.inc()
                logger.error("Metadata insert failed, blob left at %s", path)
                raise

        entity = to_entity(row)
        entities_created.labels(type=entity.type).inc()
        logger.info("Created %s %s for user %s", entity.type, entity.id, user.id)

        if entity.type == FileType.IMAGE.value and self.thumbnails is not None:
            self.thumbnails.enqueue(entity.owner_id, entity.id)
        return entity

    async def get_entity(self, user: User, file_id: str) -> FileEntity:
        row = await self.credential_store.find_file_entity_by_id(file_id, owner_id=str(user.id))
        if not row:
            raise NotFound()
        return to_entity(row)

    async def set_visibility(self, user: User, file_id: str, is_public: bool) -> FileEntity:
        row = await self.credential_store.find_file_entity_by_id(file_id, owner_id=str(user.id))
        if not row:
            raise NotFound()
        await self.credential_store.update_file_entity_visibility(row.id, is_public)
        refreshed = await self.credential_store.find_file_entity_by_id(row.id)
        if not refreshed:
            raise NotFound()
        logger.info("File %s is_public=%s", refreshed.id, is_public)
        return to_entity(refreshed)


def _decode_data(data: str) -> bytes:
    try:
        return base64.b64decode("".join(data.split()), validate=True)
    except (binascii.Error, ValueError):
        raise BadRequest("Invalid data")
