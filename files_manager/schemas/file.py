from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from files_manager.models.file import ROOT_PARENT_ID, FileType


class _EntityBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    owner_id: str
    parent_id: str = ROOT_PARENT_ID
    is_public: bool = False


class FolderEntity(_EntityBase):
    type: Literal["folder"] = "folder"


class _BlobEntity(_EntityBase):
    local_path: str


class RegularFileEntity(_BlobEntity):
    type: Literal["file"] = "file"


class ImageEntity(_BlobEntity):
    type: Literal["image"] = "image"


FileEntity = Annotated[
    Union[FolderEntity, RegularFileEntity, ImageEntity],
    Field(discriminator="type"),
]

BlobEntity = Union[RegularFileEntity, ImageEntity]

_ENTITY_CLASSES = {
    FileType.FOLDER.value: FolderEntity,
    FileType.FILE.value: RegularFileEntity,
    FileType.IMAGE.value: ImageEntity,
}


def to_entity(row) -> FileEntity:
    """Build the typed entity for a ``files`` row."""
    fields = {
        "id": row.id,
        "name": row.name,
        "owner_id": row.owner_id,
        "parent_id": row.parent_id or ROOT_PARENT_ID,
        "is_public": bool(row.is_public),
    }
    entity_cls = _ENTITY_CLASSES[row.type]
    if entity_cls is not FolderEntity:
        fields["local_path"] = row.local_path
    return entity_cls(**fields)


class FileCreate(BaseModel):
    # everything is optional here so the service can answer with its own reasons
    name: str | None = None
    type: str | None = None
    parent_id: Union[int, str, None] = Field(default=None, alias="parentId")
    is_public: bool | None = Field(default=False, alias="isPublic")
    data: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class FileResponse(BaseModel):
    id: str
    user_id: str = Field(alias="userId")
    name: str
    type: str
    is_public: bool = Field(alias="isPublic")
    parent_id: Union[int, str] = Field(alias="parentId")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entity(cls, entity: FileEntity) -> "FileResponse":
        parent_id = 0 if entity.parent_id == ROOT_PARENT_ID else entity.parent_id
        return cls(
            id=entity.id,
            user_id=entity.owner_id,
            name=entity.name,
            type=entity.type,
            is_public=entity.is_public,
            parent_id=parent_id,
        )
