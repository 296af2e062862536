import base64
import os

import pytest

from files_manager.core.exceptions import BadRequest, NotFound
from files_manager.schemas.file import FileCreate
from files_manager.services.content_service import ContentService, resolve_media_type, thumbnail_path

HELLO = base64.b64encode(b"hello").decode()


async def _read(blob):
    return b"".join([chunk async for chunk in blob.chunks])


@pytest.fixture
def create(file_service):
    async def _create(user, **fields):
        return await file_service.create_entity(user, FileCreate(**fields))
    return _create


async def test_docs_scenario(create, content_service, owner, stranger):
    docs = await create(owner, name="docs", type="folder")
    a_txt = await create(owner, name="a.txt", type="file", parentId=docs.id, data="aGVsbG8=")

    blob = await content_service.read_blob(owner, a_txt.id)
    assert blob.media_type == "text/plain"
    assert await _read(blob) == b"hello"

    with pytest.raises(NotFound):
        await content_service.read_blob(stranger, a_txt.id)


async def test_publish_then_unpublish_controls_foreign_reads(create, file_service, content_service, owner, stranger):
    entity = await create(owner, name="a.txt", type="file", data=HELLO)

    await file_service.set_visibility(owner, entity.id, True)
    assert await _read(await content_service.read_blob(stranger, entity.id)) == b"hello"
    assert await _read(await content_service.read_blob(None, entity.id)) == b"hello"

    await file_service.set_visibility(owner, entity.id, False)
    with pytest.raises(NotFound):
        await content_service.read_blob(stranger, entity.id)
    with pytest.raises(NotFound):
        await content_service.read_blob(None, entity.id)


async def test_folder_has_no_content(create, content_service, owner):
    docs = await create(owner, name="docs", type="folder")
    with pytest.raises(BadRequest) as exc:
        await content_service.read_blob(owner, docs.id)
    assert exc.value.reason == "A folder doesn't have content"


async def test_private_folder_of_someone_else_is_not_found(create, content_service, owner, stranger):
    docs = await create(owner, name="docs", type="folder")
    with pytest.raises(NotFound):
        await content_service.read_blob(stranger, docs.id)


async def test_missing_blob_on_storage(create, content_service, owner):
    entity = await create(owner, name="a.txt", type="file", data=HELLO)
    os.remove(entity.local_path)
    with pytest.raises(NotFound):
        await content_service.read_blob(owner, entity.id)


async def test_unknown_entity(content_service, owner):
    with pytest.raises(NotFound):
        await content_service.read_blob(owner, "missing")


async def test_thumbnail_size_reads_sibling_blob(create, content_service, owner):
    entity = await create(owner, name="cat.png", type="image", data=HELLO)

    with pytest.raises(NotFound):
        await content_service.read_blob(owner, entity.id, "250")

    with open(thumbnail_path(entity.local_path, 250), "wb") as fh:
        fh.write(b"small")
    blob = await content_service.read_blob(owner, entity.id, "250")
    assert blob.media_type == "image/png"
    assert await _read(blob) == b"small"


@pytest.mark.parametrize("size", ["42", "big"])
async def test_unsupported_thumbnail_size(create, credential_store, blob_storage, owner, size):
    entity = await create(owner, name="cat.png", type="image", data=HELLO)
    service = ContentService(credential_store, blob_storage, thumbnail_widths=(500, 250, 100))
    with pytest.raises(BadRequest):
        await service.read_blob(owner, entity.id, size)


@pytest.mark.parametrize("name, expected", [
    ("a.txt", "text/plain"),
    ("photo.jpg", "image/jpeg"),
    ("page.html", "text/html"),
    ("no_extension", "application/octet-stream"),
])
def test_resolve_media_type(name, expected):
    assert resolve_media_type(name) == expected
