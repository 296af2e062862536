"""
Physical storage for file and image payloads.

Two backends share one interface: a directory on the local filesystem and a
MinIO bucket. A stored blob is addressed by the ``local_path`` kept on its
file entity; the path is generated here and never reused.
"""
import io
import logging
import os
import tempfile
import uuid
from typing import AsyncIterator

from minio import Minio
from minio.error import S3Error
from starlette.concurrency import run_in_threadpool

from files_manager.core.config import settings
from files_manager.core.exceptions import InternalError
from files_manager.core.minio_client import create_minio_client, initialize_minio_bucket

logger = logging.getLogger("files-manager")

CHUNK_SIZE = 1024 * 1024


class BlobStorage:
    async def prepare(self) -> None:
        raise NotImplementedError

    def new_path(self) -> str:
        raise NotImplementedError

    async def write_blob(self, path: str, data: bytes) -> None:
        raise NotImplementedError

    async def exists(self, path: str) -> bool:
        raise NotImplementedError

    async def read_bytes(self, path: str) -> bytes:
        raise NotImplementedError

    def stream(self, path: str) -> AsyncIterator[bytes]:
        raise NotImplementedError


class LocalBlobStorage(BlobStorage):
    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    async def prepare(self) -> None:
        await run_in_threadpool(os.makedirs, self.root, exist_ok=True)

    def new_path(self) -> str:
        return os.path.join(self.root, str(uuid.uuid4()))

    async def write_blob(self, path: str, data: bytes) -> None:
        try:
            await run_in_threadpool(_write_atomically, path, data)
        except OSError as e:
            logger.error("Blob write failed for %s: %s", path, e)
            raise InternalError()

    async def exists(self, path: str) -> bool:
        return await run_in_threadpool(os.path.isfile, path)

    async def read_bytes(self, path: str) -> bytes:
        try:
            return await run_in_threadpool(_read_file, path)
        except OSError as e:
            logger.error("Blob read failed for %s: %s", path, e)
            raise InternalError()

    async def stream(self, path: str) -> AsyncIterator[bytes]:
        fh = await run_in_threadpool(open, path, "rb")
        try:
            while True:
                chunk = await run_in_threadpool(fh.read, CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        finally:
            await run_in_threadpool(fh.close)


def _write_atomically(path: str, data: bytes) -> None:
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    # a reader never sees a half-written blob: write aside, then rename into place
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".upload-")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise


def _read_file(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


class MinioBlobStorage(BlobStorage):
    def __init__(self, client: Minio, bucket: str):
        self.client = client
        self.bucket = bucket

    async def prepare(self) -> None:
        await run_in_threadpool(initialize_minio_bucket, self.client, self.bucket)

    def new_path(self) -> str:
        return str(uuid.uuid4())

    async def write_blob(self, path: str, data: bytes) -> None:
        try:
            await run_in_threadpool(
                self.client.put_object,
                self.bucket,
                path,
                io.BytesIO(data),
                len(data),
                content_type="application/octet-stream",
            )
        except S3Error as e:
            logger.error("MinIO put_object failed for %s/%s: %s", self.bucket, path, e)
            raise InternalError()

    async def exists(self, path: str) -> bool:
        try:
            await run_in_threadpool(self.client.stat_object, self.bucket, path)
        except S3Error as e:
            if e.code in ("NoSuchKey", "NoSuchObject"):
                return False
            logger.error("MinIO stat_object failed for %s/%s: %s", self.bucket, path, e)
            raise InternalError()
        return True

    async def read_bytes(self, path: str) -> bytes:
        chunks = []
        async for chunk in self.stream(path):
            chunks.append(chunk)
        return b"".join(chunks)

    async def stream(self, path: str) -> AsyncIterator[bytes]:
        try:
            obj = await run_in_threadpool(self.client.get_object, self.bucket, path)
        except S3Error as e:
            logger.error("MinIO get_object failed for %s/%s: %s", self.bucket, path, e)
            raise InternalError()
        try:
            while True:
                chunk = await run_in_threadpool(obj.read, CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        finally:
            await run_in_threadpool(obj.close)
            await run_in_threadpool(obj.release_conn)


def build_blob_storage() -> BlobStorage:
    if settings.STORAGE_BACKEND == "minio":
        return MinioBlobStorage(create_minio_client(), settings.MINIO_BUCKET)
    if settings.STORAGE_BACKEND != "local":
        logger.warning("Unknown STORAGE_BACKEND %r, using local storage", settings.STORAGE_BACKEND)
    return LocalBlobStorage(settings.FOLDER_PATH)
