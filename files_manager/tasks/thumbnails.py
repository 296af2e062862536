import asyncio
import logging
from typing import Optional, Sequence

from starlette.concurrency import run_in_threadpool

from files_manager.core.exceptions import FilesManagerError
from files_manager.models.file import FileType
from files_manager.monitoring.setup import thumbnail_jobs
from files_manager.services.blob_storage import BlobStorage
from files_manager.services.content_service import thumbnail_path
from files_manager.services.credential_store import CredentialStore
from files_manager.services.thumbnails import generate_thumbnails

logger = logging.getLogger(__name__)


class ThumbnailJobError(Exception):
    pass


class ThumbnailWorker:
    """In-process queue of image thumbnail jobs, drained by one background task."""

    def __init__(
        self,
        credential_store: CredentialStore,
        blob_storage: BlobStorage,
        widths: Sequence[int] = (500, 250, 100),
    ):
        self.credential_store = credential_store
        self.blob_storage = blob_storage
        self.widths = tuple(widths)
        self.queue: asyncio.Queue = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None

    def enqueue(self, user_id: str, file_id: str) -> None:
        self.queue.put_nowait({"userId": user_id, "fileId": file_id})

    async def process_job(self, job: dict) -> None:
        file_id = job.get("fileId")
        user_id = job.get("userId")
        if not file_id:
            raise ThumbnailJobError("Missing fileId")
        if not user_id:
            raise ThumbnailJobError("Missing userId")

        row = await self.credential_store.find_file_entity_by_id(file_id, owner_id=user_id)
        if not row or row.type != FileType.IMAGE.value:
            raise ThumbnailJobError("File not found")

        data = await self.blob_storage.read_bytes(row.local_path)
        thumbs = await run_in_threadpool(generate_thumbnails, data, self.widths)
        for width, content in thumbs.items():
            await self.blob_storage.write_blob(thumbnail_path(row.local_path, width), content)
        logger.info("Generated %d thumbnails for %s", len(thumbs), file_id)

    async def run(self) -> None:
        logger.info("Thumbnail worker started: widths=%s", self.widths)
        while True:
            job = await self.queue.get()
            try:
                await self.process_job(job)
                thumbnail_jobs.labels(status="done").inc()
            except asyncio.CancelledError:
                logger.info("Thumbnail worker cancelled by shutdown")
                raise
            except (ThumbnailJobError, FilesManagerError) as e:
                thumbnail_jobs.labels(status="failed").inc()
                logger.warning("Thumbnail job %s failed: %s", job, e)
            except Exception as e:
                thumbnail_jobs.labels(status="failed").inc()
                logger.exception("Thumbnail job %s crashed: %s", job, e)
            finally:
                self.queue.task_done()

    def start(self) -> asyncio.Task:
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            logger.info("Thumbnail worker stopped")
        self._task = None
