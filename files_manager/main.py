import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from files_manager.core.config import settings
from files_manager.core.handlers import register_exception_handlers
from files_manager.core.redis_client import SessionStore
from files_manager.monitoring.setup import setup_monitoring
from files_manager.routes import auth, download, files, users
from files_manager.services.blob_storage import BlobStorage, build_blob_storage
from files_manager.services.content_service import ContentService
from files_manager.services.credential_store import CredentialStore
from files_manager.services.file_service import FileService
from files_manager.services.listing import ListingService
from files_manager.services.session_manager import SessionManager
from files_manager.tasks.thumbnails import ThumbnailWorker

logger = logging.getLogger("files-manager")


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = app.state
    try:
        await state.credential_store.connect()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    try:
        await state.session_store.connect()
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        raise

    try:
        await state.blob_storage.prepare()
        logger.info("Blob storage initialized")
    except Exception as e:
        logger.error(f"Blob storage initialization failed: {e}")
        raise

    state.thumbnail_worker.start()
    logger.info("Background thumbnail worker started")

    yield

    await state.thumbnail_worker.stop()
    await state.session_store.close()
    await state.credential_store.close()
    logger.info("Application shutdown complete")


def create_app(
    session_store: SessionStore | None = None,
    credential_store: CredentialStore | None = None,
    blob_storage: BlobStorage | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Files Manager",
        version="1.0.0",
        lifespan=lifespan,
    )

    session_store = session_store or SessionStore(settings.REDIS_URL)
    credential_store = credential_store or CredentialStore(settings.DATABASE_URL, echo=settings.DB_ECHO)
    blob_storage = blob_storage or build_blob_storage()
    thumbnail_worker = ThumbnailWorker(credential_store, blob_storage, settings.THUMBNAIL_WIDTHS)

    app.state.session_store = session_store
    app.state.credential_store = credential_store
    app.state.blob_storage = blob_storage
    app.state.thumbnail_worker = thumbnail_worker
    app.state.session_manager = SessionManager(
        session_store, credential_store, ttl_seconds=settings.SESSION_TTL_SECONDS
    )
    app.state.file_service = FileService(credential_store, blob_storage, thumbnails=thumbnail_worker)
    app.state.listing_service = ListingService(credential_store, page_size=settings.PAGE_SIZE)
    app.state.content_service = ContentService(
        credential_store, blob_storage, thumbnail_widths=settings.THUMBNAIL_WIDTHS
    )

    app.include_router(auth)
    app.include_router(users)
    app.include_router(files)
    app.include_router(download)

    register_exception_handlers(app)
    setup_monitoring(app)

    @app.get("/health")
    async def health_check(request: Request):
        redis_alive = await request.app.state.session_store.is_alive()
        db_alive = await request.app.state.credential_store.is_alive()
        return JSONResponse(
            status_code=200 if redis_alive and db_alive else 503,
            content={"redis": redis_alive, "db": db_alive},
        )

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "files_manager.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_keep_alive=60,
    )
