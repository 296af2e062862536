import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

sessions_issued = Counter("sessions_issued_total", "Session tokens issued")
sessions_ended = Counter("sessions_ended_total", "Session tokens revoked")
entities_created = Counter("file_entities_created_total", "File entities created", ["type"])
blobs_written_bytes = Counter("blob_written_bytes_total", "Bytes written to blob storage")
leaked_blobs = Counter("blob_leaked_total", "Blobs written without a metadata record")
thumbnail_jobs = Counter("thumbnail_jobs_total", "Thumbnail jobs processed", ["status"])


def setup_monitoring(app: ASGIApp):
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    @app.middleware("http")
    async def monitor_requests(request: Request, call_next):
        start_time = time.time()
        response = None
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Unhandled error: %s %s -> %s", request.method, request.url.path, e)
            response = JSONResponse(status_code=500, content={"error": "Internal Server Error"})
        finally:
            process_time = time.time() - start_time
            logger.info("method=%s path=%s status=%s duration=%.4fs",
                        request.method, request.url.path,
                        getattr(response, "status_code", "?"), process_time)
        return response
