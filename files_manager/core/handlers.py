import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from files_manager.core.exceptions import FilesManagerError

logger = logging.getLogger("files-manager")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FilesManagerError)
    async def files_manager_error_handler(request: Request, exc: FilesManagerError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s", request.method, request.url.path, exc.reason)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        reason = "Bad request"
        # a body that is not JSON at all reports a character offset as its location
        if errors and errors[0].get("type") != "json_invalid":
            parts = errors[0]["loc"][1:]
            if parts and all(isinstance(part, str) for part in parts):
                reason = "Invalid " + ".".join(parts)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": reason})
