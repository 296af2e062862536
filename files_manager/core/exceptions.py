"""
Error kinds raised by the core operations.

Every error carries a short human-readable reason and the HTTP status the
adapter layer answers with. The reason is the only thing a caller ever sees.
"""
from typing import Any, Dict


class FilesManagerError(Exception):
    kind = "Internal"
    status_code = 500
    default_reason = "Internal Server Error"

    def __init__(self, reason: str | None = None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.reason}


class Unauthorized(FilesManagerError):
    kind = "Unauthorized"
    status_code = 401
    default_reason = "Unauthorized"


class BadRequest(FilesManagerError):
    kind = "BadRequest"
    status_code = 400
    default_reason = "Bad request"


class NotFound(FilesManagerError):
    kind = "NotFound"
    status_code = 404
    default_reason = "Not found"


class InternalError(FilesManagerError):
    pass
