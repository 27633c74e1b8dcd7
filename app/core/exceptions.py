"""
Domain errors raised by the service layer.

Routes don't catch these; the handler registered in app.main renders them as
    {"detail": <message>, "code": <machine-readable code>}
with the status code of the error class.
"""

from fastapi import Request
from fastapi.responses import JSONResponse


class PortalError(Exception):
    """Base class for caller-facing failures. Nothing is mutated when raised."""

    status_code = 400
    default_code = "BAD_REQUEST"

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class ValidationFailed(PortalError):
    status_code = 400
    default_code = "VALIDATION_ERROR"


class NotFound(PortalError):
    status_code = 404
    default_code = "NOT_FOUND"


class StateConflict(PortalError):
    """The request is well-formed but the current record state forbids it."""

    status_code = 400
    default_code = "STATE_CONFLICT"


class ConcurrentUpdate(PortalError):
    """Another request changed the same record first (optimistic lock)."""

    status_code = 409
    default_code = "CONCURRENT_UPDATE"


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )
