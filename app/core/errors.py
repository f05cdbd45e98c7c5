"""
Error taxonomy for the API.

Services raise these where they would otherwise raise a bare HTTPException;
FastAPI turns them into responses at the boundary. Anything else that escapes
a handler is reported as an UnknownError (500).
"""

import logging
import traceback

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings

logger = logging.getLogger(__name__)


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    # Duplicates are reported as plain bad requests
    def __init__(self, detail: str = "Already exists"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthError(HTTPException):
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class MediaUploadError(HTTPException):
    """The media store rejected or failed an upload. Fatal to the operation."""

    def __init__(self, detail: str = "Failed to upload media"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class MediaDeleteError(Exception):
    """
    The media store failed to delete an object.

    Never surfaced to clients: callers log it and record the object for a
    later purge.
    """

    def __init__(self, public_id: str, reason: str):
        self.public_id = public_id
        self.reason = reason
        super().__init__(f"Failed to delete media '{public_id}': {reason}")


class UnknownError(HTTPException):
    def __init__(self, detail: str = "Internal Server Error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = UnknownError()
    content = {"detail": error.detail}
    # Stack traces only leave the server in development
    if settings.is_development:
        content["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=error.status_code, content=content)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed bodies and params are plain validation errors
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
