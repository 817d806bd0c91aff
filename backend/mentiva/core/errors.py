"""
Application error hierarchy and the handlers that render it.

Every error leaves the API as ``{"error": "<message>"}`` with the status code
carried by the exception class.
"""
from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


class MentivaError(Exception):
    """Base class for all application-level errors."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class Unauthorized(MentivaError):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(MentivaError):
    http_status = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class ValidationError(MentivaError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFound(MentivaError):
    http_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class NoNorthStar(MentivaError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "No North Star set"


class NoEnfoques(MentivaError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "No enfoques set for this week"


class ImmutableTask(MentivaError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Cannot swap non-negotiable task"


class GenerationParseError(MentivaError):
    """The completion service returned text that does not match the expected shape."""

    default_message = "Failed to generate tasks"

    def __init__(self, message: str | None = None, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class UpstreamConfigError(MentivaError):
    default_message = "Completion service is not configured"


class CompletionServiceError(MentivaError):
    default_message = "Completion service request failed"


async def mentiva_exception_handler(request: Request, exc: MentivaError) -> JSONResponse:
    if exc.http_status >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse pydantic field errors into a single 400 message."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query"))
        parts.append(f"{field}: {error['msg']}" if field else error["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(parts) or "Invalid request"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )
