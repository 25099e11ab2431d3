"""Domain error taxonomy and its HTTP translation."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .logging import get_logger

logger = get_logger("errors")


class NoteSyncError(Exception):
    """Base class for errors surfaced to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "Internal"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(NoteSyncError):
    """Note, collaborator or user absent."""

    status_code = status.HTTP_404_NOT_FOUND
    error_type = "NotFound"


class ForbiddenError(NoteSyncError):
    """Permission check failed."""

    status_code = status.HTTP_403_FORBIDDEN
    error_type = "Forbidden"


class InvalidInputError(NoteSyncError):
    """Missing required field or invalid value."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "InvalidInput"


class ConflictError(NoteSyncError):
    """Duplicate unique value."""

    status_code = status.HTTP_409_CONFLICT
    error_type = "Conflict"


class InternalError(NoteSyncError):
    """Unexpected store failure."""


def _error_body(error_type: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    return {
        "error": error_type,
        "message": message,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def notesync_error_handler(request: Request, exc: NoteSyncError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error", extra={"path": request.url.path}, exc_info=exc)
        body = _error_body("Internal", "Internal server error")
    else:
        body = _error_body(exc.error_type, exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=body)


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error", extra={"path": request.url.path}, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the taxonomy translators to an app."""
    app.add_exception_handler(NoteSyncError, notesync_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
