"""
Application error kinds and their HTTP mapping.

Services and CRUD functions raise these; the handlers registered in
`register_exception_handlers` turn them into `{"error": ...}` JSON responses.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_content(self) -> dict:
        content = {"error": self.message}
        if self.details is not None:
            content["details"] = self.details
        return content


class UnauthorizedError(AppError):
    """No session, or the session token could not be validated."""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized", details: Optional[Any] = None):
        super().__init__(message, details)


class ForbiddenError(AppError):
    """Valid session whose role does not grant the capability."""
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Forbidden", details: Optional[Any] = None):
        super().__init__(message, details)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, details)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, details)


class ConflictError(AppError):
    """Uniqueness or referential conflict. Reported as 400 like other validation failures."""
    status_code = status.HTTP_400_BAD_REQUEST


class SelfModificationError(AppError):
    """An admin tried to change the role of, or delete, their own account."""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateTransitionError(AppError):
    """
    A candidate test action is not allowed in the candidate's current state.

    `code` is one of ALREADY_STARTED, NOT_YET_AVAILABLE, NOT_STARTED, ALREADY_SUBMITTED.
    """
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code

    def to_content(self) -> dict:
        content = super().to_content()
        content["code"] = self.code
        return content


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON error handlers for every error kind to the application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        issues = [
            {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation error", "details": issues},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        # Storage-level uniqueness / FK backstop for races the pre-write checks miss
        logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Request conflicts with existing data"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
