"""전역 예외 핸들러 — 모든 오류를 {success: false, message, errors?} 로 변환.

Global exception handlers for the bug API.

    - ValidationFailedError → 400 with the collected messages
    - StorageConstraintError (ORM model limits) → 400 "Validation failed"
    - RequestValidationError (body shape / types) → 400 "Validation failed"
    - HTTPException → its status; unknown routes become "Not Found - <path>"
    - Exception (catch-all) → 500 "Server Error", logged with traceback
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bugtracker.utils.exceptions import NotFoundError, StorageConstraintError, ValidationFailedError

logger = logging.getLogger(__name__)

VALIDATION_FAILED: str = "Validation failed"


def _error_body(message: str, errors: list[str] | None = None) -> dict:
    body: dict = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ValidationFailedError)
    async def validation_failed_handler(request: Request, exc: ValidationFailedError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail, exc.errors),
        )

    @app.exception_handler(StorageConstraintError)
    async def storage_constraint_handler(request: Request, exc: StorageConstraintError):
        logger.info("Storage constraint on %s: %s", request.url.path, exc.messages)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(VALIDATION_FAILED, exc.messages),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(VALIDATION_FAILED, [_describe(e) for e in exc.errors()]),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message: str = str(exc.detail)
        # 라우트 미일치 404 — Unmatched route, not a record lookup miss
        if exc.status_code == status.HTTP_404_NOT_FOUND and not isinstance(exc, NotFoundError):
            logger.info("Route not found: %s %s", request.method, request.url.path)
            message = f"Not Found - {request.url.path}"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Server Error"),
        )
