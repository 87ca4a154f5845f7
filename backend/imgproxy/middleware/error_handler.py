"""Global error handling."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from imgproxy.config import get_settings
from imgproxy.errors import AppError

logger = logging.getLogger(__name__)


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Build CORS headers for error responses based on request origin."""
    origin = request.headers.get("origin")
    if not origin:
        return {}

    allowed_origins = get_settings().cors_origins_list
    if "*" in allowed_origins or origin in allowed_origins:
        return {"Access-Control-Allow-Origin": origin}

    return {}


def create_error_response(
    code: str,
    message: str,
    details: dict | None = None,
) -> dict[str, Any]:
    """Create standardized error response."""
    error: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if details:
        error["details"] = details

    return {"error": error}


def error_json_response(
    request: Request,
    status_code: int,
    content: dict[str, Any],
) -> JSONResponse:
    """Create JSONResponse with CORS headers for error responses."""
    headers = _get_cors_headers(request)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle application errors raised by the front end or the pipeline."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc}")
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")

    return error_json_response(
        request,
        exc.status_code,
        create_error_response(exc.code, exc.message, exc.details),
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle framework HTTP exceptions (unmatched routes and the like)."""
    code_map = {
        400: "INVALID_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        500: "INTERNAL_ERROR",
    }

    code = code_map.get(exc.status_code, "ERROR")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    return error_json_response(
        request,
        exc.status_code,
        create_error_response(code, message),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle request validation errors."""
    details = {}
    for error in exc.errors():
        loc = ".".join(str(x) for x in error["loc"])
        details[loc] = error["msg"]

    logger.warning(f"Validation error: {details}")

    return error_json_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        create_error_response(
            code="INVALID_REQUEST",
            message="Request validation failed",
            details=details,
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")

    return error_json_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        create_error_response(
            code="INTERNAL_ERROR",
            message="An unexpected error occurred",
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
