"""Logging setup and per-request middleware."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from imgproxy.errors import MethodNotAllowedError
from imgproxy.middleware.error_handler import create_error_response, error_json_response

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # Access lines come from RequestContextMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID and log its outcome.

    The request ID is:
    - Taken from the X-Request-ID header or generated
    - Stored on request state for handlers
    - Echoed in the response headers
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or uuid.uuid4().hex
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers[self.HEADER_NAME] = request_id
        logger.info(
            f"[{request_id[:8]}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({duration_ms:.1f}ms)"
        )
        return response


class GetOnlyMiddleware(BaseHTTPMiddleware):
    """Reject every method other than GET, on any path."""

    ALLOWED_METHODS = {"GET"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method not in self.ALLOWED_METHODS:
            exc = MethodNotAllowedError(
                "Method not allowed", details={"method": request.method}
            )
            response = error_json_response(
                request,
                exc.status_code,
                create_error_response(exc.code, exc.message, exc.details),
            )
            response.headers["Allow"] = ", ".join(sorted(self.ALLOWED_METHODS))
            return response
        return await call_next(request)


def setup_observability(app: FastAPI) -> None:
    """Install request middleware (the last added runs outermost)."""
    app.add_middleware(GetOnlyMiddleware)
    app.add_middleware(RequestContextMiddleware)
