"""Application error types.

Every failure the pipeline or the front ends can report is an ``AppError``
subclass carrying a stable code, an HTTP status and a ``details`` dict with
enough context (source URL, cache key, underlying cause) to diagnose it.
"""

from typing import Any

from fastapi import status


class AppError(Exception):
    """Base application error."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.details = details or {}
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def with_context(self, **context: Any) -> "AppError":
        """Attach extra diagnostic fields without overwriting existing ones."""
        for key, value in context.items():
            if value is not None:
                self.details.setdefault(key, value)
        return self

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({context})"


class InvalidRequestError(AppError):
    """Malformed path or parameters."""

    code = "INVALID_REQUEST"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class MethodNotAllowedError(AppError):
    code = "METHOD_NOT_ALLOWED"
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED


class FetchError(AppError):
    """Network or origin failure while retrieving the source image."""

    code = "FETCH_ERROR"


class DecodeError(AppError):
    """Source bytes are not a readable image."""

    code = "DECODE_ERROR"


class UnsupportedFormatError(AppError):
    """Requested output format is not one of jpeg, png, webp."""

    code = "UNSUPPORTED_FORMAT"


class EncodeError(AppError):
    code = "ENCODE_ERROR"


class FileSystemError(AppError):
    """Cache directory or file I/O failure."""

    code = "FILESYSTEM_ERROR"
