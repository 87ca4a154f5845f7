"""Domain models for resize requests."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import unquote, urlparse

from imgproxy.errors import InvalidRequestError, UnsupportedFormatError


class ImageFormat(str, Enum):
    """Output formats the proxy can encode."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @classmethod
    def parse(cls, token: str) -> "ImageFormat":
        """Parse a format token, accepting ``jpg`` as an alias for jpeg."""
        normalized = (token or "").strip().lower()
        if normalized == "jpg":
            normalized = "jpeg"
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormatError(
                f"Unsupported format: {token}",
                details={"format": token, "supported": [f.value for f in cls]},
            ) from None


def normalize_source_url(raw_url: str) -> str:
    """Default bare hosts to https and reject anything that is not http(s)."""
    url = (raw_url or "").strip()
    if not url:
        raise InvalidRequestError("Source URL is empty")
    if not url.startswith("http"):
        url = "https://" + url

    try:
        parsed = urlparse(url)
        parsed.port
    except ValueError:
        raise InvalidRequestError("Invalid URL", details={"source_url": url}) from None
    if parsed.scheme not in ("http", "https"):
        raise InvalidRequestError(
            "Invalid URL scheme", details={"source_url": url}
        )
    if not parsed.netloc:
        raise InvalidRequestError("Invalid URL host", details={"source_url": url})
    return url


def _parse_dimension(name: str, value: int | str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(
            f"Invalid {name}: {value!r}", details={name: value}
        ) from None
    if number <= 0:
        raise InvalidRequestError(
            f"{name.capitalize()} must be positive, got {number}",
            details={name: number},
        )
    return number


@dataclass(frozen=True)
class ResizeRequest:
    """Fully validated request; determines exactly one variant artifact."""

    source_url: str
    format: ImageFormat
    width: int
    height: int

    @classmethod
    def create(
        cls,
        source_url: str,
        format: str | ImageFormat,
        width: int | str,
        height: int | str,
    ) -> "ResizeRequest":
        """
        Validate raw front-end input and build a request.

        Raises:
            InvalidRequestError: Bad URL or non-positive dimensions
            UnsupportedFormatError: Unknown format token
        """
        image_format = (
            format if isinstance(format, ImageFormat) else ImageFormat.parse(format)
        )
        return cls(
            source_url=normalize_source_url(source_url),
            format=image_format,
            width=_parse_dimension("width", width),
            height=_parse_dimension("height", height),
        )


@dataclass(frozen=True)
class ResizeResult:
    """Outcome of a successful pipeline run."""

    request: ResizeRequest
    cache_key: str
    path: Path
    from_disk: bool = False

    @property
    def media_type(self) -> str:
        return self.request.format.mime_type


def parse_resize_path(
    format_segment: str,
    resize_segment: str,
    source: str,
) -> ResizeRequest:
    """
    Parse the segments of ``/format:<fmt>/resize:<unused>:<w>:<h>/<any>/<url>``.

    ``source`` has already been percent-decoded once by the server; it is
    unquoted once more so doubly-encoded URLs come out intact.

    Raises:
        InvalidRequestError: Malformed segments or dimensions
        UnsupportedFormatError: Unknown format token
    """
    if not format_segment.startswith("format:"):
        raise InvalidRequestError(
            "Invalid request format", details={"segment": format_segment}
        )
    if not resize_segment.startswith("resize:"):
        raise InvalidRequestError(
            "Invalid request format", details={"segment": resize_segment}
        )

    params = resize_segment.removeprefix("resize:").split(":")
    if len(params) != 3:
        raise InvalidRequestError(
            "Invalid resize parameters", details={"segment": resize_segment}
        )

    _, width, height = params
    return ResizeRequest.create(
        source_url=unquote(source),
        format=format_segment.removeprefix("format:"),
        width=width,
        height=height,
    )
