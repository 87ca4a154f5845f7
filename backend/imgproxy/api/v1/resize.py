"""Resize endpoint.

    GET /format:<fmt>/resize:<unused>:<width>:<height>/<ignored>/<url-encoded source>

The segment after the resize spec is accepted but not interpreted.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from imgproxy.dependencies import get_orchestrator
from imgproxy.errors import InvalidRequestError
from imgproxy.models.domain.request import parse_resize_path
from imgproxy.models.schemas.common import ErrorResponse
from imgproxy.services.image import ResizeOrchestrator

router = APIRouter()


@router.get(
    "/{format_segment}/{resize_segment}/{ignored}/{source:path}",
    response_class=FileResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def resize_image(
    format_segment: str,
    resize_segment: str,
    ignored: str,
    source: str,
    orchestrator: Annotated[ResizeOrchestrator, Depends(get_orchestrator)],
):
    """
    Return the resized image, computing and caching it on first request.

    Errors:
        400: Malformed path, dimensions or URL
        500: Unsupported format or any pipeline failure
    """
    request = parse_resize_path(format_segment, resize_segment, source)
    result = await orchestrator.run(request)

    return FileResponse(
        result.path,
        media_type=result.media_type,
        headers={"X-Cache": "HIT" if result.from_disk else "MISS"},
    )


@router.get("/{path:path}", include_in_schema=False)
async def malformed_request(path: str):
    """Anything that is not a resize, cache or health path."""
    raise InvalidRequestError("Invalid request format", details={"path": f"/{path}"})
