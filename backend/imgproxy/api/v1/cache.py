"""Direct reads of already-computed variant artifacts."""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from imgproxy.dependencies import get_disk_cache
from imgproxy.errors import NotFoundError, UnsupportedFormatError
from imgproxy.models.domain.request import ImageFormat
from imgproxy.services.image import DiskVariantCache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/cache")


@router.get("/{filename:path}")
async def get_cached_file(
    filename: str,
    disk_cache: Annotated[DiskVariantCache, Depends(get_disk_cache)],
):
    """
    Serve a stored artifact by name without touching the pipeline.

    Names are confined to the cache directory; anything that would escape
    it is reported as not found.
    """
    logger.debug(f"cache: {filename}")
    path = await asyncio.to_thread(disk_cache.path_for, filename)
    if not await asyncio.to_thread(path.is_file):
        raise NotFoundError("Not found", details={"filename": filename})

    try:
        media_type = ImageFormat.parse(path.suffix.lstrip(".")).mime_type
    except UnsupportedFormatError:
        media_type = None
    return FileResponse(path, media_type=media_type)
