"""End-to-end resize pipeline.

Per request:
1. Derive the cache key
2. Disk hit -> served from disk
3. Memory hit -> skip to 5
4. Fetch, decode, remember the decoded original
5. Clamp dimensions to the source
6. Resize (centered fill)
7. Encode
8. Persist atomically -> served from pipeline

Nothing is retried. A decoded original stays in the memory cache even when a
later step fails.
"""

import asyncio
import logging

from imgproxy.errors import AppError
from imgproxy.models.domain.request import ResizeRequest, ResizeResult
from imgproxy.services.fetcher import Fetcher
from imgproxy.services.image.cache_key import derive_cache_key
from imgproxy.services.image.codec import Codec
from imgproxy.services.image.dimensions import resolve_dimensions
from imgproxy.services.image.disk_cache import DiskVariantCache
from imgproxy.services.image.memory_cache import MemoryImageCache

logger = logging.getLogger(__name__)


class ResizeOrchestrator:
    """
    Ties the fetcher, codec and both cache tiers together.

    One instance is shared by every request of a process. Concurrent misses
    for the same request both run the full pipeline; the last atomic write
    wins with identical content.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        codec: Codec,
        memory_cache: MemoryImageCache,
        disk_cache: DiskVariantCache,
    ):
        self.fetcher = fetcher
        self.codec = codec
        self.memory_cache = memory_cache
        self.disk_cache = disk_cache

    async def run(self, request: ResizeRequest) -> ResizeResult:
        """
        Produce (or find) the variant artifact for ``request``.

        Raises:
            AppError: FetchError, DecodeError, UnsupportedFormatError,
                EncodeError or FileSystemError, with source URL and cache key
                in ``details``
        """
        cache_key = derive_cache_key(request)

        try:
            if await asyncio.to_thread(self.disk_cache.exists, cache_key):
                logger.info(f"Disk cache hit {cache_key}")
                return ResizeResult(
                    request=request,
                    cache_key=cache_key,
                    path=await asyncio.to_thread(self.disk_cache.path_for, cache_key),
                    from_disk=True,
                )

            image = await self._load_original(request.source_url)
            data = await asyncio.to_thread(self._render, image, request)
            path = await asyncio.to_thread(self.disk_cache.write, cache_key, data)
        except AppError as e:
            e.with_context(source_url=request.source_url, cache_key=cache_key)
            logger.warning(f"Resize failed: {e}")
            raise

        logger.info(f"Stored {cache_key} ({len(data)} bytes)")
        return ResizeResult(request=request, cache_key=cache_key, path=path)

    async def _load_original(self, url: str):
        """Decoded source image from memory, or fetched and decoded."""
        image = self.memory_cache.lookup(url)
        if image is not None:
            logger.info(f"Memory original image cache hit {url}")
            return image

        data = await self.fetcher.get(url)
        image = await asyncio.to_thread(self.codec.decode, data)
        self.memory_cache.insert(url, image)
        return image

    def _render(self, image, request: ResizeRequest) -> bytes:
        """Clamp, resize and encode (CPU-bound, runs in a worker thread)."""
        original_width, original_height = self.codec.size(image)
        width, height = resolve_dimensions(
            request.width, request.height, original_width, original_height
        )
        resized = self.codec.resize(image, width, height)
        return self.codec.encode(resized, request.format)
