"""Image resizing service module."""

from imgproxy.services.image.cache_key import derive_cache_key
from imgproxy.services.image.codec import Codec, PillowCodec
from imgproxy.services.image.dimensions import resolve_dimensions
from imgproxy.services.image.disk_cache import DiskVariantCache
from imgproxy.services.image.memory_cache import MemoryImageCache
from imgproxy.services.image.orchestrator import ResizeOrchestrator

__all__ = [
    "Codec",
    "DiskVariantCache",
    "MemoryImageCache",
    "PillowCodec",
    "ResizeOrchestrator",
    "derive_cache_key",
    "resolve_dimensions",
]
