"""
Shared pytest fixtures.

Sources are generated with Pillow and served by in-memory fetchers, so no
test touches the network. Every fixture that writes uses ``tmp_path``.
"""

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from imgproxy.errors import FetchError
from imgproxy.services.image import (
    DiskVariantCache,
    MemoryImageCache,
    PillowCodec,
    ResizeOrchestrator,
)

SOURCE_URL = "https://example.com/photos/cat.png"


# ============================================
# Helpers
# ============================================

def make_image_bytes(
    width: int = 800,
    height: int = 400,
    fmt: str = "PNG",
    mode: str = "RGB",
) -> bytes:
    """Encode a solid-colour image of the given size."""
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    image = Image.new(mode, (width, height), color)
    output = BytesIO()
    image.save(output, format=fmt)
    return output.getvalue()


def image_size(path: Path) -> tuple[int, int]:
    with Image.open(path) as img:
        return img.size


def list_files(directory: Path) -> list[str]:
    if not directory.exists():
        return []
    return sorted(p.name for p in directory.iterdir())


class StubFetcher:
    """Returns fixed bytes for every URL and records each call."""

    def __init__(self, payload: bytes | None = None):
        self.payload = payload if payload is not None else make_image_bytes()
        self.calls: list[str] = []
        self.closed = False

    async def get(self, url: str) -> bytes:
        self.calls.append(url)
        return self.payload

    async def aclose(self) -> None:
        self.closed = True


class ForbiddenFetcher:
    """Fails the test if the pipeline ever reaches the network."""

    async def get(self, url: str) -> bytes:
        raise AssertionError(f"Fetcher must not be called (url={url})")


class BrokenFetcher:
    """Simulates an unreachable origin."""

    async def get(self, url: str) -> bytes:
        raise FetchError("Failed to download image: connection refused")


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Variant cache directory; intentionally not created up front."""
    return tmp_path / "cache"


@pytest.fixture
def fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def orchestrator(fetcher: StubFetcher, cache_dir: Path) -> ResizeOrchestrator:
    return ResizeOrchestrator(
        fetcher=fetcher,
        codec=PillowCodec(),
        memory_cache=MemoryImageCache(capacity=10),
        disk_cache=DiskVariantCache(cache_dir),
    )
