"""
HTTP front-end tests.

The app is built around an orchestrator whose fetcher serves an in-memory
800x400 PNG, so routes run the real pipeline without network access.
"""

from io import BytesIO
from pathlib import Path
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from conftest import SOURCE_URL, BrokenFetcher, StubFetcher, list_files
from imgproxy.config import Settings
from imgproxy.main import create_app
from imgproxy.services.image import (
    DiskVariantCache,
    MemoryImageCache,
    PillowCodec,
    ResizeOrchestrator,
)

ENCODED_SOURCE = quote(SOURCE_URL, safe="")


def resize_path(fmt: str = "png", width: int = 200, height: int = 100) -> str:
    return f"/format:{fmt}/resize:fill:{width}:{height}/plain/{ENCODED_SOURCE}"


def make_client(fetcher, cache_dir: Path) -> TestClient:
    orchestrator = ResizeOrchestrator(
        fetcher=fetcher,
        codec=PillowCodec(),
        memory_cache=MemoryImageCache(capacity=10),
        disk_cache=DiskVariantCache(cache_dir),
    )
    app = create_app(Settings(cache_dir=str(cache_dir)), orchestrator=orchestrator)
    return TestClient(app)


@pytest.fixture
def client(fetcher: StubFetcher, cache_dir: Path):
    with make_client(fetcher, cache_dir) as test_client:
        yield test_client


# ============================================
# Resize route
# ============================================

class TestResizeRoute:
    def test_resize_miss_then_hit(self, client: TestClient, fetcher: StubFetcher) -> None:
        first = client.get(resize_path())
        second = client.get(resize_path())

        assert first.status_code == 200
        assert first.headers["content-type"] == "image/png"
        assert first.headers["x-cache"] == "MISS"
        assert second.headers["x-cache"] == "HIT"
        assert second.content == first.content
        assert fetcher.calls == [SOURCE_URL]

        with Image.open(BytesIO(first.content)) as img:
            assert img.format == "PNG"
            assert img.size == (200, 100)

    def test_jpg_alias_served_as_jpeg(self, client: TestClient) -> None:
        response = client.get(resize_path(fmt="jpg"))

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"

    def test_unencoded_source_url(self, client: TestClient, fetcher: StubFetcher) -> None:
        response = client.get("/format:webp/resize:fill:50:50/x/example.com/photos/cat.png")

        assert response.status_code == 200
        assert fetcher.calls == ["https://example.com/photos/cat.png"]

    def test_unsupported_format(self, client: TestClient, cache_dir: Path) -> None:
        response = client.get(resize_path(fmt="bmp"))

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "UNSUPPORTED_FORMAT"
        assert list_files(cache_dir) == []

    @pytest.mark.parametrize(
        "path",
        [
            f"/format:png/resize:200:100/plain/{ENCODED_SOURCE}",
            f"/format:png/resize:fill:0:100/plain/{ENCODED_SOURCE}",
            f"/png/resize:fill:200:100/plain/{ENCODED_SOURCE}",
            "/format:png/resize:fill:200:100",
            f"/format:png/resize:fill:200:100/plain/{quote('https://[::1/a.png', safe='')}",
            "/",
        ],
    )
    def test_malformed_paths(self, client: TestClient, path: str) -> None:
        response = client.get(path)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_pipeline_failure(self, cache_dir: Path) -> None:
        with make_client(BrokenFetcher(), cache_dir) as client:
            response = client.get(resize_path())

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "FETCH_ERROR"
        assert "connection refused" in error["message"]
        assert error["details"]["source_url"] == SOURCE_URL


# ============================================
# Cache read-through
# ============================================

class TestCacheRoute:
    def test_serves_existing_artifact(self, client: TestClient, cache_dir: Path) -> None:
        created = client.get(resize_path())
        [filename] = list_files(cache_dir)

        response = client.get(f"/cache/{filename}")

        assert response.status_code == 200
        assert response.content == created.content

    def test_missing_artifact(self, client: TestClient) -> None:
        assert client.get("/cache/missing_1x1.png").status_code == 404

    def test_traversal_is_confined(self, client: TestClient, tmp_path: Path) -> None:
        (tmp_path / "secret.txt").write_text("top secret")

        for path in ("/cache/..%2F..%2Fetc%2Fpasswd", "/cache/..%2Fsecret.txt"):
            response = client.get(path)
            assert response.status_code == 404
            assert "top secret" not in response.text


# ============================================
# Methods, health, headers
# ============================================

class TestMisc:
    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH"])
    def test_non_get_rejected(self, client: TestClient, method: str) -> None:
        for path in (resize_path(), "/cache/anything.png", "/health", "/nowhere"):
            response = client.request(method, path)
            assert response.status_code == 405
            assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"

    def test_health(self, client: TestClient) -> None:
        client.get(resize_path())
        body = client.get("/health").json()

        assert body["status"] == "ok"
        assert body["cache_dir_exists"] is True
        assert body["memory_cache"]["entries"] == 1
        assert body["memory_cache"]["capacity"] == 10

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["x-request-id"] == "abc123"

    def test_request_id_generated(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers["x-request-id"]
