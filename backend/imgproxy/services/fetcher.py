"""Source image retrieval over HTTP."""

import logging
from typing import Protocol

import httpx

from imgproxy.errors import FetchError

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Retrieves raw bytes for a source URL."""

    async def get(self, url: str) -> bytes: ...


class HttpFetcher:
    """
    Async fetcher using httpx.

    Unlike a bare GET, every request is bounded by a timeout and the body by
    a maximum size; both failures surface as ``FetchError``.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_bytes: int = 20 * 1024 * 1024,
        user_agent: str = "imgproxy/1.0",
        client: httpx.AsyncClient | None = None,
    ):
        self._max_bytes = max_bytes
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0),
            follow_redirects=True,
            headers={
                "User-Agent": user_agent,
                "Accept": "image/*,*/*;q=0.8",
            },
        )

    async def get(self, url: str) -> bytes:
        """
        Download ``url`` and return the body.

        Raises:
            FetchError: Timeout, transport error, non-2xx status or oversized body
        """
        logger.info(f"Downloading {url}")
        try:
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()
                chunks = []
                received = 0
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if received > self._max_bytes:
                        raise FetchError(
                            f"Image too large (max {self._max_bytes} bytes)",
                            details={"source_url": url},
                        )
                    chunks.append(chunk)
        except httpx.TimeoutException as e:
            raise FetchError(
                "Failed to download image: timed out",
                details={"source_url": url, "cause": repr(e)},
            ) from e
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Failed to download image: HTTP {e.response.status_code}",
                details={"source_url": url, "status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"Failed to download image: {e}",
                details={"source_url": url, "cause": repr(e)},
            ) from e

        return b"".join(chunks)

    async def aclose(self) -> None:
        await self._client.aclose()
