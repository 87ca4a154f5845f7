"""Cache key derivation for variant artifacts."""

import hashlib

from imgproxy.models.domain.request import ResizeRequest


def hash_source_url(url: str) -> str:
    """MD5 hex digest of the source URL (32 chars)."""
    return hashlib.md5(url.encode("utf-8")).hexdigest()


def derive_cache_key(request: ResizeRequest) -> str:
    """
    Build the artifact name for a request.

    Depends only on the request fields, never on image content, so keys stay
    valid across restarts: ``<md5(url)>_<width>x<height>.<format>``.
    """
    url_hash = hash_source_url(request.source_url)
    return f"{url_hash}_{request.width}x{request.height}.{request.format.value}"
