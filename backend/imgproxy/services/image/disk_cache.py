"""Persistent store of encoded variant artifacts.

Flat directory of files named by cache key. Entries are never evicted,
expired or rewritten; the presence of a file means the work is done.
"""

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from imgproxy.errors import FileSystemError, NotFoundError

logger = logging.getLogger(__name__)


class DiskVariantCache:
    """
    Variant artifacts on disk, keyed by cache key.

    Cache structure:
    cache_dir/
    ├── 5d41402abc4b2a76b9719d911017c592_300x200.jpeg
    └── ...
    """

    def __init__(self, cache_dir: str | Path = "./cache"):
        self.cache_dir = Path(cache_dir)

    def path_for(self, name: str) -> Path:
        """
        Map a cache key or client-supplied filename to a path in the cache dir.

        Raises:
            NotFoundError: If the name could point outside the cache directory
        """
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise NotFoundError("Not found", details={"filename": name})

        base = self.cache_dir.resolve()
        path = (base / name).resolve()
        if path.parent != base:
            raise NotFoundError("Not found", details={"filename": name})
        return path

    def exists(self, key: str) -> bool:
        """Existence check only; content is not validated."""
        return self.path_for(key).is_file()

    def write(self, key: str, data: bytes) -> Path:
        """
        Persist ``data`` under ``key``.

        Writes to a temporary file in the cache directory, then atomically
        replaces the target so readers never see a partial artifact.

        Raises:
            FileSystemError: If the directory or file cannot be written
        """
        path = self.path_for(key)
        tmp_path: str | None = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                dir=self.cache_dir,
                prefix=".tmp-",
                suffix=path.suffix,
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise FileSystemError(
                f"Failed to write cache file: {e}",
                details={"cache_key": key, "cause": str(e)},
            ) from e

        logger.debug(f"Stored {key} ({len(data)} bytes)")
        return path

    def read(self, key: str) -> bytes:
        """
        Read a stored artifact.

        Raises:
            NotFoundError: If no artifact exists for ``key``
            FileSystemError: On any other read failure
        """
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError("Not found", details={"cache_key": key}) from None
        except OSError as e:
            raise FileSystemError(
                f"Failed to read cache file: {e}",
                details={"cache_key": key, "cause": str(e)},
            ) from e
