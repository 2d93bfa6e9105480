from __future__ import annotations

import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)


class CacheBase(ABC):
    """Abstract base class for page content caches.

    Subclasses map a URL to previously fetched raw bytes. A miss is reported
    as None, never as an error.
    """

    @abstractmethod
    def get(self, url: str) -> Optional[bytes]:
        """Return cached content for url, or None on a miss."""

    @abstractmethod
    def put(self, url: str, content: bytes) -> None:
        """Store content for url. I/O errors propagate."""

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the cache."""

    def __enter__(self) -> "CacheBase":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ContentCache(CacheBase):
    """Caches page bytes as files in a temporary directory scoped to one run.

    The directory is created on construction and removed by close(), so
    nothing persists across runs.
    """

    def __init__(self, directory: Optional[str] = None, prefix: str = "web_cache") -> None:
        self._owns_dir = directory is None
        self._dir = directory if directory is not None else tempfile.mkdtemp(prefix=prefix)
        self._closed = False
        logger.debug("content cache at %s", self._dir)

    @property
    def directory(self) -> str:
        return self._dir

    @staticmethod
    def key_for(url: str) -> str:
        """Filesystem-safe token for a URL.

        Every character outside letters, digits and "_.-~" is percent-encoded,
        so path separators never reach the filesystem and distinct URLs keep
        distinct keys.
        """
        return quote(url, safe="")

    def _path(self, url: str) -> str:
        return os.path.join(self._dir, self.key_for(url))

    def get(self, url: str) -> Optional[bytes]:
        path = self._path(url)
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as exc:
            # unreadable entries (name too long, directory) count as misses
            logger.debug("cache miss %s (%s)", url, type(exc).__name__)
            return None
        logger.debug("cache hit %s (%d bytes)", url, len(content))
        return content

    def put(self, url: str, content: bytes) -> None:
        with open(self._path(url), "wb") as f:
            f.write(content)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_dir:
            shutil.rmtree(self._dir, ignore_errors=True)
            logger.debug("removed content cache %s", self._dir)
