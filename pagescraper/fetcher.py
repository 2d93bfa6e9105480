from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from .cache import CacheBase
from .errors import FetchError

logger = logging.getLogger(__name__)


class PageFetcher:
    """Retrieves raw page content, consulting the cache before the network.

    Any network failure, non-2xx status, body read failure or cache write
    failure surfaces as a single FetchError.
    """

    def __init__(
        self,
        cache: CacheBase,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._cache = cache
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout
        self.requests_made = 0

    def fetch(self, url: str) -> bytes:
        cached = self._cache.get(url)
        if cached is not None:
            return cached

        start = time.time()
        self.requests_made += 1
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise FetchError(url, f"request failed: {type(exc).__name__}: {exc}") from exc

        status_code = response.status_code
        latency_ms = int((time.time() - start) * 1000)
        logger.info("GET %s status=%s latency_ms=%d", url, status_code, latency_ms)
        if not 200 <= int(status_code) < 300:
            raise FetchError(url, f"status code error: {status_code} {response.reason}", status_code)

        try:
            content = response.content
        except requests.RequestException as exc:
            raise FetchError(url, f"reading body failed: {exc}", status_code) from exc

        try:
            self._cache.put(url, content)
        except OSError as exc:
            raise FetchError(url, f"cache write failed: {exc}", status_code) from exc
        return content

    def close(self) -> None:
        self._session.close()
