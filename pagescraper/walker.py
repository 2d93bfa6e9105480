from __future__ import annotations

import logging
import time
from typing import Callable, List, Mapping, Optional

from .errors import FetchError, ParseError, ScraperError
from .fetcher import PageFetcher
from .models import ExtractedRecord, StopReason, WalkResult
from .parser import extract_fields, load_document, next_link
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class PaginationWalker:
    """Follows "next" links from a seed URL for at most max_pages pages.

    Each iteration acquires the rate limiter, fetches the current URL, parses
    it into an ExtractedRecord and looks up the next link. A fetch or parse
    error ends the walk but keeps the records gathered so far. There is no
    cycle detection; max_pages is the only bound.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        rate_limiter: RateLimiter,
        rules: Mapping[str, str],
        max_pages: int = 5,
        next_selector: str = "a.next",
        page_delay: float = 1.0,
        strip_text: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._fetcher = fetcher
        self._rate_limiter = rate_limiter
        self._rules = rules
        self._max_pages = max_pages
        self._next_selector = next_selector
        self._page_delay = page_delay
        self._strip_text = strip_text
        self._sleep = sleep

    def walk(self, seed_url: str) -> WalkResult:
        cursor = seed_url
        records: List[ExtractedRecord] = []
        pages_done = 0
        error: Optional[ScraperError] = None

        while True:
            if pages_done >= self._max_pages:
                reason = StopReason.LIMIT_REACHED
                break

            self._rate_limiter.acquire()
            try:
                content = self._fetcher.fetch(cursor)
            except FetchError as exc:
                reason, error = StopReason.FETCH_ERROR, exc
                break

            try:
                soup = load_document(content)
                records.append(extract_fields(soup, self._rules, url=cursor, strip=self._strip_text))
                pages_done += 1
                link = next_link(soup, self._next_selector, base_url=cursor)
            except ParseError as exc:
                reason, error = StopReason.PARSE_ERROR, exc
                break

            if link is None:
                reason = StopReason.NO_NEXT_LINK
                break

            cursor = link
            if pages_done < self._max_pages and self._page_delay > 0:
                self._sleep(self._page_delay)

        result = WalkResult(records=tuple(records), reason=reason, pages_done=pages_done, error=error)
        if result.failed:
            logger.error("walk stopped: %s after %d page(s): %s", reason.value, pages_done, error)
        else:
            logger.info("walk stopped: %s after %d page(s)", reason.value, pages_done)
        return result
