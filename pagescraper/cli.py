from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .cache import ContentCache
from .config import MISMATCH_POLICIES, build_config
from .errors import ScraperError
from .exporter import CsvExporter, JsonlRecordWriter
from .fetcher import PageFetcher
from .models import ScrapeConfig, WalkResult
from .rate_limiter import RateLimiter
from .walker import PaginationWalker

logger = logging.getLogger("pagescraper")

DEFAULT_OUTPUT_PATH = "books.csv"
DEFAULT_COLUMNS = "title=Title,price=Price"


def run_scrape(config: ScrapeConfig, session=None) -> WalkResult:
    """Walk the configured pages, print each record and write the outputs.

    The cache directory lives only for the duration of this call.
    """
    rate_limiter = RateLimiter(rate=config.rate, burst=config.burst)
    with ContentCache() as cache:
        fetcher = PageFetcher(cache, session=session, timeout=config.timeout)
        walker = PaginationWalker(
            fetcher,
            rate_limiter,
            config.rules,
            max_pages=config.max_pages,
            next_selector=config.next_selector,
            page_delay=config.page_delay,
            strip_text=config.strip_text,
        )
        try:
            result = walker.walk(config.seed_url)
        finally:
            fetcher.close()
        logger.info("network requests made: %d", fetcher.requests_made)

    for record in result.records:
        print(record.to_dict())

    exporter = CsvExporter(
        columns=config.columns,
        on_mismatch=config.on_mismatch,
        record_index=config.record_index,
    )
    exporter.export(config.output_path, result.records)
    if config.records_jsonl:
        JsonlRecordWriter().export(config.records_jsonl, result.records)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scrape a chain of paginated pages with CSS selectors and export CSV",
    )
    parser.add_argument("--base-url", "--base_url", dest="base_url", required=True,
                        help="Base URL of the website")
    parser.add_argument("--start-page", "--start_page", dest="start_page", required=True,
                        help="Starting page path or URL appended to base URL")
    parser.add_argument("--selectors", required=True,
                        help="Comma-separated name=css_selector pairs, e.g. title=h3 a,price=.price_color")
    parser.add_argument("--max-pages", "--max_pages", dest="max_pages", type=int, default=5,
                        help="Maximum number of pages to scrape")

    parser.add_argument("--next-selector", default="a.next", help="Selector of the next page link")
    parser.add_argument("--output", default=DEFAULT_OUTPUT_PATH, help="Output CSV file path")
    parser.add_argument("--columns", default=DEFAULT_COLUMNS,
                        help="Comma-separated field=Header pairs for the CSV columns")
    parser.add_argument("--record-index", type=int, default=0, help="Which page record to export")
    parser.add_argument("--on-mismatch", choices=MISMATCH_POLICIES, default="error",
                        help="What to do when exported columns have different lengths")
    parser.add_argument("--records-jsonl", default=None, help="Also write every page record to this JSONL file")

    parser.add_argument("--rate", type=float, default=5.0, help="Requests per second")
    parser.add_argument("--burst", type=int, default=1, help="Rate limiter burst size")
    parser.add_argument("--page-delay", type=float, default=1.0, help="Pause between pages in seconds")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none)")
    parser.add_argument("--strip-text", action="store_true", help="Strip whitespace around extracted text")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
        result = run_scrape(config)
    except ScraperError as exc:
        logger.error("%s", exc)
        return 1

    if result.failed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
