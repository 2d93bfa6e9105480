"""Paginated page scraper package.

Fetches a bounded chain of linked pages, extracts fields with CSS selector
rules, caches raw page content for the run, and exports records as CSV.

Key modules:
    config       -- selector-rule / column parsing and ScrapeConfig building
    cache        -- ContentCache backed by a per-run temporary directory
    rate_limiter -- RateLimiter token bucket for outbound requests
    fetcher      -- PageFetcher (cache first, then network)
    parser       -- parse_page and find_next_link on top of BeautifulSoup
    walker       -- PaginationWalker driving fetch/parse/follow-next
    exporter     -- CsvExporter and JsonlRecordWriter
    models       -- ScrapeConfig, ExtractedRecord, WalkResult, StopReason
    errors       -- ScraperError hierarchy
"""
