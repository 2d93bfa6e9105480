from __future__ import annotations

from typing import Optional


class ScraperError(Exception):
    """Base class for every error raised by the scraper."""


class ConfigError(ScraperError):
    """Invalid command-line or selector configuration."""


class FetchError(ScraperError):
    """A page could not be retrieved (network, HTTP status or cache write)."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{message} (url={url})")
        self.url = url
        self.status_code = status_code


class ParseError(ScraperError):
    """Page content could not be parsed or queried."""


class ExportError(ScraperError):
    """Extracted records could not be written out."""
