"""BeautifulSoup-based extraction of selector fields and pagination links."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Union
from urllib.parse import urljoin

import soupsieve
from bs4 import BeautifulSoup

from .errors import ParseError
from .models import ExtractedRecord

logger = logging.getLogger(__name__)

Content = Union[bytes, str]


def load_document(content: Content) -> BeautifulSoup:
    try:
        return BeautifulSoup(content, "html.parser")
    except Exception as exc:  # noqa: BLE001
        raise ParseError(f"content is not parseable markup: {exc}") from exc


def _select(soup: BeautifulSoup, selector: str) -> list:
    try:
        return soup.select(selector)
    except soupsieve.SelectorSyntaxError as exc:
        raise ParseError(f"invalid selector {selector!r}: {exc}") from exc


def _select_one(soup: BeautifulSoup, selector: str):
    try:
        return soup.select_one(selector)
    except soupsieve.SelectorSyntaxError as exc:
        raise ParseError(f"invalid selector {selector!r}: {exc}") from exc


def extract_fields(
    soup: BeautifulSoup,
    rules: Mapping[str, str],
    url: str = "",
    strip: bool = False,
) -> ExtractedRecord:
    fields: Dict[str, tuple] = {}
    for name, selector in rules.items():
        values: List[str] = []
        for element in _select(soup, selector):
            text = element.get_text()
            values.append(text.strip() if strip else text)
        fields[name] = tuple(values)
    logger.info(
        "parsed %s: %s",
        url or "<content>",
        ", ".join(f"{name}={len(values)}" for name, values in fields.items()),
    )
    return ExtractedRecord(url=url, fields=fields)


def parse_page(
    content: Content,
    rules: Mapping[str, str],
    url: str = "",
    strip: bool = False,
) -> ExtractedRecord:
    """Apply every field rule to content.

    Each field maps to the text of all matching elements in document order;
    a rule with no matches yields an empty tuple rather than an error.
    """
    return extract_fields(load_document(content), rules, url=url, strip=strip)


def next_link(soup: BeautifulSoup, selector: str, base_url: str = "") -> Optional[str]:
    element = _select_one(soup, selector)
    if element is None:
        return None
    href = element.get("href")
    if isinstance(href, list):
        href = " ".join(href)
    href = (href or "").strip()
    if not href:
        return None
    return urljoin(base_url, href) if base_url else href


def find_next_link(content: Content, selector: str = "a.next", base_url: str = "") -> Optional[str]:
    """Return the href of the first element matching selector, or None.

    Relative links are resolved against base_url when one is given.
    """
    return next_link(load_document(content), selector, base_url=base_url)
