from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import ScraperError


class StopReason(str, enum.Enum):
    LIMIT_REACHED = "limit_reached"
    FETCH_ERROR = "fetch_error"
    NO_NEXT_LINK = "no_next_link"
    PARSE_ERROR = "parse_error"

    @property
    def is_error(self) -> bool:
        return self in (StopReason.FETCH_ERROR, StopReason.PARSE_ERROR)


@dataclass(frozen=True)
class ScrapeConfig:
    base_url: str
    start_page: str
    rules: Mapping[str, str]
    max_pages: int = 5
    next_selector: str = "a.next"
    output_path: str = "books.csv"
    columns: Tuple[Tuple[str, str], ...] = (("title", "Title"), ("price", "Price"))
    record_index: int = 0
    on_mismatch: str = "error"
    records_jsonl: Optional[str] = None
    rate: float = 5.0
    burst: int = 1
    page_delay: float = 1.0
    timeout: Optional[float] = None
    strip_text: bool = False

    @property
    def seed_url(self) -> str:
        return self.base_url + self.start_page


@dataclass(frozen=True)
class ExtractedRecord:
    """Field name -> extracted text values, in document order, for one page.

    Every rule field is present; a field with no matches maps to an empty tuple.
    """

    url: str
    fields: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def get(self, name: str) -> Tuple[str, ...]:
        return tuple(self.fields.get(name, ()))

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(values) for name, values in self.fields.items()}


@dataclass(frozen=True)
class WalkResult:
    records: Tuple[ExtractedRecord, ...]
    reason: StopReason
    pages_done: int
    error: Optional[ScraperError] = None

    @property
    def failed(self) -> bool:
        return self.reason.is_error
