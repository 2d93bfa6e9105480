from __future__ import annotations

import csv
import json
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence, Tuple

from .errors import ExportError
from .models import ExtractedRecord

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS: Tuple[Tuple[str, str], ...] = (("title", "Title"), ("price", "Price"))


class ExporterBase(ABC):
    """Abstract base class for record output backends."""

    @abstractmethod
    def export(self, path: str, records: Sequence[ExtractedRecord]) -> int:
        """Write records to path and return the number of data rows written."""


class CsvExporter(ExporterBase):
    """Writes one record as a delimited table, pairing field values by index.

    Row i holds the i-th value of every configured column field. When the
    column lists differ in length, the "error" policy raises ExportError and
    "truncate" stops at the shortest list.
    """

    def __init__(
        self,
        columns: Sequence[Tuple[str, str]] = DEFAULT_COLUMNS,
        on_mismatch: str = "error",
        record_index: int = 0,
    ) -> None:
        if on_mismatch not in ("error", "truncate"):
            raise ValueError(f"unknown mismatch policy: {on_mismatch}")
        self._columns = tuple(columns)
        self._on_mismatch = on_mismatch
        self._record_index = record_index

    def rows(self, record: ExtractedRecord) -> List[List[str]]:
        values = [record.get(name) for name, _ in self._columns]
        lengths = {name: len(v) for (name, _), v in zip(self._columns, values)}
        count = min(lengths.values()) if lengths else 0
        if len(set(lengths.values())) > 1:
            if self._on_mismatch == "error":
                raise ExportError(f"column lengths differ for {record.url or 'record'}: {lengths}")
            logger.warning("column lengths differ %s; truncating to %d rows", lengths, count)
        return [[column[i] for column in values] for i in range(count)]

    def export(self, path: str, records: Sequence[ExtractedRecord]) -> int:
        """Write the record at the configured index; no records writes the header only."""
        if not records:
            return self.export_record(path, ExtractedRecord(url=""))
        if self._record_index >= len(records):
            raise ExportError(
                f"record index {self._record_index} out of range for {len(records)} record(s)"
            )
        return self.export_record(path, records[self._record_index])

    def export_record(self, path: str, record: ExtractedRecord) -> int:
        rows = self.rows(record)
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                writer = csv.writer(f)
                writer.writerow([header for _, header in self._columns])
                writer.writerows(rows)
        except OSError as exc:
            raise ExportError(f"writing {path} failed: {exc}") from exc
        logger.info("wrote %d row(s) to %s", len(rows), path)
        return len(rows)


class JsonlRecordWriter(ExporterBase):
    """Writes every record as one JSON object per line."""

    def export(self, path: str, records: Sequence[ExtractedRecord]) -> int:
        try:
            with open(path, "w", encoding="utf-8") as f:
                for line in _json_lines(records):
                    f.write(line + "\n")
        except OSError as exc:
            raise ExportError(f"writing {path} failed: {exc}") from exc
        logger.info("wrote %d record(s) to %s", len(records), path)
        return len(records)


def _json_lines(records: Iterable[ExtractedRecord]) -> Iterable[str]:
    for record in records:
        yield json.dumps({"url": record.url, "fields": record.to_dict()}, ensure_ascii=False)
