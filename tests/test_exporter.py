"""Tests for the CSV and JSONL exporters."""

import csv
import json
import os
import tempfile
import unittest

from pagescraper.errors import ExportError
from pagescraper.exporter import CsvExporter, JsonlRecordWriter
from pagescraper.models import ExtractedRecord


def _record(url="http://x/p1", **fields):
    return ExtractedRecord(url=url, fields={k: tuple(v) for k, v in fields.items()})


def _read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


class TestCsvExporter(unittest.TestCase):
    """Verify the two-column table output and its edge cases."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "books.csv")

    def tearDown(self):
        self._tmp.cleanup()

    def test_writes_header_and_paired_rows(self):
        """Values should be paired by index under a Title,Price header."""
        count = CsvExporter().export(self.path, [_record(title=["A", "B"], price=["1", "2"])])
        self.assertEqual(count, 2)
        self.assertEqual(_read_rows(self.path), [["Title", "Price"], ["A", "1"], ["B", "2"]])

    def test_second_line_round_trips(self):
        """Values containing the delimiter survive quoting."""
        CsvExporter().export(self.path, [_record(title=["A"], price=["9.99"])])
        self.assertEqual(_read_rows(self.path)[1], ["A", "9.99"])
        CsvExporter().export(self.path, [_record(title=["Tea, Earl Grey"], price=["£3"])])
        self.assertEqual(_read_rows(self.path)[1], ["Tea, Earl Grey", "£3"])

    def test_no_records_writes_header_only(self):
        """An empty walk still produces a header-only file."""
        self.assertEqual(CsvExporter().export(self.path, []), 0)
        self.assertEqual(_read_rows(self.path), [["Title", "Price"]])

    def test_only_selected_record_is_exported(self):
        """By default the first record is written; record_index picks another."""
        records = [_record(title=["A"], price=["1"]), _record(title=["C"], price=["3"])]
        CsvExporter().export(self.path, records)
        self.assertEqual(_read_rows(self.path)[1:], [["A", "1"]])
        CsvExporter(record_index=1).export(self.path, records)
        self.assertEqual(_read_rows(self.path)[1:], [["C", "3"]])

    def test_record_index_out_of_range_raises(self):
        """Selecting a record that was never gathered is an export error."""
        with self.assertRaises(ExportError):
            CsvExporter(record_index=3).export(self.path, [_record(title=["A"], price=["1"])])

    def test_mismatched_lengths_raise_by_default(self):
        """Unequal column lengths fail under the error policy."""
        with self.assertRaises(ExportError):
            CsvExporter().export(self.path, [_record(title=["A", "B"], price=["1"])])

    def test_mismatched_lengths_truncate(self):
        """The truncate policy stops at the shortest column."""
        exporter = CsvExporter(on_mismatch="truncate")
        count = exporter.export(self.path, [_record(title=["A", "B"], price=["1"])])
        self.assertEqual(count, 1)
        self.assertEqual(_read_rows(self.path), [["Title", "Price"], ["A", "1"]])

    def test_missing_field_counts_as_empty(self):
        """A record without the price field has zero rows under truncate."""
        exporter = CsvExporter(on_mismatch="truncate")
        self.assertEqual(exporter.export(self.path, [_record(title=["A"])]), 0)

    def test_custom_columns(self):
        """Column fields and headers are configurable."""
        exporter = CsvExporter(columns=(("name", "Name"), ("stock", "Stock"), ("price", "Price")))
        exporter.export(self.path, [_record(name=["X"], stock=["5"], price=["2"])])
        self.assertEqual(_read_rows(self.path), [["Name", "Stock", "Price"], ["X", "5", "2"]])

    def test_write_failure_raises_export_error(self):
        """An unwritable path should raise ExportError."""
        path = os.path.join(self._tmp.name, "missing", "books.csv")
        with self.assertRaises(ExportError):
            CsvExporter().export(path, [])

    def test_unknown_policy_rejected(self):
        """Only the error and truncate policies exist."""
        with self.assertRaises(ValueError):
            CsvExporter(on_mismatch="pad")


class TestJsonlRecordWriter(unittest.TestCase):
    """Verify the JSON Lines dump of every record."""

    def test_writes_one_line_per_record(self):
        """Each record becomes one JSON object with its URL and fields."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "records.jsonl")
            records = [_record(title=["A"], price=["1"]), _record(url="http://x/p2", title=[], price=[])]
            self.assertEqual(JsonlRecordWriter().export(path, records), 2)
            with open(path, encoding="utf-8") as f:
                lines = [json.loads(line) for line in f]
        self.assertEqual(lines[0], {"url": "http://x/p1", "fields": {"title": ["A"], "price": ["1"]}})
        self.assertEqual(lines[1]["fields"]["title"], [])


if __name__ == "__main__":
    unittest.main()
