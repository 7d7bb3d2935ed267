"""Tests for the monthly Excel report."""

import io
import zipfile
from datetime import date

import pytest

from workhours.backend.aggregator import ExcelExporter
from workhours.backend.records import ShiftRecord


@pytest.fixture
def records():
    return [
        ShiftRecord.create("2024-03-10", "09:00", "17:00"),
        ShiftRecord.create("2024-04-02", "08:00", "10:00"),
        ShiftRecord.create("2024-03-05", "08:00", "16:30"),
    ]


class TestBuildReport:
    """Tests for the xlsx byte buffer."""

    def test_rows_sorted_with_summary(self, records, read_sheet):
        title, rows = read_sheet(ExcelExporter(records, "Ana", "03-2024").build_report())

        assert title == "Work hours"
        assert rows == [
            ["Tuesday", "2024-03-05", "08:00", "16:30", "8.50"],
            ["Sunday", "2024-03-10", "09:00", "17:00", "8.00"],
            ["Total hours", "16.50"],
        ]

    def test_after_deleting_first_record(self, records, read_sheet):
        remaining = [r for r in records if r.date.day != 5]
        _, rows = read_sheet(ExcelExporter(remaining, "Ana", "03-2024").build_report())

        assert len(rows) == 2
        assert rows[-1] == ["Total hours", "8.00"]

    def test_empty_month(self, records, read_sheet):
        _, rows = read_sheet(ExcelExporter(records, "Ana", "06-2024").build_report())
        assert rows == [["Total hours", "0.00"]]

    def test_header_option(self, records, read_sheet):
        exporter = ExcelExporter(records, "Ana", "04-2024", header=True)
        _, rows = read_sheet(exporter.build_report())

        assert rows[0] == ["day", "date", "startTime", "endTime", "duration"]
        assert rows[1] == ["Tuesday", "2024-04-02", "08:00", "10:00", "2.00"]
        assert rows[2] == ["Total hours", "2.00"]

    def test_custom_labels(self, records, read_sheet):
        exporter = ExcelExporter(
            records, "Ana", "03-2024", sheet_name="Radni sati", summary_label="Ukupno sati"
        )
        title, rows = read_sheet(exporter.build_report())
        assert title == "Radni sati"
        assert rows[-1] == ["Ukupno sati", "16.50"]

    def test_same_input_same_cells(self, records, read_sheet):
        first = read_sheet(ExcelExporter(records, "Ana", "03-2024").build_report())
        second = read_sheet(ExcelExporter(list(reversed(records)), "Ana", "03-2024").build_report())
        assert first == second

    def test_raw_layout_without_header(self, records, read_raw_rows):
        rows = read_raw_rows(ExcelExporter(records, "Ana", "03-2024").build_report())

        assert rows == [
            ["Tuesday", "2024-03-05", "08:00", "16:30", "8.50"],
            ["Sunday", "2024-03-10", "09:00", "17:00", "8.00"],
            ["Total hours", "16.50", None, None, None],
        ]

    def test_same_input_same_bytes(self, records):
        first = ExcelExporter(records, "Ana", "03-2024").build_report()
        second = ExcelExporter(records, "Ana", "03-2024").build_report()
        assert first == second

    def test_no_current_timestamps_embedded(self, records):
        data = ExcelExporter(records, "Ana", "03-2024").build_report()

        with zipfile.ZipFile(io.BytesIO(data)) as package:
            assert {info.date_time for info in package.infolist()} == {(1980, 1, 1, 0, 0, 0)}
            core = package.read("docProps/core.xml").decode("utf-8")

        assert "1980-01-01T00:00:00Z" in core
        assert str(date.today().year) not in core

    def test_record_ids_not_exported(self, records, read_sheet):
        _, rows = read_sheet(ExcelExporter(records, "Ana", "03-2024").build_report())
        cells = {value for row in rows for value in row}
        assert not cells & {r.record_id for r in records}


class TestExport:
    """Tests for writing the report to disk."""

    def test_filename_uses_month_name(self, records):
        assert ExcelExporter(records, "Ana", "03-2024").filename == "Ana_March.xlsx"
        assert ExcelExporter(records, "Ana", "12-2024").filename == "Ana_December.xlsx"

    def test_export_writes_file(self, records, tmp_path, read_sheet):
        exporter = ExcelExporter(records, "Ana", "03-2024")
        filepath = exporter.export(tmp_path / "out")

        assert filepath == tmp_path / "out" / "Ana_March.xlsx"
        _, rows = read_sheet(filepath.read_bytes())
        assert rows[-1] == ["Total hours", "16.50"]
