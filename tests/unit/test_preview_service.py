"""
Unit tests for preview tables and the CSV template.

Run: pytest tests/unit/test_preview_service.py -v
"""

from models.imports import ValidationIssue, REQUIRED_FIELD_MESSAGE
from models.scholar import CanonicalField, importable_fields
from parsers.csv_parser import parse_delimited_text
from services.header_mapper_service import auto_map_headers
from services.preview_service import (
    build_preview_frame,
    column_previews,
    frame_to_records,
    STATUS_ISSUES,
    STATUS_VALID,
)
from services.row_validator_service import validate_rows
from services.template_service import build_template_csv, template_headers
from tests.factories import ScholarCsvFactory


class TestColumnPreviews:
    """Tests for column_previews()"""

    def test_sample_from_first_row(self):
        parsed = parse_delimited_text("Surname,Remarks\nCruz,ok\nSantos,late\n")
        mapping = auto_map_headers(parsed.headers)

        columns = column_previews(parsed.headers, parsed.rows, mapping)

        assert [(c.header, c.sample, c.field) for c in columns] == [
            ("Surname", "Cruz", CanonicalField.LAST_NAME),
            ("Remarks", "ok", CanonicalField.IGNORE),
        ]

    def test_no_rows_no_sample(self):
        columns = column_previews(["Surname"], [], {"Surname": CanonicalField.LAST_NAME})

        assert columns[0].sample is None

    def test_missing_mapping_entry_shows_ignore(self):
        columns = column_previews(["Surname"], [], {})

        assert columns[0].field == CanonicalField.IGNORE


class TestBuildPreviewFrame:
    """Tests for build_preview_frame()"""

    def test_columns_use_field_labels_and_skip_ignored(self):
        parsed = parse_delimited_text("Surname,Remarks,Email\nCruz,ok,a@b.c\n")
        mapping = auto_map_headers(parsed.headers)

        df = build_preview_frame(parsed.headers, parsed.rows, mapping, [])

        assert list(df.columns) == ["row", "Last Name", "Email Address", "status"]

    def test_status_and_row_numbers(self, mixed_csv):
        parsed = parse_delimited_text(mixed_csv)
        mapping = auto_map_headers(parsed.headers)
        issues = validate_rows(parsed.rows, mapping)

        df = build_preview_frame(parsed.headers, parsed.rows, mapping, issues)

        assert list(df["row"]) == [2, 3, 4]
        assert list(df["status"]) == [STATUS_VALID, STATUS_ISSUES, STATUS_ISSUES]

    def test_row_limit(self):
        parsed = parse_delimited_text(ScholarCsvFactory.create_batch(30))
        mapping = auto_map_headers(parsed.headers)

        df = build_preview_frame(parsed.headers, parsed.rows, mapping, [], limit=5)

        assert len(df) == 5
        assert list(df["row"]) == [2, 3, 4, 5, 6]

    def test_empty_rows(self):
        df = build_preview_frame(["Surname"], [], {"Surname": CanonicalField.LAST_NAME}, [])

        assert df.empty
        assert list(df.columns) == ["row", "Last Name", "status"]


class TestFrameToRecords:
    """Tests for frame_to_records()"""

    def test_plain_records(self):
        parsed = parse_delimited_text("Surname\nCruz\n")
        issues = [ValidationIssue(row=2, field="First Name", message=REQUIRED_FIELD_MESSAGE)]

        df = build_preview_frame(parsed.headers, parsed.rows, {"Surname": CanonicalField.LAST_NAME}, issues)
        records = frame_to_records(df)

        assert records == [{"row": 2, "Last Name": "Cruz", "status": STATUS_ISSUES}]
        assert type(records[0]["row"]) is int

    def test_shared_label_keeps_both_cells(self):
        parsed = parse_delimited_text("Phone,Mobile\n111,222\n")
        mapping = auto_map_headers(parsed.headers)

        records = frame_to_records(build_preview_frame(parsed.headers, parsed.rows, mapping, []))

        assert records[0]["Contact Number"] == "111"
        assert records[0]["Contact Number (2)"] == "222"


class TestTemplate:
    """Tests for the downloadable template."""

    def test_headers_are_importable_fields_in_catalog_order(self):
        assert template_headers() == [f.value for f in importable_fields()]
        assert "ignore" not in template_headers()

    def test_template_is_single_header_line(self):
        expected = ",".join(f.value for f in importable_fields()) + "\n"

        assert build_template_csv() == expected

    def test_template_headers_auto_map_back(self):
        """A filled-in template needs no manual mapping."""
        parsed = parse_delimited_text(build_template_csv())
        mapping = auto_map_headers(parsed.headers)

        assert parsed.rows == []
        assert [mapping[h] for h in parsed.headers] == importable_fields()
