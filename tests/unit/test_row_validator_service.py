"""
Unit tests for row validation.

Run: pytest tests/unit/test_row_validator_service.py -v
"""

import pytest

from models.imports import ValidationIssue, REQUIRED_FIELD_MESSAGE, INVALID_EMAIL_MESSAGE
from models.scholar import CanonicalField, REQUIRED_FIELDS, field_label
from services.header_mapper_service import auto_map_headers
from services.row_validator_service import (
    build_field_index,
    is_valid_email,
    partition_rows,
    validate_rows,
    source_row_number,
)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mapping(standard_headers):
    return auto_map_headers(standard_headers)


def make_row(headers, values):
    return dict(zip(headers, values))


# ===================
# REVERSE INDEX
# ===================

class TestBuildFieldIndex:
    """Tests for build_field_index()"""

    def test_ignored_columns_left_out(self):
        index = build_field_index({"Notes": CanonicalField.IGNORE, "Email": CanonicalField.EMAIL})

        assert index == {CanonicalField.EMAIL: "Email"}

    def test_last_header_wins_for_shared_field(self):
        index = build_field_index({
            "Phone": CanonicalField.CONTACT_NUMBER,
            "Mobile": CanonicalField.CONTACT_NUMBER,
        })

        assert index[CanonicalField.CONTACT_NUMBER] == "Mobile"


# ===================
# REQUIRED FIELDS
# ===================

class TestRequiredFields:
    """Required-field checks."""

    def test_complete_row_has_no_issues(self, standard_headers, mapping, valid_row):
        rows = [make_row(standard_headers, valid_row)]

        assert validate_rows(rows, mapping) == []

    def test_blank_required_cell(self, standard_headers, mapping, valid_row):
        values = list(valid_row)
        values[1] = "   "
        rows = [make_row(standard_headers, values)]

        issues = validate_rows(rows, mapping)

        assert issues == [ValidationIssue(row=2, field="First Name", message=REQUIRED_FIELD_MESSAGE)]

    def test_unmapped_required_field_flags_every_row(self, standard_headers, mapping, valid_row):
        mapping["Last Name"] = CanonicalField.IGNORE
        rows = [make_row(standard_headers, valid_row) for _ in range(3)]

        issues = validate_rows(rows, mapping)

        assert issues == [
            ValidationIssue(row=n, field="Last Name", message=REQUIRED_FIELD_MESSAGE)
            for n in (2, 3, 4)
        ]

    def test_all_required_missing_in_catalog_order(self):
        rows = [{"Notes": "hello"}]

        issues = validate_rows(rows, {"Notes": CanonicalField.IGNORE})

        assert [i.field for i in issues] == [field_label(f) for f in REQUIRED_FIELDS]
        assert all(i.message == REQUIRED_FIELD_MESSAGE for i in issues)

    def test_missing_cell_key_treated_as_blank(self, mapping):
        rows = [{"Last Name": "Cruz"}]

        issues = validate_rows(rows, mapping)

        assert "Last Name" not in [i.field for i in issues]
        assert "First Name" in [i.field for i in issues]

    def test_only_last_shared_header_checked(self, valid_row, standard_headers):
        """The earlier header for a shared field is not validated."""
        headers = standard_headers + ["Surname"]
        mapping = auto_map_headers(headers)
        row = make_row(headers, ["", *valid_row[1:], "Cruz"])

        issues = validate_rows([row], mapping)

        assert issues == []


# ===================
# EMAIL
# ===================

class TestEmailFormat:
    """Email format checks."""

    @pytest.mark.parametrize("email", ["a@b.c", "juan@mail.com", "j.cruz@tsu.edu.ph"])
    def test_valid_emails(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["abc", "a@b", "@b.c", "a@@b.c", "a b@c.d", "a@b."])
    def test_invalid_emails(self, email):
        assert not is_valid_email(email)

    @pytest.mark.parametrize("email", ["abc", "a@b", "@b.c"])
    def test_bad_email_gives_exactly_one_issue(self, standard_headers, mapping, valid_row, email):
        values = list(valid_row)
        values[7] = email
        rows = [make_row(standard_headers, values)]

        issues = validate_rows(rows, mapping)

        assert issues == [ValidationIssue(row=2, field="Email Address", message=INVALID_EMAIL_MESSAGE)]

    def test_blank_email_is_allowed(self, standard_headers, mapping, valid_row):
        values = list(valid_row)
        values[7] = ""

        assert validate_rows([make_row(standard_headers, values)], mapping) == []

    def test_unmapped_email_is_not_checked(self, standard_headers, mapping, valid_row):
        mapping["Email"] = CanonicalField.IGNORE
        values = list(valid_row)
        values[7] = "not-an-email"

        assert validate_rows([make_row(standard_headers, values)], mapping) == []

    def test_email_issue_comes_after_required_issues(self, standard_headers, mapping):
        row = make_row(standard_headers, ["", "Juan", "I", "Capas", "Ongoing", "TSU", "BSIT", "bad"])

        issues = validate_rows([row], mapping)

        assert [i.field for i in issues] == ["Last Name", "Email Address"]


# ===================
# NUMBERING + ORDER
# ===================

class TestRowNumbering:
    """Issues are addressed by file row number."""

    def test_first_data_row_is_row_two(self):
        assert source_row_number(0) == 2

    def test_issue_rows_offset_by_header(self, standard_headers, mapping, valid_row):
        bad = list(valid_row)
        bad[2] = ""
        rows = [make_row(standard_headers, valid_row), make_row(standard_headers, bad)]

        issues = validate_rows(rows, mapping)

        assert [i.row for i in issues] == [3]

    def test_multiple_issues_per_row_all_returned(self, standard_headers, mapping):
        row = make_row(standard_headers, ["", "", "", "", "", "", "", "x"])

        issues = validate_rows([row], mapping)

        assert len(issues) == len(REQUIRED_FIELDS) + 1
        assert {i.row for i in issues} == {2}

    def test_row_major_order(self, standard_headers, mapping):
        rows = [
            make_row(standard_headers, ["", "Juan", "I", "Capas", "Ongoing", "TSU", "BSIT", ""]),
            make_row(standard_headers, ["Cruz", "", "I", "Capas", "Ongoing", "TSU", "", ""]),
        ]

        issues = validate_rows(rows, mapping)

        assert [(i.row, i.field) for i in issues] == [
            (2, "Last Name"),
            (3, "First Name"),
            (3, "Course"),
        ]

    def test_deterministic(self, standard_headers, mapping, mixed_csv):
        from parsers.csv_parser import parse_delimited_text
        rows = parse_delimited_text(mixed_csv).rows

        assert validate_rows(rows, mapping) == validate_rows(rows, mapping)

    def test_row_numbers_count_blank_lines(self, standard_headers, mapping, valid_row, bad_email_row):
        """A blank line in the file still occupies a row number."""
        from parsers.csv_parser import parse_delimited_text
        text = "\n".join([
            ",".join(standard_headers),
            ",".join(valid_row),
            "",
            ",".join(bad_email_row),
        ]) + "\n"
        rows = parse_delimited_text(text).rows

        issues = validate_rows(rows, mapping)

        assert [i.row for i in issues if i.field == "Email Address"] == [4]
        assert {i.row for i in issues} == {3, 4}
        assert all(i.message == REQUIRED_FIELD_MESSAGE for i in issues if i.row == 3)

    def test_no_rows_no_issues(self, mapping):
        assert validate_rows([], mapping) == []


# ===================
# PARTITION
# ===================

class TestPartitionRows:
    """Tests for partition_rows()"""

    def test_partition_is_complete(self, standard_headers, mapping, mixed_csv):
        from parsers.csv_parser import parse_delimited_text
        rows = parse_delimited_text(mixed_csv).rows
        issues = validate_rows(rows, mapping)

        valid, invalid = partition_rows(rows, issues)

        assert len(valid) + len(invalid) == len(rows)
        assert [r["Last Name"] for r in valid] == ["Cruz"]
        assert [r["Last Name"] for r in invalid] == ["Santos", "Reyes"]

    def test_no_issues_all_valid(self, standard_headers, valid_row):
        rows = [make_row(standard_headers, valid_row)]

        valid, invalid = partition_rows(rows, [])

        assert valid == rows
        assert invalid == []
