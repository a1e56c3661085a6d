"""Tests for spreadsheet field resolution."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from planning.importing import fields
from planning.shared.field_utils import normalize_label, resolve_field, resolve_raw, to_text


class TestNormalizeLabel:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Parcel / Plot number", "parcelplotnumber"),
            ("  Reference No. ", "referenceno"),
            ("WL-GSN", "wlgsn"),
            ("Zone", "zone"),
        ],
    )
    def test_strips_case_and_punctuation(self, label, expected):
        assert normalize_label(label) == expected


class TestToText:
    """Cell values render as trimmed text."""

    def test_none_is_empty(self):
        assert to_text(None) == ""

    def test_integral_float_has_no_decimal(self):
        """A plot typed as 123 and read back as 123.0 yields '123'."""
        assert to_text(123.0) == "123"
        assert to_text(12.5) == "12.5"

    def test_midnight_datetime_renders_as_date(self):
        assert to_text(datetime(2025, 1, 15)) == "2025-01-15"

    def test_datetime_with_time_keeps_time(self):
        assert to_text(datetime(2025, 1, 15, 8, 30)) == "2025-01-15T08:30:00"

    def test_date(self):
        assert to_text(date(2024, 12, 31)) == "2024-12-31"

    def test_strings_are_trimmed(self):
        assert to_text("  55B \t") == "55B"


class TestResolveField:
    """Candidate resolution over arbitrary row shapes."""

    def test_exact_header(self):
        """A header matching the first candidate resolves directly."""
        assert resolve_field({"Plot Number": "123A"}, fields.PLOT_NUMBER) == "123A"

    def test_header_spelling_differences_ignored(self):
        """Case, spaces and punctuation do not affect matching."""
        row = {"PARCEL / PLOT NUMBER": " 12 "}
        assert resolve_field(row, fields.PLOT_NUMBER) == "12"

    def test_later_candidate_used_when_earlier_absent(self):
        """Candidates are tried in order until a column exists."""
        assert resolve_field({"Parcel": "P-9"}, fields.PLOT_NUMBER) == "P-9"

    def test_empty_cell_stops_resolution(self):
        """A present-but-empty cell is a found value; later candidates are not consulted."""
        row = {"Plot Number": "", "Plot": "9"}
        assert resolve_field(row, fields.PLOT_NUMBER) == ""

    def test_none_cell_falls_through(self):
        """A None cell moves on to the next candidate."""
        row = {"Plot Number": None, "Plot": "9"}
        assert resolve_field(row, fields.PLOT_NUMBER) == "9"

    def test_no_match_is_empty(self):
        assert resolve_field({"Unrelated": "x"}, fields.PLOT_NUMBER) == ""

    def test_first_column_wins_on_normalized_collision(self):
        """Two headers normalizing identically resolve to the leftmost."""
        row = {"Plot-No": "A", "plot no": "B"}
        assert resolve_field(row, fields.PLOT_NUMBER) == "A"

    def test_numeric_value_stringified(self):
        assert resolve_field({"Reference": 1001.0}, fields.REFERENCE_NUMBER) == "1001"


class TestResolveRaw:
    def test_cell_type_preserved(self):
        assert resolve_raw({"Creation Date": 45292}, fields.CREATION_DATE) == 45292

    def test_same_fallthrough_as_resolve_field(self):
        row = {"Reference No.": None, "Reference": "R-2"}
        assert resolve_raw(row, fields.REFERENCE_NUMBER) == "R-2"

    def test_no_match_is_none(self):
        assert resolve_raw({"Zone": 7}, fields.CREATION_DATE) is None
