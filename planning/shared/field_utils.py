"""Field resolution for schema-less spreadsheet rows.

Spreadsheet exports vary in header spelling, case and punctuation across
source systems, so logical fields are matched on a normalized form of the
column label rather than on exact header text.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

Row = Mapping[str, Any]


def normalize_label(label: object) -> str:
    """Lower-case a column label and strip every non letter/digit character.

    "Parcel / Plot number" -> "parcelplotnumber"
    """
    return "".join(ch for ch in str(label).lower() if ch.isalnum())


def to_text(value: Any) -> str:
    """Render a scalar cell value as trimmed text.

    None becomes "". Integral floats lose their ".0" so that a plot typed
    as 123 and read back as 123.0 produces the same key. Dates render as
    ISO dates, datetimes with a time component as ISO datetimes.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.hour == value.minute == value.second == value.microsecond == 0:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def resolve_raw(row: Row, candidate_names: Sequence[str]) -> Any:
    """Return the untouched cell of the best-matching column, or None.

    Same matching rules as resolve_field; used where the cell type matters,
    e.g. dates stored as Excel serial numbers.
    """
    lookup: dict[str, str] = {}
    for label in row:
        # First column wins when two labels normalize identically
        lookup.setdefault(normalize_label(label), label)

    for candidate in candidate_names:
        label = lookup.get(normalize_label(candidate))
        if label is None:
            continue
        value = row[label]
        if value is None:
            continue
        return value

    return None


def resolve_field(row: Row, candidate_names: Sequence[str]) -> str:
    """Return the value of the best-matching column for a logical field.

    Candidates are tried in order, most preferred first. A present cell
    stops the search even when it is empty; only an absent column or a
    None cell moves on to the next candidate.

    Args:
        row: Mapping of arbitrary column label to scalar value
        candidate_names: Logical field names, most preferred first

    Returns:
        Trimmed string value, or "" if no candidate matches a column
    """
    return to_text(resolve_raw(row, candidate_names))
