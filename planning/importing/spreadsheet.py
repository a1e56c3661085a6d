"""Spreadsheet ingestion: first worksheet, first row as headers."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import SpreadsheetError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".xlsx", ".xlsm", ".csv"}


def _header_labels(header: Iterable[Any]) -> list[str | None]:
    """Clean header cells; blank headers become None, repeats get _1, _2 suffixes."""
    labels: list[str | None] = []
    seen: dict[str, int] = {}
    for cell in header:
        text = str(cell).strip() if cell is not None else ""
        if not text:
            labels.append(None)
            continue
        count = seen.get(text, 0)
        seen[text] = count + 1
        labels.append(f"{text}_{count}" if count else text)
    return labels


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _rows_to_dicts(header: Iterable[Any], rows: Iterable[Iterable[Any]]) -> list[dict[str, Any]]:
    labels = _header_labels(header)
    records: list[dict[str, Any]] = []
    for row in rows:
        cells = list(row)
        record = {
            label: (cells[i] if i < len(cells) else None) for i, label in enumerate(labels) if label is not None
        }
        if all(_is_blank(v) for v in record.values()):
            continue
        records.append(record)
    return records


def _iter_xlsx(data: bytes, name: str) -> tuple[list[Any], Iterator[tuple[Any, ...]]]:
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        raise SpreadsheetError(f"'{name}' is not a readable Excel workbook: {e}") from e

    try:
        if not workbook.sheetnames:
            raise SpreadsheetError(f"'{name}' has no worksheets")
        sheet = workbook[workbook.sheetnames[0]]
        rows = list(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()
    if not rows:
        raise SpreadsheetError(f"First sheet of '{name}' is empty")
    return list(rows[0]), iter(rows[1:])


def _iter_csv(data: bytes, name: str) -> tuple[list[Any], Iterator[list[str]]]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SpreadsheetError(f"'{name}' is not UTF-8 encoded CSV: {e}") from e
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        header = next(reader)
    except StopIteration:
        raise SpreadsheetError(f"'{name}' is empty") from None
    return list(header), reader


def read_rows(source: bytes | Path | str, filename: str | None = None) -> list[dict[str, Any]]:
    """Read the first sheet of a spreadsheet into header-keyed row dicts.

    Only the first worksheet is read. Columns with a blank header are
    ignored and rows with no non-blank cell are skipped.

    Args:
        source: File contents or a path to the file
        filename: Name used to pick the format when source is bytes

    Returns:
        One dict per data row, keyed by header label

    Raises:
        SpreadsheetError: If the file type is unsupported or unreadable
    """
    if isinstance(source, str | Path):
        path = Path(source)
        name = filename or path.name
        data = path.read_bytes()
    else:
        name = filename or "upload.xlsx"
        data = source

    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise SpreadsheetError(f"Unsupported file type '{suffix or name}'; expected .xlsx or .csv")

    if suffix == ".csv":
        header, rows = _iter_csv(data, name)
        records = _rows_to_dicts(header, rows)
    else:
        header, xlsx_rows = _iter_xlsx(data, name)
        records = _rows_to_dicts(header, xlsx_rows)

    logger.info(f"Read {len(records)} data rows from '{name}'")
    return records
