"""
Roster spreadsheet parsing.

A roster is a CSV or XLSX sheet with the headers ``Tanggal`` (date) and
``Nama Satpam`` (guard full name), plus an optional ``Gedung`` column
holding a building selector. Parsing is all-or-nothing: any bad row
aborts the whole import before anything is written.
"""

from __future__ import annotations

import csv
import io
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional

import openpyxl

from .directory import DirectoryIndex
from .schedule_planner import BuildingSelector, RosterEntry, parse_building_selector

logger = logging.getLogger("roster-import")

COL_DATE = "Tanggal"
COL_NAME = "Nama Satpam"
COL_BUILDING = "Gedung"

# Spreadsheet serial day 1 is 1900-01-01 with the Lotus leap-year bug, hence 1899-12-30.
SERIAL_EPOCH = date(1899, 12, 30)
_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d/%m/%Y", "%d-%m-%Y")

XLSX_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
}


class RosterImportError(ValueError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


@dataclass(frozen=True)
class RosterRow:
    row_number: int
    date_raw: Any
    name: str
    building: Optional[str] = None


def _from_serial(serial: float, raw: Any) -> date:
    if not math.isfinite(serial):
        raise ValueError(f"Invalid date: {raw}")
    try:
        return SERIAL_EPOCH + timedelta(days=int(serial))
    except OverflowError as exc:
        raise ValueError(f"Invalid date: {raw}") from exc


def parse_roster_date(value: Any) -> date:
    """Accept a date cell, a spreadsheet serial day count or an ISO-like string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid date: {value}")
    if isinstance(value, (int, float)):
        return _from_serial(value, value)
    text = str(value or "").strip()
    if not text:
        raise ValueError("date is empty")
    try:
        serial = float(text)
    except ValueError:
        serial = None
    if serial is not None:
        return _from_serial(serial, text)
    # tolerate a trailing time part such as "2024-03-09 00:00:00"
    head = text.split("T")[0].split(" ")[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(head, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {value}")


def _header_map(headers: Iterable[Any]) -> dict[str, int]:
    mapping: dict[str, int] = {}
    for idx, header in enumerate(headers):
        key = str(header or "").strip().lower()
        if key and key not in mapping:
            mapping[key] = idx
    return mapping


def _rows_from_table(table: list[list[Any]]) -> list[RosterRow]:
    if not table:
        raise RosterImportError(["File is empty"])
    header = _header_map(table[0])
    missing = [col for col in (COL_DATE, COL_NAME) if col.lower() not in header]
    if missing:
        raise RosterImportError([f"Missing required column: {col}" for col in missing])
    date_idx = header[COL_DATE.lower()]
    name_idx = header[COL_NAME.lower()]
    building_idx = header.get(COL_BUILDING.lower())

    def cell(values: list[Any], idx: Optional[int]) -> Any:
        if idx is None or idx >= len(values):
            return None
        value = values[idx]
        return value.strip() if isinstance(value, str) else value

    rows: list[RosterRow] = []
    for row_number, values in enumerate(table[1:], start=2):
        if all(v is None or (isinstance(v, str) and not v.strip()) for v in values):
            continue
        name = cell(values, name_idx)
        building = cell(values, building_idx)
        rows.append(
            RosterRow(
                row_number=row_number,
                date_raw=cell(values, date_idx),
                name=str(name) if name is not None else "",
                building=str(building) if building not in (None, "") else None,
            )
        )
    if not rows:
        raise RosterImportError(["File has no roster rows"])
    return rows


def _read_csv_table(raw: bytes) -> list[list[Any]]:
    text = raw.decode("utf-8-sig")
    sample = text[:2048]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    return [list(row) for row in csv.reader(io.StringIO(text), dialect)]


def _read_xlsx_table(raw: bytes) -> list[list[Any]]:
    wb = openpyxl.load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    try:
        sheet = wb.active
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        wb.close()


def _is_xlsx(filename: Optional[str], content_type: Optional[str], raw: bytes) -> bool:
    if filename and filename.lower().endswith((".xlsx", ".xlsm")):
        return True
    if content_type and content_type.lower() in XLSX_CONTENT_TYPES:
        return True
    # XLSX is a zip container
    return raw[:2] == b"PK"


def read_roster(raw: bytes, *, filename: Optional[str] = None, content_type: Optional[str] = None) -> list[RosterRow]:
    if not raw:
        raise RosterImportError(["File is empty"])
    try:
        if _is_xlsx(filename, content_type, raw):
            table = _read_xlsx_table(raw)
        else:
            table = _read_csv_table(raw)
    except RosterImportError:
        raise
    except Exception as exc:
        raise RosterImportError([f"Unreadable roster file: {exc}"]) from exc
    return _rows_from_table(table)


def resolve_roster(
    rows: list[RosterRow],
    directory: DirectoryIndex,
    *,
    default_selector: Optional[BuildingSelector] = None,
) -> list[RosterEntry]:
    """Turn parsed rows into planner entries, or raise with every row error."""
    errors: list[str] = []
    entries: list[RosterEntry] = []
    for row in rows:
        row_errors: list[str] = []
        if row.date_raw is None or (isinstance(row.date_raw, str) and not row.date_raw):
            row_errors.append(f"Row {row.row_number}: {COL_DATE} is required")
        if not row.name:
            row_errors.append(f"Row {row.row_number}: {COL_NAME} is required")
        if row_errors:
            errors.extend(row_errors)
            continue
        try:
            day = parse_roster_date(row.date_raw)
        except ValueError as exc:
            errors.append(f"Row {row.row_number}: {exc}")
            continue
        person_id = directory.resolve(row.name)
        if person_id is None:
            errors.append(f"Row {row.row_number}: unknown guard '{row.name}'")
            continue
        try:
            selector = parse_building_selector(row.building) if row.building else (default_selector or parse_building_selector(None))
        except ValueError as exc:
            errors.append(f"Row {row.row_number}: {exc}")
            continue
        entries.append(RosterEntry(date=day, person_id=person_id, selector=selector))
    if errors:
        logger.info("Roster rejected rows=%s errors=%s", len(rows), len(errors))
        raise RosterImportError(errors)
    return entries
