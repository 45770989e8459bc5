"""
Timesheet Import Service

Reads day records from an Excel workbook. Every sheet is parsed the same way:
the first row holds the headers, matched case-insensitively by substring, and
each following row becomes one day record. Rows that cannot be parsed are
reported with their sheet and row number instead of being dropped.

Expected columns:
- Date: DD/MM/YYYY text, a date cell, or an Excel serial number
- Type: day type, optionally with 'Half Day' / 'Full Day'
- Check In / Check Out: HH:MM:SS text, a time cell, or a day fraction
- Break In Times / Break Out Times: comma-separated break starts and ends
- Notes, Duration, Double Hours: optional
"""

from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.datetime import from_excel

from core.config import IMPORT_COLUMNS, IMPORT_DATE_FORMAT, SECONDS_PER_DAY, SKIPPED_SHEET_MARKER
from core.overtime import recompute
from core.timecalc import normalize_time, seconds_to_time
from core.validation import find_duplicate_dates, is_valid_time_format, validate_day_record
from models.entries import DayRecord, DayType, ImportedEntry, ImportPreview, TimeInterval

EMPTY_MARKERS = {"", "-"}
TRUE_MARKERS = {"yes", "y", "true", "1", "x"}


# =============================================================================
# CELL CONVERSION
# =============================================================================


def cell_to_date(value: Any) -> date:
    """Convert a date cell (text, date, datetime, or Excel serial) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return from_excel(value).date()
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.strptime(text, IMPORT_DATE_FORMAT).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
    raise ValueError(f"Invalid date format: {value} (use DD/MM/YYYY)")


def cell_to_time(value: Any) -> str | None:
    """
    Convert a time cell to 'HH:MM:SS'.

    Accepts text ('9:05' or '09:05:00'), time/datetime cells, and day
    fractions as Excel stores them. Empty cells and '-' give None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.strftime("%H:%M:%S")
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        total_seconds = round(float(value) * SECONDS_PER_DAY)
        if not 0 <= total_seconds < SECONDS_PER_DAY:
            raise ValueError(f"Invalid time value: {value}")
        return seconds_to_time(total_seconds)

    text = str(value).strip()
    if text in EMPTY_MARKERS:
        return None
    normalized = normalize_time(text)
    if not is_valid_time_format(normalized):
        raise ValueError(f"Invalid time format: {text} (use HH:MM:SS)")
    return normalized


def cell_to_time_list(value: Any) -> list[str]:
    """Split a comma-separated break column into times."""
    if value is None:
        return []
    if not isinstance(value, str):
        single = cell_to_time(value)
        return [single] if single else []
    times = []
    for part in value.split(","):
        converted = cell_to_time(part)
        if converted:
            times.append(converted)
    return times


def cell_to_duration(value: Any) -> float | None:
    if value is None or str(value).strip() in EMPTY_MARKERS:
        return None
    try:
        duration = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid duration: {value} (use 0.5 or 1)") from e
    if duration not in (0.5, 1.0):
        raise ValueError(f"Invalid duration: {value} (use 0.5 or 1)")
    return duration


def cell_to_flag(value: Any) -> bool:
    """Yes/true/x style cells mark the flag; anything else leaves it unset."""
    if isinstance(value, bool):
        return value
    return _text(value).lower() in TRUE_MARKERS


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


# =============================================================================
# ROW PARSING
# =============================================================================


def find_columns(headers: tuple | list) -> dict[str, int]:
    """Map each known column name to its index in the header row."""
    columns = {}
    for name, marker in IMPORT_COLUMNS.items():
        for idx, header in enumerate(headers):
            if header is not None and marker in str(header).lower():
                columns[name] = idx
                break
    return columns


def _cell(row: tuple | list, columns: dict[str, int], name: str) -> Any:
    idx = columns.get(name)
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def parse_breaks(break_in_value: Any, break_out_value: Any) -> list[TimeInterval]:
    """
    Pair break starts with break ends by position.

    Break In holds when each break began, Break Out when it ended.
    """
    starts = cell_to_time_list(break_in_value)
    ends = cell_to_time_list(break_out_value)
    if len(starts) != len(ends):
        raise ValueError(
            f"Break columns do not match: {len(starts)} break start(s), {len(ends)} break end(s)"
        )
    return [TimeInterval(time_in=start, time_out=end) for start, end in zip(starts, ends)]


def parse_row(row: tuple | list, columns: dict[str, int]) -> DayRecord:
    """
    Build one day record from a data row.

    Raises:
        ValueError: The row cannot be turned into a valid record
    """
    day = cell_to_date(_cell(row, columns, "date"))

    type_text = _text(_cell(row, columns, "type"))
    day_type, duration = DayType.parse_label(type_text) if type_text else (DayType.REGULAR, 1.0)
    explicit_duration = cell_to_duration(_cell(row, columns, "duration"))
    if explicit_duration is not None:
        duration = explicit_duration

    check_in = cell_to_time(_cell(row, columns, "check_in"))
    check_out = cell_to_time(_cell(row, columns, "check_out"))
    if check_out and not check_in:
        raise ValueError("Check out given without check in")

    breaks = parse_breaks(_cell(row, columns, "break_in"), _cell(row, columns, "break_out"))
    if breaks and not check_in:
        raise ValueError("Breaks given without check in")

    primary = TimeInterval(time_in=check_in, time_out=check_out) if check_in else None
    record = DayRecord(
        date=day,
        type=day_type,
        primary=primary,
        breaks=tuple(breaks),
        duration=duration,
        notes=_text(_cell(row, columns, "notes")),
        double_hours=cell_to_flag(_cell(row, columns, "double_hours")),
    )

    errors = validate_day_record(record)
    if errors:
        raise ValueError("; ".join(errors))
    return recompute(record)


def is_data_row(row: tuple | list, columns: dict[str, int]) -> bool:
    """Skip rows with an empty date cell and the TOTAL row."""
    first = _text(_cell(row, columns, "date")).lower()
    return first not in ("", "total")


def parse_import_rows(
    rows: list[tuple], sheet_name: str
) -> tuple[list[ImportedEntry], list[str]]:
    """
    Parse one sheet's rows (header row first).

    Returns:
        Tuple of (parsed entries, error messages)
    """
    if len(rows) < 2:
        return [], [f'Sheet "{sheet_name}": No data found']

    columns = find_columns(rows[0])
    if "date" not in columns or "type" not in columns:
        return [], [f'Sheet "{sheet_name}": Missing required columns (Date and Type)']

    entries = []
    errors = []
    for row_number, row in enumerate(rows[1:], start=2):
        if not is_data_row(row, columns):
            continue
        try:
            record = parse_row(row, columns)
        except ValueError as e:
            errors.append(f'Sheet "{sheet_name}", Row {row_number}: {e}')
            continue
        entries.append(ImportedEntry(sheet_name=sheet_name, row_number=row_number, record=record))

    if not entries and not errors:
        errors.append(f'Sheet "{sheet_name}": No data found')
    return entries, errors


# =============================================================================
# WORKBOOK READING
# =============================================================================


def read_import_workbook(input_file: Path, silent: bool = False) -> ImportPreview:
    """
    Read every sheet of an Excel workbook into an import preview.

    Sheets whose name contains 'instruction' are skipped. Nothing is applied
    to stored data; see TimesheetStore.apply_import.

    Raises:
        FileNotFoundError: Input file doesn't exist
    """
    input_file = Path(input_file)
    if not input_file.exists():
        raise FileNotFoundError(f"Input file not found: {input_file}")

    if not silent:
        print(f"Reading import file: {input_file}")

    wb = load_workbook(str(input_file), data_only=True, read_only=True)
    preview = ImportPreview()
    try:
        for ws in wb.worksheets:
            if SKIPPED_SHEET_MARKER in ws.title.lower():
                continue
            rows = [row for row in ws.iter_rows(values_only=True)]
            entries, errors = parse_import_rows(rows, ws.title)
            preview.entries.extend(entries)
            preview.errors.extend(errors)
            if entries:
                preview.sheet_names.append(ws.title)
            if not silent:
                print(f"  - {ws.title}: {len(entries)} records, {len(errors)} errors")
    finally:
        wb.close()

    preview.duplicate_dates = find_duplicate_dates(preview.records)

    if not silent:
        print(f"Parsed {len(preview.entries)} records from {len(preview.sheet_names)} sheets")
        date_range = preview.date_range
        if date_range:
            print(f"Date range: {date_range.start.isoformat()} to {date_range.end.isoformat()}")
        if preview.duplicate_dates:
            dupes = ", ".join(d.isoformat() for d in preview.duplicate_dates)
            print(f"Warning: duplicate dates in file (last one wins): {dupes}")
    return preview
