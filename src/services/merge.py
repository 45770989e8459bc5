"""
Reconcile incoming day records with the existing record set.

Every operation is scoped to a date range. Records outside the range are
passed through as the same objects; only the inside partition is rebuilt.
"""

from dataclasses import dataclass
from enum import Enum

from models.entries import DateRange, DayRecord


class ImportMode(str, Enum):
    MERGE = "merge"
    REPLACE = "replace"


@dataclass(frozen=True)
class ImportConflict:
    has_existing: bool
    existing_count: int
    importing_count: int
    start: object
    end: object


def date_range_of(records: list[DayRecord]) -> DateRange:
    """Smallest range covering every record."""
    if not records:
        raise ValueError("Cannot derive a date range from no records")
    dates = [record.date for record in records]
    return DateRange(min(dates), max(dates))


def partition(
    records: list[DayRecord], date_range: DateRange
) -> tuple[list[DayRecord], list[DayRecord]]:
    """
    Split records by range.

    Returns:
        Tuple of (outside, inside)
    """
    outside = []
    inside = []
    for record in records:
        if date_range.contains(record.date):
            inside.append(record)
        else:
            outside.append(record)
    return outside, inside


def detect_conflict(
    records: list[DayRecord], incoming: list[DayRecord], date_range: DateRange
) -> ImportConflict:
    """Describe existing data inside the range so the caller can pick a mode."""
    _, inside = partition(records, date_range)
    return ImportConflict(
        has_existing=len(inside) > 0,
        existing_count=len(inside),
        importing_count=len(incoming),
        start=date_range.start,
        end=date_range.end,
    )


def merge_import(
    records: list[DayRecord],
    incoming: list[DayRecord],
    date_range: DateRange,
    mode: ImportMode,
) -> list[DayRecord]:
    """
    Apply incoming records to the range and return the new record set.

    Merge mode overwrites or inserts by date inside the range. Replace mode
    discards everything inside the range first. Incoming records dated outside
    the range are rejected; duplicate incoming dates keep the last record.
    """
    mode = ImportMode(mode)
    stray = sorted({r.date.isoformat() for r in incoming if not date_range.contains(r.date)})
    if stray:
        raise ValueError(
            f"Incoming records fall outside {date_range.start.isoformat()} to "
            f"{date_range.end.isoformat()}: {', '.join(stray)}"
        )

    outside, inside = partition(records, date_range)

    if mode == ImportMode.REPLACE:
        by_date: dict = {}
    else:
        by_date = {record.date: record for record in inside}
    for record in incoming:
        by_date[record.date] = record

    return sorted(outside + list(by_date.values()), key=lambda r: r.date)


def clear_range(records: list[DayRecord], date_range: DateRange) -> list[DayRecord]:
    """Drop every record inside the range; records outside are untouched."""
    outside, _ = partition(records, date_range)
    return outside
