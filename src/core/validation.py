"""
Entry and pay-period validation.

Validators return a list of human-readable messages; an empty list means the
input is valid. Callers raise before mutating anything.
"""

import re
from collections import Counter
from datetime import date, timedelta

from core.config import MAX_PERIOD_DAYS
from models.entries import VALID_DURATIONS, DayRecord, PayPeriod, TimeInterval

TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9]):([0-5][0-9])$")

REQUIRED_ENTRY_FIELDS = ("date", "type", "intervals")


def is_valid_time_format(time_str: str | None) -> bool:
    """Check strict 24-hour 'HH:MM:SS'."""
    if not time_str:
        return False
    return TIME_PATTERN.match(time_str) is not None


def validate_interval(interval: TimeInterval, label: str = "Interval") -> list[str]:
    """
    Validate one interval.

    Checks:
    1. Present times use HH:MM:SS
    2. Check-out is after check-in when both are present
    """
    errors = []
    if interval.time_in and not is_valid_time_format(interval.time_in):
        errors.append(f"{label}: invalid check-in time '{interval.time_in}' (use HH:MM:SS)")
    if interval.time_out and not is_valid_time_format(interval.time_out):
        errors.append(f"{label}: invalid check-out time '{interval.time_out}' (use HH:MM:SS)")
    if errors:
        return errors

    # Fixed-width zero-padded times compare correctly as strings
    if interval.time_in and interval.time_out and interval.time_in >= interval.time_out:
        errors.append(f"{label}: check-out must be after check-in")
    return errors


def interval_label(index: int) -> str:
    return "Main work hours" if index == 0 else f"Break {index}"


def validate_day_record(record: DayRecord) -> list[str]:
    """Validate a record's time data and duration before it is stored."""
    errors = []
    for index, interval in enumerate(record.intervals):
        errors.extend(validate_interval(interval, interval_label(index)))

    if record.primary is None and record.breaks:
        errors.append("Breaks require a main work interval")
    if record.duration not in VALID_DURATIONS:
        errors.append(f"Duration must be 0.5 or 1, got {record.duration}")
    return errors


def periods_overlap(start: date, end: date, other: PayPeriod) -> bool:
    return start <= other.end and end >= other.start


def validate_period(
    start: date,
    end: date,
    periods: list[PayPeriod],
    editing_id: str | None = None,
) -> list[str]:
    """
    Validate a new or edited pay period against the existing ones.

    Checks:
    1. Start is before end
    2. Length is between 1 and MAX_PERIOD_DAYS days
    3. No overlap with any other period (the edited period itself excluded)
    """
    errors = []
    if start >= end:
        errors.append("Period start must be before its end")
        return errors

    length = (end - start).days
    if length > MAX_PERIOD_DAYS:
        errors.append(f"Period spans {length} days; maximum is {MAX_PERIOD_DAYS}")

    for other in periods:
        if other.id == editing_id:
            continue
        if periods_overlap(start, end, other):
            errors.append(
                f"Period overlaps '{other.label}' ({other.start.isoformat()} to {other.end.isoformat()})"
            )
    return errors


def find_period_gaps(periods: list[PayPeriod]) -> list[tuple[date, date]]:
    """Return (first_missing_day, last_missing_day) for each gap between periods."""
    ordered = sorted(periods, key=lambda p: p.start)
    gaps = []
    for previous, current in zip(ordered, ordered[1:]):
        if current.start > previous.end + timedelta(days=1):
            gaps.append((previous.end + timedelta(days=1), current.start - timedelta(days=1)))
    return gaps


def find_duplicate_dates(records: list[DayRecord]) -> list[date]:
    counts = Counter(record.date for record in records)
    return sorted(day for day, count in counts.items() if count > 1)


def check_record_set_integrity(raw_entries: list[dict]) -> tuple[list[dict], list[str]]:
    """
    Check stored entries before they are loaded.

    Entries missing a date, a type, or an intervals list are dropped. Duplicate
    dates are kept (the last one wins on load) but reported.

    Returns:
        Tuple of (usable entries, warning messages)
    """
    warnings = []
    usable = []
    for index, entry in enumerate(raw_entries):
        if not isinstance(entry, dict):
            warnings.append(f"Entry {index}: not a record, removed")
            continue
        missing = [
            name for name in REQUIRED_ENTRY_FIELDS if name != "intervals" and not entry.get(name)
        ]
        if not isinstance(entry.get("intervals"), list):
            missing.append("intervals")
        if missing:
            warnings.append(f"Entry {index}: missing {', '.join(missing)}, removed")
            continue
        usable.append(entry)

    counts = Counter(entry["date"] for entry in usable)
    for day, count in sorted(counts.items()):
        if count > 1:
            warnings.append(f"Duplicate date {day} ({count} records); the last one is kept")
    return usable, warnings
