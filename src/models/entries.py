"""
Data models for day records, pay periods, and user settings.

Day records are dataclasses; the day-type taxonomy is a closed enum so that
classification rules never compare free-form strings.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum


class DayType(str, Enum):
    """Closed set of day classifications."""

    REGULAR = "Regular"
    VACATION = "Vacation"
    SICK_LEAVE = "Sick Leave"
    HOLIDAY = "Holiday"
    LEAVE = "Leave"
    TO_BE_ADDED = "To Be Added"

    @classmethod
    def parse(cls, value: "str | DayType") -> "DayType":
        """Parse a day type, ignoring case and spacing ('sick leave', 'SickLeave')."""
        if isinstance(value, DayType):
            return value
        key = re.sub(r"[\s_-]+", "", str(value)).lower()
        for member in cls:
            if member.value.replace(" ", "").lower() == key:
                return member
        raise ValueError(f"Unknown day type '{value}'")

    @classmethod
    def parse_label(cls, label: str) -> tuple["DayType", float]:
        """
        Parse an add-day label such as 'Vacation Half Day' or 'Sick Leave Full Day'.

        Returns:
            Tuple of (day_type, duration)
        """
        text = label.strip()
        lowered = text.lower()
        if lowered.endswith("half day"):
            return cls.parse(text[: -len("half day")]), 0.5
        if lowered.endswith("full day"):
            return cls.parse(text[: -len("full day")]), 1.0
        return cls.parse(text), 1.0


LEAVE_TYPES = {DayType.VACATION, DayType.SICK_LEAVE, DayType.TO_BE_ADDED}
SPECIAL_DAY_TYPES = {DayType.HOLIDAY, DayType.VACATION}
VALID_DURATIONS = {0.5, 1.0}


@dataclass(frozen=True)
class TimeInterval:
    """One check-in/check-out pair; a missing time_out is an open check-in."""

    time_in: str | None = None
    time_out: str | None = None
    notes: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.time_in) and bool(self.time_out)

    def to_dict(self) -> dict:
        data = {"in": self.time_in, "out": self.time_out}
        if self.notes:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TimeInterval":
        return cls(
            time_in=data.get("in") or None,
            time_out=data.get("out") or None,
            notes=data.get("notes") or None,
        )


@dataclass(frozen=True)
class DayRecord:
    """
    Everything tracked for one calendar date.

    The primary interval is the main work span; breaks are the time spent away
    from work. The four derived hour fields are a cache of the overtime policy
    and must be refreshed with core.overtime.recompute after any change.
    """

    date: date
    type: DayType = DayType.REGULAR
    primary: TimeInterval | None = None
    breaks: tuple[TimeInterval, ...] = ()
    duration: float = 1.0
    notes: str = ""
    double_hours: bool = False
    hours_worked: float = 0.0
    extra_hours: float = 0.0
    extra_hours_with_factor: float = 0.0
    hours_spent_outside: float = 0.0

    @property
    def intervals(self) -> list[TimeInterval]:
        """Flat view: primary span first, then breaks."""
        if self.primary is None:
            return list(self.breaks)
        return [self.primary, *self.breaks]

    @property
    def has_time_data(self) -> bool:
        return self.primary is not None or bool(self.breaks)

    @property
    def is_complete(self) -> bool:
        return all(interval.is_complete for interval in self.intervals)

    @property
    def last_interval(self) -> TimeInterval | None:
        intervals = self.intervals
        return intervals[-1] if intervals else None

    def with_intervals(self, intervals: list[TimeInterval]) -> "DayRecord":
        """Return a copy whose time data comes from a flat interval list."""
        primary, breaks = split_intervals(intervals)
        return replace(self, primary=primary, breaks=breaks)

    def to_dict(self) -> dict:
        data = {
            "date": self.date.isoformat(),
            "type": self.type.value,
            "intervals": [interval.to_dict() for interval in self.intervals],
            "duration": self.duration,
            "hoursWorked": self.hours_worked,
            "extraHours": self.extra_hours,
            "extraHoursWithFactor": self.extra_hours_with_factor,
            "hoursSpentOutside": self.hours_spent_outside,
        }
        if self.notes:
            data["notes"] = self.notes
        if self.double_hours:
            data["doubleHours"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "DayRecord":
        """Build a record from its stored form; derived fields are copied as-is."""
        intervals = [TimeInterval.from_dict(i) for i in data.get("intervals") or []]
        primary, breaks = split_intervals(intervals)
        return cls(
            date=date.fromisoformat(data["date"]),
            type=DayType.parse(data.get("type") or DayType.REGULAR),
            primary=primary,
            breaks=breaks,
            duration=float(data.get("duration") or 1),
            notes=data.get("notes") or "",
            double_hours=bool(data.get("doubleHours", False)),
            hours_worked=float(data.get("hoursWorked") or 0),
            extra_hours=float(data.get("extraHours") or 0),
            extra_hours_with_factor=float(data.get("extraHoursWithFactor") or 0),
            hours_spent_outside=float(data.get("hoursSpentOutside") or 0),
        )


def split_intervals(
    intervals: list[TimeInterval],
) -> tuple[TimeInterval | None, tuple[TimeInterval, ...]]:
    """Split a flat interval list into (primary, breaks)."""
    if not intervals:
        return None, ()
    return intervals[0], tuple(intervals[1:])


@dataclass(frozen=True)
class PayPeriod:
    """User-defined reporting range, inclusive on both ends."""

    id: str
    label: str
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PayPeriod":
        return cls(
            id=data["id"],
            label=data.get("label", ""),
            start=date.fromisoformat(data["start"]),
            end=date.fromisoformat(data["end"]),
        )


@dataclass
class LeaveSettings:
    """Annual leave allotments (policy constants, not derived from records)."""

    annual_vacation_days: float = 10.0
    sick_days: float = 7.0


@dataclass
class EmployeeProfile:
    name: str = ""
    salary: float = 0.0


@dataclass
class Preferences:
    """Display preferences persisted alongside the timesheet."""

    use_12_hour: bool = True
    detailed_view: bool = False
    hide_salary: bool = False
    theme: str = "light"


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass
class ImportedEntry:
    """A parsed import row together with the sheet it came from."""

    sheet_name: str
    row_number: int
    record: DayRecord


@dataclass
class ImportPreview:
    """Result of parsing an import file, before anything is applied."""

    entries: list[ImportedEntry] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    sheet_names: list[str] = field(default_factory=list)
    duplicate_dates: list[date] = field(default_factory=list)

    @property
    def records(self) -> list[DayRecord]:
        return [entry.record for entry in self.entries]

    @property
    def date_range(self) -> DateRange | None:
        if not self.entries:
            return None
        dates = [entry.record.date for entry in self.entries]
        return DateRange(min(dates), max(dates))
