"""
Timesheet Store

Owns the record set, pay periods, and settings, and runs every mutation
through validation and the overtime recompute before persisting it. Both the
API and the scripts work through a TimesheetStore.
"""

import sqlite3
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from pathlib import Path

from core import database
from core.config import (
    CLEAR_ALL_CONFIRMATION,
    DEFAULT_ANNUAL_VACATION_DAYS,
    DEFAULT_PERIOD,
    DEFAULT_SICK_DAYS,
    KEY_ANNUAL_VACATION,
    KEY_CURRENT_PERIOD,
    KEY_DETAILED_VIEW,
    KEY_ENTRIES,
    KEY_FULL_NAME,
    KEY_HIDE_SALARY,
    KEY_PERIODS,
    KEY_SALARY,
    KEY_SICK_DAYS,
    KEY_THEME,
    KEY_USE_12_HOUR,
    VALID_THEMES,
)
from core.overtime import recompute
from core.timecalc import format_time_12h, normalize_time
from core.validation import (
    check_record_set_integrity,
    find_period_gaps,
    is_valid_time_format,
    validate_day_record,
    validate_interval,
    validate_period,
)
from models.entries import (
    DateRange,
    DayRecord,
    DayType,
    EmployeeProfile,
    ImportPreview,
    LeaveSettings,
    PayPeriod,
    Preferences,
    TimeInterval,
)
from services.merge import ImportConflict, ImportMode, clear_range, detect_conflict, merge_import
from services.periods import (
    Compensation,
    LeaveBalance,
    PeriodTotals,
    aggregate_period,
    current_period,
    estimate_compensation,
    find_period,
    find_period_by_range,
    leave_balance,
    new_period,
    period_label,
    records_in_range,
)

DERIVED_FIELDS = ("hoursWorked", "extraHours", "extraHoursWithFactor", "hoursSpentOutside")


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class PeriodSummary:
    """Dashboard figures for one pay period."""

    period: PayPeriod
    totals: PeriodTotals
    vacation: LeaveBalance
    sick_leave: LeaveBalance
    to_be_added: LeaveBalance
    compensation: Compensation
    record_count: int


@dataclass
class ImportResult:
    imported_count: int
    mode: ImportMode
    date_range: DateRange
    replaced_count: int = 0
    period_created: PayPeriod | None = None
    skipped_errors: list[str] = field(default_factory=list)


def _parse_time(value: str, label: str) -> str:
    normalized = normalize_time(value)
    if not is_valid_time_format(normalized):
        raise ValueError(f"{label}: invalid time '{value}' (use HH:MM:SS)")
    return normalized


# =============================================================================
# STORE
# =============================================================================


class TimesheetStore:
    """
    Single owner of the timesheet state.

    Every public mutation validates first, recomputes derived hour fields, and
    writes the affected keys before returning.
    """

    def __init__(self, conn: sqlite3.Connection, silent: bool = False):
        self.conn = conn
        self.silent = silent
        self.records: list[DayRecord] = []
        self.periods: list[PayPeriod] = []
        self.current_period_id: str | None = None
        self.leave = LeaveSettings()
        self.employee = EmployeeProfile()
        self.preferences = Preferences()
        self.load_warnings: list[str] = []
        self.upgraded_count = 0

    @classmethod
    def open(cls, db_path: Path | str | None = None, silent: bool = False) -> "TimesheetStore":
        """Connect to the database and load the stored state."""
        store = cls(database.get_connection(db_path), silent=silent)
        store.load()
        return store

    def close(self) -> None:
        self.conn.close()

    def _log(self, message: str) -> None:
        if not self.silent:
            print(message)

    def display_time(self, time_str: str | None) -> str:
        """A stored time in the clock format the user prefers."""
        if self.preferences.use_12_hour:
            return format_time_12h(time_str)
        return time_str or "-"

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """
        Load all state from storage.

        Stored entries go through the integrity check, then every record is
        recomputed. Entries stored without derived hour fields are counted as
        upgraded and the refreshed set is written back.
        """
        self.load_warnings = []
        self.upgraded_count = 0

        raw_entries = database.load_value(self.conn, KEY_ENTRIES, [])
        if not isinstance(raw_entries, list):
            self.load_warnings.append("Stored entries are not a list; starting empty")
            raw_entries = []

        usable, warnings = check_record_set_integrity(raw_entries)
        self.load_warnings.extend(warnings)

        by_date: dict[date, DayRecord] = {}
        needs_save = len(usable) != len(raw_entries)
        for index, raw in enumerate(usable):
            try:
                stored = DayRecord.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                self.load_warnings.append(f"Entry {raw.get('date', index)}: {e}, removed")
                needs_save = True
                continue
            if any(name not in raw for name in DERIVED_FIELDS):
                self.upgraded_count += 1
            fresh = recompute(stored)
            if fresh != stored:
                needs_save = True
            if stored.date in by_date:
                needs_save = True
            by_date[stored.date] = fresh

        self.records = sorted(by_date.values(), key=lambda r: r.date)

        if self.upgraded_count:
            self._log(f"Upgraded {self.upgraded_count} entries with calculated fields")
        for warning in self.load_warnings:
            self._log(f"  Warning: {warning}")
        if needs_save:
            self._save_entries()

        raw_periods = database.load_value(self.conn, KEY_PERIODS)
        if raw_periods is None:
            self.periods = [PayPeriod.from_dict(DEFAULT_PERIOD)]
        else:
            self.periods = []
            for raw in raw_periods:
                try:
                    self.periods.append(PayPeriod.from_dict(raw))
                except (KeyError, TypeError, ValueError) as e:
                    self.load_warnings.append(f"Pay period {raw!r}: {e}, removed")

        stored_id = database.load_value(self.conn, KEY_CURRENT_PERIOD)
        selected = current_period(self.periods, stored_id)
        self.current_period_id = selected.id if selected else None

        self.leave = LeaveSettings(
            annual_vacation_days=float(
                database.load_value(self.conn, KEY_ANNUAL_VACATION, DEFAULT_ANNUAL_VACATION_DAYS)
            ),
            sick_days=float(database.load_value(self.conn, KEY_SICK_DAYS, DEFAULT_SICK_DAYS)),
        )
        self.employee = EmployeeProfile(
            name=database.load_value(self.conn, KEY_FULL_NAME, ""),
            salary=float(database.load_value(self.conn, KEY_SALARY, 0)),
        )
        self.preferences = Preferences(
            use_12_hour=bool(database.load_value(self.conn, KEY_USE_12_HOUR, True)),
            detailed_view=bool(database.load_value(self.conn, KEY_DETAILED_VIEW, False)),
            hide_salary=bool(database.load_value(self.conn, KEY_HIDE_SALARY, False)),
            theme=database.load_value(self.conn, KEY_THEME, "light"),
        )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _save_entries(self) -> None:
        database.save_value(self.conn, KEY_ENTRIES, [r.to_dict() for r in self.records])

    def _save_periods(self) -> None:
        database.save_values(
            self.conn,
            {
                KEY_PERIODS: [p.to_dict() for p in self.periods],
                KEY_CURRENT_PERIOD: self.current_period_id,
            },
        )

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def get_record(self, day: date) -> DayRecord | None:
        for record in self.records:
            if record.date == day:
                return record
        return None

    def require_record(self, day: date) -> DayRecord:
        record = self.get_record(day)
        if record is None:
            raise KeyError(f"No entry for {day.isoformat()}")
        return record

    def entries_in_range(self, start: date, end: date) -> list[DayRecord]:
        return records_in_range(self.records, start, end)

    def _put_record(self, record: DayRecord) -> DayRecord:
        """Validate, recompute, and store one record (insert or replace by date)."""
        errors = validate_day_record(record)
        if errors:
            raise ValueError("\n".join(errors))

        record = recompute(record)
        others = [r for r in self.records if r.date != record.date]
        self.records = sorted(others + [record], key=lambda r: r.date)
        self._save_entries()
        return record

    def check_in(self, now: datetime | None = None) -> DayRecord:
        """Check in at the current time (or the given moment)."""
        now = now or datetime.now()
        return self.check_in_at(now.date(), now.strftime("%H:%M:%S"))

    def check_out(self, now: datetime | None = None) -> DayRecord:
        """Check out at the current time (or the given moment)."""
        now = now or datetime.now()
        return self.check_out_at(now.date(), now.strftime("%H:%M:%S"))

    def check_in_at(self, day: date, time_str: str) -> DayRecord:
        """
        Open a new interval on a date.

        The first check-in of a day opens the main work span; later check-ins
        append an interval after it.
        """
        time_str = _parse_time(time_str, "Check in")
        existing = self.get_record(day)

        if existing is None:
            record = DayRecord(date=day, primary=TimeInterval(time_in=time_str))
        else:
            last = existing.last_interval
            if last is not None and not last.time_out:
                raise ValueError("Already checked in. Check out first.")
            record = existing.with_intervals(existing.intervals + [TimeInterval(time_in=time_str)])

        record = self._put_record(record)
        self._log(f"Checked in at {self.display_time(time_str)} on {day.isoformat()}")
        return record

    def check_out_at(self, day: date, time_str: str) -> DayRecord:
        """Close the open interval on a date."""
        time_str = _parse_time(time_str, "Check out")
        existing = self.get_record(day)
        if existing is None or not existing.intervals:
            raise ValueError(f"No check-in found for {day.isoformat()}")

        intervals = existing.intervals
        last = intervals[-1]
        if last.time_out:
            raise ValueError("Already checked out. Check in again to start a new session.")

        intervals[-1] = replace(last, time_out=time_str)
        record = self._put_record(existing.with_intervals(intervals))
        self._log(
            f"Checked out at {self.display_time(time_str)} on {day.isoformat()} "
            f"({record.hours_worked:.2f}h worked)"
        )
        return record

    def add_break(self, day: date, start: str, end: str, notes: str | None = None) -> DayRecord:
        """Add a completed break to a day that already has working hours."""
        interval = TimeInterval(
            time_in=_parse_time(start, "Break start"),
            time_out=_parse_time(end, "Break end"),
            notes=notes or None,
        )
        errors = validate_interval(interval, "Break")
        if errors:
            raise ValueError("\n".join(errors))

        existing = self.get_record(day)
        if existing is None or existing.primary is None:
            raise ValueError(
                f"No working hours found for {day.isoformat()}. Add check-in/out times first."
            )

        record = self._put_record(replace(existing, breaks=existing.breaks + (interval,)))
        self._log(f"Break added for {day.isoformat()}")
        return record

    def add_special_day(
        self, day: date, day_type: DayType | str, duration: float | None = None, notes: str = ""
    ) -> DayRecord:
        """
        Record a leave or holiday without time data.

        Accepts labels such as 'Vacation Half Day'; an explicit duration wins.
        """
        if isinstance(day_type, DayType):
            parsed_type, parsed_duration = day_type, 1.0
        else:
            parsed_type, parsed_duration = DayType.parse_label(day_type)
        if duration is not None:
            parsed_duration = float(duration)

        if self.get_record(day) is not None:
            raise ValueError(f"An entry already exists for {day.isoformat()}")

        record = self._put_record(
            DayRecord(date=day, type=parsed_type, duration=parsed_duration, notes=notes)
        )
        self._log(f"{parsed_type.value} added for {day.isoformat()}")
        return record

    def update_entry(
        self,
        day: date,
        intervals: list[TimeInterval] | None = None,
        day_type: DayType | str | None = None,
        duration: float | None = None,
        notes: str | None = None,
        double_hours: bool | None = None,
    ) -> DayRecord:
        """Edit an existing entry; only the given fields change."""
        record = self.require_record(day)
        if intervals is not None:
            record = record.with_intervals(
                [
                    TimeInterval(
                        time_in=normalize_time(i.time_in),
                        time_out=normalize_time(i.time_out),
                        notes=i.notes,
                    )
                    for i in intervals
                ]
            )
        changes = {}
        if day_type is not None:
            changes["type"] = DayType.parse(day_type)
        if duration is not None:
            changes["duration"] = float(duration)
        if notes is not None:
            changes["notes"] = notes
        if double_hours is not None:
            changes["double_hours"] = double_hours

        record = self._put_record(replace(record, **changes))
        self._log(f"Entry updated for {day.isoformat()}")
        return record

    def delete_entry(self, day: date) -> None:
        self.require_record(day)
        self.records = [r for r in self.records if r.date != day]
        self._save_entries()
        self._log(f"Entry deleted for {day.isoformat()}")

    # -------------------------------------------------------------------------
    # Clearing
    # -------------------------------------------------------------------------

    def clear_day(self, day: date) -> int:
        """Remove the entry for one date. Returns the number of entries removed."""
        before = len(self.records)
        self.records = [r for r in self.records if r.date != day]
        removed = before - len(self.records)
        self._save_entries()
        self._log(f"Cleared {removed} entry for {day.isoformat()}")
        return removed

    def clear_range(self, date_range: DateRange) -> int:
        before = len(self.records)
        self.records = clear_range(self.records, date_range)
        removed = before - len(self.records)
        self._save_entries()
        self._log(
            f"Cleared {removed} entries from {date_range.start.isoformat()} "
            f"to {date_range.end.isoformat()}"
        )
        return removed

    def clear_period(self, period_id: str | None = None) -> int:
        """Remove every entry in a period (the current one by default)."""
        period = self.get_period(period_id) if period_id else self.current_period
        if period is None:
            raise KeyError("No pay period selected")
        return self.clear_range(DateRange(period.start, period.end))

    def clear_all(self, confirmation: str) -> int:
        """
        Delete all stored data, settings included.

        Raises:
            ValueError: The confirmation phrase does not match
        """
        if confirmation != CLEAR_ALL_CONFIRMATION:
            raise ValueError(f"Type {CLEAR_ALL_CONFIRMATION} to confirm")
        removed = database.clear_all(self.conn)
        self.load()
        self._log(f"All data cleared ({removed} stored keys removed)")
        return removed

    # -------------------------------------------------------------------------
    # Pay periods
    # -------------------------------------------------------------------------

    @property
    def current_period(self) -> PayPeriod | None:
        return current_period(self.periods, self.current_period_id)

    def get_period(self, period_id: str) -> PayPeriod:
        return find_period(self.periods, period_id)

    def period_gaps(self) -> list[tuple[date, date]]:
        return find_period_gaps(self.periods)

    def _warn_gaps(self) -> None:
        for gap_start, gap_end in self.period_gaps():
            self._log(
                f"  Warning: no pay period covers {gap_start.isoformat()} to {gap_end.isoformat()}"
            )

    def add_period(self, start: date, end: date, label: str | None = None) -> PayPeriod:
        errors = validate_period(start, end, self.periods)
        if errors:
            raise ValueError("\n".join(errors))

        period = new_period(start, end)
        if label:
            period = replace(period, label=label)
        self.periods = sorted(self.periods + [period], key=lambda p: p.start)
        if self.current_period_id is None:
            self.current_period_id = period.id
        self._save_periods()
        self._log(f"Pay period added: {period.label}")
        self._warn_gaps()
        return period

    def edit_period(
        self, period_id: str, start: date, end: date, label: str | None = None
    ) -> PayPeriod:
        existing = self.get_period(period_id)
        errors = validate_period(start, end, self.periods, editing_id=period_id)
        if errors:
            raise ValueError("\n".join(errors))

        updated = replace(existing, start=start, end=end, label=label or period_label(start, end))
        self.periods = sorted(
            [updated if p.id == period_id else p for p in self.periods], key=lambda p: p.start
        )
        self._save_periods()
        self._log(f"Pay period updated: {updated.label}")
        self._warn_gaps()
        return updated

    def delete_period(self, period_id: str) -> None:
        """Remove a period; its entries stay in the record set."""
        period = self.get_period(period_id)
        self.periods = [p for p in self.periods if p.id != period_id]
        if self.current_period_id == period_id:
            self.current_period_id = self.periods[0].id if self.periods else None
        self._save_periods()
        self._log(f"Pay period deleted: {period.label}")

    def set_current_period(self, period_id: str) -> PayPeriod:
        period = self.get_period(period_id)
        self.current_period_id = period.id
        self._save_periods()
        return period

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def update_leave_settings(
        self, annual_vacation_days: float | None = None, sick_days: float | None = None
    ) -> LeaveSettings:
        values = {}
        if annual_vacation_days is not None:
            values["annual_vacation_days"] = float(annual_vacation_days)
        if sick_days is not None:
            values["sick_days"] = float(sick_days)
        errors = [f"{name} must not be negative" for name, value in values.items() if value < 0]
        if errors:
            raise ValueError("\n".join(errors))

        self.leave = replace(self.leave, **values)
        database.save_values(
            self.conn,
            {
                KEY_ANNUAL_VACATION: self.leave.annual_vacation_days,
                KEY_SICK_DAYS: self.leave.sick_days,
            },
        )
        return self.leave

    def update_employee(self, name: str | None = None, salary: float | None = None) -> EmployeeProfile:
        if salary is not None and salary < 0:
            raise ValueError("salary must not be negative")
        if name is not None:
            self.employee.name = name.strip()
        if salary is not None:
            self.employee.salary = float(salary)
        database.save_values(
            self.conn, {KEY_FULL_NAME: self.employee.name, KEY_SALARY: self.employee.salary}
        )
        return self.employee

    def update_preferences(
        self,
        use_12_hour: bool | None = None,
        detailed_view: bool | None = None,
        hide_salary: bool | None = None,
        theme: str | None = None,
    ) -> Preferences:
        if theme is not None and theme not in VALID_THEMES:
            raise ValueError(f"Unknown theme '{theme}' (use {', '.join(sorted(VALID_THEMES))})")

        if use_12_hour is not None:
            self.preferences.use_12_hour = use_12_hour
        if detailed_view is not None:
            self.preferences.detailed_view = detailed_view
        if hide_salary is not None:
            self.preferences.hide_salary = hide_salary
        if theme is not None:
            self.preferences.theme = theme
        database.save_values(
            self.conn,
            {
                KEY_USE_12_HOUR: self.preferences.use_12_hour,
                KEY_DETAILED_VIEW: self.preferences.detailed_view,
                KEY_HIDE_SALARY: self.preferences.hide_salary,
                KEY_THEME: self.preferences.theme,
            },
        )
        return self.preferences

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def period_summary(self, period_id: str | None = None) -> PeriodSummary:
        period = self.get_period(period_id) if period_id else self.current_period
        if period is None:
            raise KeyError("No pay period selected")

        period_entries = self.entries_in_range(period.start, period.end)
        totals = aggregate_period(self.records, period)
        return PeriodSummary(
            period=period,
            totals=totals,
            vacation=leave_balance(DayType.VACATION, self.leave, period_entries),
            sick_leave=leave_balance(DayType.SICK_LEAVE, self.leave, period_entries),
            to_be_added=leave_balance(DayType.TO_BE_ADDED, self.leave, period_entries),
            compensation=estimate_compensation(
                self.employee.salary, totals.total_extra_hours_with_factor
            ),
            record_count=len(period_entries),
        )

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def import_conflict(
        self, preview: ImportPreview, date_range: DateRange | None = None
    ) -> ImportConflict:
        date_range = date_range or preview.date_range
        if date_range is None:
            raise ValueError("No records to import")
        return detect_conflict(self.records, preview.records, date_range)

    def apply_import(
        self,
        preview: ImportPreview,
        mode: ImportMode | str,
        date_range: DateRange | None = None,
        proceed_with_errors: bool = False,
        create_period: bool = True,
    ) -> ImportResult:
        """
        Apply a parsed import to the record set.

        Only dates inside the range change. A pay period matching the range is
        added when none exists and it does not overlap another period.

        Raises:
            ValueError: The preview has row errors (unless proceeding anyway),
                has no records, or has records outside the range
        """
        mode = ImportMode(mode)
        if preview.errors and not proceed_with_errors:
            raise ValueError(
                f"Import has {len(preview.errors)} error(s):\n" + "\n".join(preview.errors)
            )
        if not preview.entries:
            raise ValueError("No records to import")

        date_range = date_range or preview.date_range
        conflict = detect_conflict(self.records, preview.records, date_range)
        self.records = merge_import(self.records, preview.records, date_range, mode)
        self._save_entries()

        result = ImportResult(
            imported_count=len(preview.entries),
            mode=mode,
            date_range=date_range,
            replaced_count=conflict.existing_count if mode == ImportMode.REPLACE else 0,
            skipped_errors=list(preview.errors),
        )
        self._log(
            f"Imported {result.imported_count} records ({mode.value}) for "
            f"{date_range.start.isoformat()} to {date_range.end.isoformat()}"
        )

        if create_period and find_period_by_range(self.periods, date_range.start, date_range.end) is None:
            if validate_period(date_range.start, date_range.end, self.periods):
                self._log("  Pay period for the imported range not created (overlaps or invalid)")
            else:
                result.period_created = self.add_period(date_range.start, date_range.end)
        return result

