"""
Overtime policy: day classification, extra hours, and derived-field refresh.
"""

from dataclasses import dataclass, replace

from core.config import (
    DOUBLE_OVERTIME_FACTOR,
    HALF_DAY_BASELINE_HOURS,
    OVERTIME_FACTOR,
    STANDARD_WEEKDAY_HOURS,
    STANDARD_WEEKEND_HOURS,
)
from core.intervals import compute_hours_spent_outside, compute_hours_worked
from models.entries import LEAVE_TYPES, SPECIAL_DAY_TYPES, DayRecord, DayType


@dataclass(frozen=True)
class DayClassification:
    is_weekend: bool
    is_special_day: bool
    use_double_factor: bool
    is_half_day_special: bool
    is_full_day_special: bool


@dataclass(frozen=True)
class ExtraHours:
    extra_hours: float
    extra_hours_with_factor: float


def classify(record: DayRecord) -> DayClassification:
    """Compute every classification flag for a record in one place."""
    is_weekend = record.date.weekday() >= 5
    is_special_day = record.type in SPECIAL_DAY_TYPES
    is_leave = record.type in LEAVE_TYPES
    return DayClassification(
        is_weekend=is_weekend,
        is_special_day=is_special_day,
        use_double_factor=is_weekend or is_special_day,
        is_half_day_special=is_leave and record.duration == 0.5,
        is_full_day_special=is_leave and record.duration == 1,
    )


def _scale_positive(extra: float, factor: float) -> float:
    # Negative extra (undertime) is carried through unscaled
    return extra * factor if extra > 0 else extra


def compute_extra(record: DayRecord, hours_worked: float | None = None) -> ExtraHours:
    """
    Extra hours and weighted extra hours for one record.

    Rules are checked in order and the first match wins:
    full-day leave, half-day leave, double-hours flag, worked special day,
    then the regular/weekend default.
    """
    if hours_worked is None:
        hours_worked = compute_hours_worked(record.primary, record.breaks)
    flags = classify(record)

    if flags.is_full_day_special:
        return ExtraHours(0.0, 0.0)

    if flags.is_half_day_special:
        extra = hours_worked - HALF_DAY_BASELINE_HOURS
        return ExtraHours(extra, _scale_positive(extra, OVERTIME_FACTOR))

    if record.double_hours:
        return ExtraHours(hours_worked, hours_worked * DOUBLE_OVERTIME_FACTOR)

    if flags.use_double_factor and record.type != DayType.REGULAR:
        return ExtraHours(hours_worked, hours_worked * DOUBLE_OVERTIME_FACTOR)

    standard = STANDARD_WEEKEND_HOURS if flags.is_weekend else STANDARD_WEEKDAY_HOURS
    extra = hours_worked - standard
    factor = DOUBLE_OVERTIME_FACTOR if flags.use_double_factor else OVERTIME_FACTOR
    return ExtraHours(extra, _scale_positive(extra, factor))


def recompute(record: DayRecord) -> DayRecord:
    """
    Return a copy of the record with all derived hour fields refreshed.

    Days without time data and days with an open interval contribute nothing
    until every interval is closed.
    """
    if not record.has_time_data or not record.is_complete:
        return replace(
            record,
            hours_worked=0.0,
            extra_hours=0.0,
            extra_hours_with_factor=0.0,
            hours_spent_outside=compute_hours_spent_outside(record.breaks),
        )

    hours_worked = compute_hours_worked(record.primary, record.breaks)
    extra = compute_extra(record, hours_worked)
    return replace(
        record,
        hours_worked=hours_worked,
        extra_hours=extra.extra_hours,
        extra_hours_with_factor=extra.extra_hours_with_factor,
        hours_spent_outside=compute_hours_spent_outside(record.breaks),
    )


def is_stale(record: DayRecord) -> bool:
    """True if the cached hour fields differ from a fresh recompute."""
    fresh = recompute(record)
    return (
        fresh.hours_worked != record.hours_worked
        or fresh.extra_hours != record.extra_hours
        or fresh.extra_hours_with_factor != record.extra_hours_with_factor
        or fresh.hours_spent_outside != record.hours_spent_outside
    )
