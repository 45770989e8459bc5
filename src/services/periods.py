"""
Pay-period aggregation, leave balances, and period helpers.
"""

import uuid
from dataclasses import dataclass
from datetime import date, timedelta

from core.config import MONTHLY_STANDARD_HOURS, SALARY_OVERTIME_SHARE
from core.intervals import compute_hours_worked
from core.overtime import compute_extra
from models.entries import DayRecord, DayType, LeaveSettings, PayPeriod

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class PeriodTotals:
    total_hours_worked: float = 0.0
    total_extra_hours: float = 0.0
    total_extra_hours_with_factor: float = 0.0


@dataclass(frozen=True)
class LeaveBalance:
    taken: float
    balance: float


@dataclass(frozen=True)
class Compensation:
    hour_cost: float
    overtime_money: float
    total_salary: float


@dataclass
class PeriodGroups:
    current: PayPeriod | None
    upcoming: list[PayPeriod]
    previous: list[PayPeriod]


# =============================================================================
# AGGREGATION
# =============================================================================


def records_in_range(records: list[DayRecord], start: date, end: date) -> list[DayRecord]:
    """Records dated within [start, end], sorted by date."""
    return sorted((r for r in records if start <= r.date <= end), key=lambda r: r.date)


def aggregate(records: list[DayRecord], start: date, end: date) -> PeriodTotals:
    """
    Sum worked and extra hours for every eligible record in [start, end].

    Records without time data or with an open interval are skipped. Only
    Regular days count toward worked hours; extra hours count for every type.
    Values are recomputed from the raw intervals, not read from the cache.
    """
    total_hours = 0.0
    total_extra = 0.0
    total_weighted = 0.0

    for record in records_in_range(records, start, end):
        if not record.has_time_data or not record.is_complete:
            continue

        hours_worked = compute_hours_worked(record.primary, record.breaks)
        extra = compute_extra(record, hours_worked)

        if record.type == DayType.REGULAR:
            total_hours += hours_worked
        total_extra += extra.extra_hours
        total_weighted += extra.extra_hours_with_factor

    return PeriodTotals(total_hours, total_extra, total_weighted)


def aggregate_period(records: list[DayRecord], period: PayPeriod) -> PeriodTotals:
    return aggregate(records, period.start, period.end)


# =============================================================================
# LEAVE BALANCES
# =============================================================================


def leave_details(day_type: DayType, period_entries: list[DayRecord]) -> list[DayRecord]:
    """Records of one leave type, in date order."""
    return sorted((r for r in period_entries if r.type == day_type), key=lambda r: r.date)


def days_taken(day_type: DayType, period_entries: list[DayRecord]) -> float:
    """Sum of durations (half or full days) for one leave type."""
    return sum(r.duration or 1 for r in period_entries if r.type == day_type)


def leave_balance(
    day_type: DayType, settings: LeaveSettings, period_entries: list[DayRecord]
) -> LeaveBalance:
    """
    Days taken and remaining balance for a leave classification.

    Vacation and To Be Added share the vacation allotment: To Be Added days
    are credited back to it. Sick Leave draws on its own allotment.
    """
    if day_type == DayType.SICK_LEAVE:
        taken = days_taken(DayType.SICK_LEAVE, period_entries)
        return LeaveBalance(taken=taken, balance=settings.sick_days - taken)

    if day_type in (DayType.VACATION, DayType.TO_BE_ADDED):
        vacation = days_taken(DayType.VACATION, period_entries)
        added = days_taken(DayType.TO_BE_ADDED, period_entries)
        balance = settings.annual_vacation_days - vacation + added
        taken = vacation if day_type == DayType.VACATION else added
        return LeaveBalance(taken=taken, balance=balance)

    raise ValueError(f"No leave balance is tracked for '{day_type.value}'")


# =============================================================================
# COMPENSATION
# =============================================================================


def estimate_compensation(salary: float, weighted_extra_hours: float) -> Compensation:
    """Translate weighted extra hours into money at the employee's hourly cost."""
    hour_cost = salary * SALARY_OVERTIME_SHARE / MONTHLY_STANDARD_HOURS
    overtime_money = weighted_extra_hours * hour_cost
    return Compensation(
        hour_cost=hour_cost,
        overtime_money=overtime_money,
        total_salary=salary + overtime_money,
    )


# =============================================================================
# PERIOD HELPERS
# =============================================================================


def period_label(start: date, end: date) -> str:
    """Format a period label such as '23 Jan - 20 Feb 2026'."""
    return f"{start.day} {start.strftime('%b')} - {end.day} {end.strftime('%b')} {end.year}"


def new_period(start: date, end: date) -> PayPeriod:
    return PayPeriod(
        id=f"period-{uuid.uuid4().hex[:12]}",
        label=period_label(start, end),
        start=start,
        end=end,
    )


def period_dates(period: PayPeriod) -> list[date]:
    """Every calendar date in the period, inclusive."""
    return [period.start + timedelta(days=i) for i in range((period.end - period.start).days + 1)]


def find_period(periods: list[PayPeriod], period_id: str) -> PayPeriod:
    for period in periods:
        if period.id == period_id:
            return period
    raise KeyError(f"Pay period not found: {period_id}")


def find_period_by_range(periods: list[PayPeriod], start: date, end: date) -> PayPeriod | None:
    for period in periods:
        if period.start == start and period.end == end:
            return period
    return None


def current_period(periods: list[PayPeriod], current_id: str | None) -> PayPeriod | None:
    """The selected period, falling back to the first one."""
    if not periods:
        return None
    for period in periods:
        if period.id == current_id:
            return period
    return periods[0]


def categorize_periods(
    periods: list[PayPeriod], current_id: str | None, today: date
) -> PeriodGroups:
    """
    Split periods into current, upcoming, and previous.

    Periods other than the current one that contain today are listed with the
    previous ones.
    """
    current = next((p for p in periods if p.id == current_id), None)
    others = [p for p in periods if p.id != current_id]
    upcoming = [p for p in others if p.start > today]
    previous = [p for p in others if p.end < today]
    overlapping_today = [p for p in others if p.start <= today <= p.end]
    return PeriodGroups(current=current, upcoming=upcoming, previous=previous + overlapping_today)
