"""
Interval accounting: net worked hours and break-window compliance.

The primary interval is the gross work span. Breaks that sit entirely inside
the allowed lunch window are free; every other valid break is deducted.
"""

from core.config import (
    ALLOWED_BREAK_END,
    ALLOWED_BREAK_START,
    MAX_BREAK_SECONDS,
    SECONDS_PER_DAY,
)
from core.timecalc import seconds_to_hours, time_to_seconds
from models.entries import TimeInterval


def break_seconds(interval: TimeInterval) -> int | None:
    """Duration of a break in seconds, or None if incomplete or implausible."""
    if not interval.is_complete:
        return None
    duration = time_to_seconds(interval.time_out) - time_to_seconds(interval.time_in)
    if duration <= 0 or duration > MAX_BREAK_SECONDS:
        return None
    return duration


def is_allowed_break(interval: TimeInterval) -> bool:
    """True if both ends of the break fall inside the allowed window (inclusive)."""
    start = time_to_seconds(interval.time_in)
    end = time_to_seconds(interval.time_out)
    return (
        ALLOWED_BREAK_START <= start <= ALLOWED_BREAK_END
        and ALLOWED_BREAK_START <= end <= ALLOWED_BREAK_END
    )


def outside_break_seconds(breaks: list[TimeInterval] | tuple[TimeInterval, ...]) -> int:
    """Total seconds of valid breaks that are not fully inside the allowed window."""
    total = 0
    for interval in breaks:
        duration = break_seconds(interval)
        if duration is None or is_allowed_break(interval):
            continue
        total += duration
    return total


def compute_hours_worked(
    primary: TimeInterval | None,
    breaks: list[TimeInterval] | tuple[TimeInterval, ...] = (),
) -> float:
    """
    Net worked hours for one day.

    Returns 0 when there is no primary span, when any interval is missing a
    time, or when the primary span is not a positive same-day duration.
    """
    if primary is None:
        return 0.0
    if not primary.is_complete or any(not b.is_complete for b in breaks):
        return 0.0

    gross = time_to_seconds(primary.time_out) - time_to_seconds(primary.time_in)
    if gross <= 0 or gross > SECONDS_PER_DAY:
        return 0.0

    net = max(0, gross - outside_break_seconds(breaks))
    return seconds_to_hours(net)


def compute_hours_spent_outside(
    breaks: list[TimeInterval] | tuple[TimeInterval, ...],
) -> float:
    """Hours of break time taken outside the allowed window (informational)."""
    return seconds_to_hours(outside_break_seconds(breaks))


def hours_worked_from_intervals(intervals: list[TimeInterval]) -> float:
    """Same as compute_hours_worked for a flat list (index 0 = primary span)."""
    if not intervals:
        return 0.0
    return compute_hours_worked(intervals[0], intervals[1:])
