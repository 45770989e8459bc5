"""
Time-of-day arithmetic on 'HH:MM:SS' strings.
"""


def time_to_seconds(time_str: str | None) -> int:
    """
    Convert 'HH:MM' or 'HH:MM:SS' to seconds since midnight.

    Empty or malformed input yields 0; callers decide whether a time is
    present before relying on the result.
    """
    if not time_str or not time_str.strip():
        return 0
    try:
        parts = [int(part) for part in time_str.strip().split(":")]
    except ValueError:
        return 0
    if len(parts) == 3:
        return parts[0] * 3600 + parts[1] * 60 + parts[2]
    if len(parts) == 2:
        return parts[0] * 3600 + parts[1] * 60
    return 0


def seconds_to_time(total_seconds: int) -> str:
    """Convert seconds since midnight to zero-padded 'HH:MM:SS'."""
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def seconds_to_hours(seconds: float) -> float:
    return seconds / 3600


def normalize_time(time_str: str | None) -> str | None:
    """Pad 'HH:MM' to 'HH:MM:SS' and zero-pad single-digit hours."""
    if not time_str or not time_str.strip():
        return None
    parts = time_str.strip().split(":")
    if len(parts) == 2:
        parts.append("00")
    return ":".join(part.zfill(2) for part in parts)


def format_time_12h(time_str: str | None) -> str:
    """Render a 24h time as 'h:MM:SS AM/PM' ('-' when absent)."""
    if not time_str:
        return "-"
    parts = time_str.split(":")
    try:
        hours = int(parts[0])
    except ValueError:
        return time_str
    minutes = parts[1] if len(parts) > 1 else "00"
    seconds = parts[2] if len(parts) > 2 else "00"
    suffix = "PM" if hours >= 12 else "AM"
    h12 = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    return f"{h12}:{minutes}:{seconds} {suffix}"


def format_hours(hours: float) -> str:
    """Format decimal hours for reports, e.g. 9.5 -> '9.50h'."""
    return f"{hours:.2f}h"
