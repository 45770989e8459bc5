"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
# Add tests dir so fixtures/ helpers import as a package
sys.path.insert(0, str(Path(__file__).parent))

from models.entries import DayRecord, DayType, PayPeriod, TimeInterval  # noqa: E402
from services.tracker import TimesheetStore  # noqa: E402


def make_record(
    day: date,
    check_in: str | None = "09:00:00",
    check_out: str | None = "18:00:00",
    breaks: list[tuple[str, str]] | None = None,
    day_type: DayType = DayType.REGULAR,
    **kwargs,
) -> DayRecord:
    """Build a record from plain times (derived fields left at zero)."""
    primary = TimeInterval(check_in, check_out) if check_in else None
    return DayRecord(
        date=day,
        type=day_type,
        primary=primary,
        breaks=tuple(TimeInterval(start, end) for start, end in breaks or []),
        **kwargs,
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def default_period():
    """The period the tracker starts with."""
    return PayPeriod(
        id="period-default",
        label="23 Jan - 20 Feb 2026",
        start=date(2026, 1, 23),
        end=date(2026, 2, 20),
    )


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "db" / "timesheet.db"


@pytest.fixture
def store(db_path):
    """Fresh store on a temporary database."""
    store = TimesheetStore.open(db_path, silent=True)
    yield store
    store.close()
