"""Tests for range-scoped merging of imported records."""

from datetime import date

import pytest

from conftest import make_record
from models.entries import DateRange
from services.merge import (
    ImportMode,
    clear_range,
    date_range_of,
    detect_conflict,
    merge_import,
)

FEB = DateRange(date(2026, 2, 1), date(2026, 2, 28))


@pytest.fixture
def existing():
    return [
        make_record(date(2026, 1, 1), "08:00:00", "17:00:00", notes="January"),
        make_record(date(2026, 2, 2), "09:00:00", "18:00:00"),
        make_record(date(2026, 2, 3), "09:00:00", "18:00:00"),
        make_record(date(2026, 3, 1), "10:00:00", "12:00:00", notes="March"),
    ]


@pytest.mark.parametrize("mode", [ImportMode.MERGE, ImportMode.REPLACE])
def test_records_outside_range_are_untouched(existing, mode):
    incoming = [make_record(date(2026, 2, 3), "07:00:00", "19:00:00")]
    result = merge_import(existing, incoming, FEB, mode)

    # Same objects, not copies
    assert result[0] is existing[0]
    assert result[-1] is existing[-1]


def test_merge_overwrites_and_inserts(existing):
    incoming = [
        make_record(date(2026, 2, 3), "07:00:00", "19:00:00"),
        make_record(date(2026, 2, 4), "09:00:00", "18:00:00"),
    ]
    result = merge_import(existing, incoming, FEB, ImportMode.MERGE)
    assert [r.date.day for r in result if FEB.contains(r.date)] == [2, 3, 4]
    feb3 = next(r for r in result if r.date == date(2026, 2, 3))
    assert feb3.primary.time_in == "07:00:00"


def test_replace_discards_inside(existing):
    incoming = [make_record(date(2026, 2, 10))]
    result = merge_import(existing, incoming, FEB, ImportMode.REPLACE)
    assert [r.date for r in result] == [date(2026, 1, 1), date(2026, 2, 10), date(2026, 3, 1)]


def test_replace_is_idempotent(existing):
    incoming = [make_record(date(2026, 2, 10)), make_record(date(2026, 2, 11))]
    once = merge_import(existing, incoming, FEB, ImportMode.REPLACE)
    twice = merge_import(once, incoming, FEB, ImportMode.REPLACE)
    assert twice == once


def test_merge_keeps_one_record_per_date(existing):
    incoming = [make_record(date(2026, 2, 2), "08:00:00", "16:00:00")]
    result = merge_import(existing, incoming, FEB, ImportMode.MERGE)
    dates = [r.date for r in result]
    assert len(dates) == len(set(dates))
    assert dates == sorted(dates)


def test_duplicate_incoming_dates_last_wins(existing):
    incoming = [
        make_record(date(2026, 2, 5), "08:00:00", "16:00:00"),
        make_record(date(2026, 2, 5), "10:00:00", "20:00:00"),
    ]
    result = merge_import(existing, incoming, FEB, ImportMode.MERGE)
    feb5 = [r for r in result if r.date == date(2026, 2, 5)]
    assert len(feb5) == 1
    assert feb5[0].primary.time_in == "10:00:00"


def test_incoming_outside_range_rejected(existing):
    incoming = [make_record(date(2026, 3, 2))]
    with pytest.raises(ValueError, match="2026-03-02"):
        merge_import(existing, incoming, FEB, ImportMode.MERGE)


def test_mode_accepts_plain_string(existing):
    result = merge_import(existing, [], FEB, "replace")
    assert [r.date for r in result] == [date(2026, 1, 1), date(2026, 3, 1)]


def test_detect_conflict(existing):
    incoming = [make_record(date(2026, 2, 10))]
    conflict = detect_conflict(existing, incoming, FEB)
    assert conflict.has_existing
    assert conflict.existing_count == 2
    assert conflict.importing_count == 1
    assert conflict.start == FEB.start and conflict.end == FEB.end


def test_detect_no_conflict():
    conflict = detect_conflict([], [make_record(date(2026, 2, 10))], FEB)
    assert not conflict.has_existing
    assert conflict.existing_count == 0


def test_date_range_of():
    records = [make_record(date(2026, 2, 9)), make_record(date(2026, 2, 1)), make_record(date(2026, 2, 5))]
    assert date_range_of(records) == DateRange(date(2026, 2, 1), date(2026, 2, 9))
    with pytest.raises(ValueError):
        date_range_of([])


def test_clear_range_keeps_other_periods(existing):
    result = clear_range(existing, FEB)
    assert result == [existing[0], existing[-1]]
