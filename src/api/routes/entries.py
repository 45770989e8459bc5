"""Day record endpoints: check-in/out, breaks, special days, edits, and clears."""

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, status

from api.dependencies import get_store
from api.errors import invalid_request, not_found, validation_error
from api.models.requests import (
    BreakRequest,
    CheckRequest,
    EntryUpdateRequest,
    SpecialDayRequest,
)
from api.models.responses import EntryResponse, RemovedResponse
from models.entries import DateRange, TimeInterval
from services.tracker import TimesheetStore

router = APIRouter(prefix="/v1/entries", tags=["entries"])


def resolve_range(
    store: TimesheetStore, start: date | None, end: date | None
) -> DateRange:
    """Explicit range, or the current pay period when none is given."""
    if start and end:
        if start > end:
            raise invalid_request("start must not be after end")
        return DateRange(start, end)
    if start or end:
        raise invalid_request("Give both start and end, or neither")
    period = store.current_period
    if period is None:
        raise invalid_request("No pay period selected; give start and end")
    return DateRange(period.start, period.end)


@router.get("", response_model=list[EntryResponse])
def list_entries(
    start: date | None = None,
    end: date | None = None,
    store: TimesheetStore = Depends(get_store),
):
    """List entries in a date range (the current pay period by default)."""
    date_range = resolve_range(store, start, end)
    return [
        EntryResponse.from_record(r) for r in store.entries_in_range(date_range.start, date_range.end)
    ]


@router.get("/{day}", response_model=EntryResponse)
def get_entry(day: date, store: TimesheetStore = Depends(get_store)):
    try:
        return EntryResponse.from_record(store.require_record(day))
    except KeyError as e:
        raise not_found(e)


def _check(store: TimesheetStore, request: CheckRequest | None, check_in: bool):
    request = request or CheckRequest()
    try:
        if request.time is None:
            now = datetime.now()
            if request.date is not None:
                now = datetime.combine(request.date, now.time())
            record = store.check_in(now) if check_in else store.check_out(now)
        else:
            day = request.date or date.today()
            record = (
                store.check_in_at(day, request.time)
                if check_in
                else store.check_out_at(day, request.time)
            )
    except ValueError as e:
        raise validation_error(e, "Check in failed" if check_in else "Check out failed")
    return EntryResponse.from_record(record)


@router.post("/check-in", response_model=EntryResponse)
def check_in(
    request: Annotated[CheckRequest | None, Body()] = None,
    store: TimesheetStore = Depends(get_store),
):
    """Check in now, or at a given date and time."""
    return _check(store, request, check_in=True)


@router.post("/check-out", response_model=EntryResponse)
def check_out(
    request: Annotated[CheckRequest | None, Body()] = None,
    store: TimesheetStore = Depends(get_store),
):
    """Check out now, or at a given date and time."""
    return _check(store, request, check_in=False)


@router.post("/special-days", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def add_special_day(request: SpecialDayRequest, store: TimesheetStore = Depends(get_store)):
    """Add a leave or holiday day, e.g. type 'Vacation Half Day'."""
    try:
        record = store.add_special_day(request.date, request.type, request.duration, request.notes)
    except ValueError as e:
        raise validation_error(e, "Could not add day")
    return EntryResponse.from_record(record)


@router.post("/{day}/breaks", response_model=EntryResponse)
def add_break(day: date, request: BreakRequest, store: TimesheetStore = Depends(get_store)):
    try:
        record = store.add_break(day, request.start, request.end, request.notes)
    except ValueError as e:
        raise validation_error(e, "Could not add break")
    return EntryResponse.from_record(record)


@router.patch("/{day}", response_model=EntryResponse)
def update_entry(day: date, request: EntryUpdateRequest, store: TimesheetStore = Depends(get_store)):
    intervals = None
    if request.intervals is not None:
        intervals = [
            TimeInterval(time_in=i.time_in, time_out=i.time_out, notes=i.notes)
            for i in request.intervals
        ]
    try:
        record = store.update_entry(
            day,
            intervals=intervals,
            day_type=request.type,
            duration=request.duration,
            notes=request.notes,
            double_hours=request.double_hours,
        )
    except KeyError as e:
        raise not_found(e)
    except ValueError as e:
        raise validation_error(e, "Entry update failed")
    return EntryResponse.from_record(record)


@router.delete("/{day}", response_model=RemovedResponse)
def delete_entry(day: date, store: TimesheetStore = Depends(get_store)):
    try:
        store.delete_entry(day)
    except KeyError as e:
        raise not_found(e)
    return RemovedResponse(removed=1)


@router.delete("", response_model=RemovedResponse)
def clear_entries(
    start: date,
    end: date,
    confirm: Annotated[bool, Query(description="Must be true to delete")] = False,
    store: TimesheetStore = Depends(get_store),
):
    """Delete every entry between start and end (inclusive)."""
    if not confirm:
        raise invalid_request("Clearing entries requires confirm=true")
    date_range = resolve_range(store, start, end)
    return RemovedResponse(removed=store.clear_range(date_range))
