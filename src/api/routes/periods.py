"""Pay period endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_store
from api.errors import invalid_request, not_found, validation_error
from api.models.requests import PeriodRequest
from api.models.responses import (
    CompensationResponse,
    LeaveBalanceResponse,
    PeriodGapResponse,
    PeriodListResponse,
    PeriodResponse,
    PeriodSummaryResponse,
    PeriodTotalsResponse,
    RemovedResponse,
)
from services.periods import categorize_periods
from services.tracker import TimesheetStore

router = APIRouter(prefix="/v1/periods", tags=["periods"])

# Path value that selects the current period
CURRENT = "current"


@router.get("", response_model=PeriodListResponse)
def list_periods(store: TimesheetStore = Depends(get_store)):
    """All periods, each tagged current, upcoming, or previous."""
    groups = categorize_periods(store.periods, store.current_period_id, date.today())
    status_by_id = {p.id: "upcoming" for p in groups.upcoming}
    status_by_id.update({p.id: "previous" for p in groups.previous})
    if groups.current:
        status_by_id[groups.current.id] = "current"

    return PeriodListResponse(
        current_period_id=store.current_period_id,
        periods=[PeriodResponse.from_period(p, status_by_id.get(p.id)) for p in store.periods],
        gaps=[PeriodGapResponse(start=start, end=end) for start, end in store.period_gaps()],
    )


@router.post("", response_model=PeriodResponse, status_code=status.HTTP_201_CREATED)
def create_period(request: PeriodRequest, store: TimesheetStore = Depends(get_store)):
    try:
        period = store.add_period(request.start, request.end, request.label)
    except ValueError as e:
        raise validation_error(e, "Invalid pay period")
    return PeriodResponse.from_period(period)


@router.put("/{period_id}", response_model=PeriodResponse)
def edit_period(period_id: str, request: PeriodRequest, store: TimesheetStore = Depends(get_store)):
    try:
        period = store.edit_period(period_id, request.start, request.end, request.label)
    except KeyError as e:
        raise not_found(e)
    except ValueError as e:
        raise validation_error(e, "Invalid pay period")
    return PeriodResponse.from_period(period)


@router.delete("/{period_id}", response_model=RemovedResponse)
def delete_period(period_id: str, store: TimesheetStore = Depends(get_store)):
    """Delete a period; entries in its range are kept."""
    try:
        store.delete_period(period_id)
    except KeyError as e:
        raise not_found(e)
    return RemovedResponse(removed=1)


@router.post("/{period_id}/activate", response_model=PeriodResponse)
def activate_period(period_id: str, store: TimesheetStore = Depends(get_store)):
    try:
        period = store.set_current_period(period_id)
    except KeyError as e:
        raise not_found(e)
    return PeriodResponse.from_period(period, "current")


@router.get("/{period_id}/summary", response_model=PeriodSummaryResponse)
def period_summary(period_id: str, store: TimesheetStore = Depends(get_store)):
    """
    Totals, leave balances, and compensation estimate for a period.

    Use 'current' as the id for the selected period.
    """
    try:
        summary = store.period_summary(None if period_id == CURRENT else period_id)
    except KeyError as e:
        raise not_found(e)

    compensation = None
    if not store.preferences.hide_salary:
        compensation = CompensationResponse(
            hour_cost=summary.compensation.hour_cost,
            overtime_money=summary.compensation.overtime_money,
            total_salary=summary.compensation.total_salary,
        )

    return PeriodSummaryResponse(
        period=PeriodResponse.from_period(summary.period),
        totals=PeriodTotalsResponse(
            total_hours_worked=summary.totals.total_hours_worked,
            total_extra_hours=summary.totals.total_extra_hours,
            total_extra_hours_with_factor=summary.totals.total_extra_hours_with_factor,
        ),
        vacation=LeaveBalanceResponse(
            taken=summary.vacation.taken, balance=summary.vacation.balance
        ),
        sick_leave=LeaveBalanceResponse(
            taken=summary.sick_leave.taken, balance=summary.sick_leave.balance
        ),
        to_be_added=LeaveBalanceResponse(
            taken=summary.to_be_added.taken, balance=summary.to_be_added.balance
        ),
        compensation=compensation,
        record_count=summary.record_count,
    )


@router.delete("/{period_id}/entries", response_model=RemovedResponse)
def clear_period_entries(
    period_id: str,
    confirm: Annotated[bool, Query(description="Must be true to delete")] = False,
    store: TimesheetStore = Depends(get_store),
):
    """Delete every entry inside a period; other periods are untouched."""
    if not confirm:
        raise invalid_request("Clearing a period requires confirm=true")
    try:
        removed = store.clear_period(None if period_id == CURRENT else period_id)
    except KeyError as e:
        raise not_found(e)
    return RemovedResponse(removed=removed)
