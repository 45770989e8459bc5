"""Leave, employee, and display settings endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_store
from api.errors import validation_error
from api.models.requests import (
    ClearAllRequest,
    EmployeeRequest,
    LeaveSettingsRequest,
    PreferencesRequest,
)
from api.models.responses import (
    EmployeeResponse,
    LeaveSettingsResponse,
    PreferencesResponse,
    RemovedResponse,
    SettingsResponse,
)
from services.tracker import TimesheetStore

router = APIRouter(prefix="/v1/settings", tags=["settings"])


def build_settings_response(store: TimesheetStore) -> SettingsResponse:
    # Salary is left out while hide_salary is on
    salary = None if store.preferences.hide_salary else store.employee.salary
    return SettingsResponse(
        leave=LeaveSettingsResponse(
            annual_vacation_days=store.leave.annual_vacation_days,
            sick_days=store.leave.sick_days,
        ),
        employee=EmployeeResponse(name=store.employee.name, salary=salary),
        preferences=PreferencesResponse(
            use_12_hour=store.preferences.use_12_hour,
            detailed_view=store.preferences.detailed_view,
            hide_salary=store.preferences.hide_salary,
            theme=store.preferences.theme,
        ),
    )


@router.get("", response_model=SettingsResponse)
def get_settings(store: TimesheetStore = Depends(get_store)):
    return build_settings_response(store)


@router.put("/leave", response_model=SettingsResponse)
def update_leave(request: LeaveSettingsRequest, store: TimesheetStore = Depends(get_store)):
    try:
        store.update_leave_settings(request.annual_vacation_days, request.sick_days)
    except ValueError as e:
        raise validation_error(e, "Invalid leave settings")
    return build_settings_response(store)


@router.put("/employee", response_model=SettingsResponse)
def update_employee(request: EmployeeRequest, store: TimesheetStore = Depends(get_store)):
    try:
        store.update_employee(request.name, request.salary)
    except ValueError as e:
        raise validation_error(e, "Invalid employee details")
    return build_settings_response(store)


@router.put("/preferences", response_model=SettingsResponse)
def update_preferences(request: PreferencesRequest, store: TimesheetStore = Depends(get_store)):
    try:
        store.update_preferences(
            use_12_hour=request.use_12_hour,
            detailed_view=request.detailed_view,
            hide_salary=request.hide_salary,
            theme=request.theme,
        )
    except ValueError as e:
        raise validation_error(e, "Invalid preferences")
    return build_settings_response(store)


@router.post("/clear-all", response_model=RemovedResponse)
def clear_all(request: ClearAllRequest, store: TimesheetStore = Depends(get_store)):
    """Delete every stored key. The confirmation must read DELETE ALL."""
    try:
        removed = store.clear_all(request.confirmation)
    except ValueError as e:
        raise validation_error(e, "Clear all not confirmed")
    return RemovedResponse(removed=removed)
