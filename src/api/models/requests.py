"""Pydantic request bodies for API endpoints."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class IntervalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time_in: str | None = Field(None, alias="in")
    time_out: str | None = Field(None, alias="out")
    notes: str | None = None


class CheckRequest(BaseModel):
    """Check in/out; omit both fields to use the current time."""

    date: dt.date | None = None
    time: str | None = None


class BreakRequest(BaseModel):
    start: str
    end: str
    notes: str | None = None


class SpecialDayRequest(BaseModel):
    date: dt.date
    type: str  # e.g. "Vacation", "Sick Leave Half Day"
    duration: float | None = None
    notes: str = ""


class EntryUpdateRequest(BaseModel):
    intervals: list[IntervalRequest] | None = None
    type: str | None = None
    duration: float | None = None
    notes: str | None = None
    double_hours: bool | None = None


class PeriodRequest(BaseModel):
    start: dt.date
    end: dt.date
    label: str | None = None


class LeaveSettingsRequest(BaseModel):
    annual_vacation_days: float | None = None
    sick_days: float | None = None


class EmployeeRequest(BaseModel):
    name: str | None = None
    salary: float | None = None


class PreferencesRequest(BaseModel):
    use_12_hour: bool | None = None
    detailed_view: bool | None = None
    hide_salary: bool | None = None
    theme: str | None = None


class ClearAllRequest(BaseModel):
    confirmation: str
