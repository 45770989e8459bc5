"""Pydantic response models for API endpoints."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from models.entries import DayRecord, PayPeriod, TimeInterval


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class IntervalResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time_in: str | None = Field(None, alias="in")
    time_out: str | None = Field(None, alias="out")
    notes: str | None = None

    @classmethod
    def from_interval(cls, interval: TimeInterval) -> "IntervalResponse":
        return cls(time_in=interval.time_in, time_out=interval.time_out, notes=interval.notes)


class EntryResponse(BaseModel):
    """One day record with its derived hour fields."""

    date: dt.date
    type: str
    intervals: list[IntervalResponse]
    duration: float
    notes: str = ""
    double_hours: bool = False
    hours_worked: float
    extra_hours: float
    extra_hours_with_factor: float
    hours_spent_outside: float

    @classmethod
    def from_record(cls, record: DayRecord) -> "EntryResponse":
        return cls(
            date=record.date,
            type=record.type.value,
            intervals=[IntervalResponse.from_interval(i) for i in record.intervals],
            duration=record.duration,
            notes=record.notes,
            double_hours=record.double_hours,
            hours_worked=record.hours_worked,
            extra_hours=record.extra_hours,
            extra_hours_with_factor=record.extra_hours_with_factor,
            hours_spent_outside=record.hours_spent_outside,
        )


class RemovedResponse(BaseModel):
    removed: int


class PeriodResponse(BaseModel):
    id: str
    label: str
    start: dt.date
    end: dt.date
    status: str | None = None  # "current", "upcoming" or "previous"

    @classmethod
    def from_period(cls, period: PayPeriod, status: str | None = None) -> "PeriodResponse":
        return cls(id=period.id, label=period.label, start=period.start, end=period.end, status=status)


class PeriodGapResponse(BaseModel):
    start: dt.date
    end: dt.date


class PeriodListResponse(BaseModel):
    current_period_id: str | None
    periods: list[PeriodResponse]
    gaps: list[PeriodGapResponse] = []


class PeriodTotalsResponse(BaseModel):
    total_hours_worked: float
    total_extra_hours: float
    total_extra_hours_with_factor: float


class LeaveBalanceResponse(BaseModel):
    taken: float
    balance: float


class CompensationResponse(BaseModel):
    hour_cost: float
    overtime_money: float
    total_salary: float


class PeriodSummaryResponse(BaseModel):
    period: PeriodResponse
    totals: PeriodTotalsResponse
    vacation: LeaveBalanceResponse
    sick_leave: LeaveBalanceResponse
    to_be_added: LeaveBalanceResponse
    compensation: CompensationResponse | None = None  # hidden when hide_salary is set
    record_count: int


class LeaveSettingsResponse(BaseModel):
    annual_vacation_days: float
    sick_days: float


class EmployeeResponse(BaseModel):
    name: str
    salary: float | None = None


class PreferencesResponse(BaseModel):
    use_12_hour: bool
    detailed_view: bool
    hide_salary: bool
    theme: str


class SettingsResponse(BaseModel):
    leave: LeaveSettingsResponse
    employee: EmployeeResponse
    preferences: PreferencesResponse


class ImportResponse(BaseModel):
    imported_count: int
    mode: str
    start: dt.date
    end: dt.date
    replaced_count: int = 0
    period_created: PeriodResponse | None = None
    skipped_errors: list[str] = []
    duplicate_dates: list[dt.date] = []
