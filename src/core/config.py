"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("TIMESHEET_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "timesheet.db"))
)
OUTPUT_DIR = Path(os.environ.get("TIMESHEET_OUTPUT_DIR", str(PROJECT_ROOT / "output")))

# =============================================================================
# TIME ACCOUNTING POLICY
# =============================================================================

SECONDS_PER_DAY = 24 * 3600

# Breaks fully inside this window are not deducted from worked time
ALLOWED_BREAK_START = 13 * 3600  # 13:00:00
ALLOWED_BREAK_END = 13 * 3600 + 30 * 60  # 13:30:00
MAX_BREAK_SECONDS = 2 * 3600

STANDARD_WEEKDAY_HOURS = 9.0
STANDARD_WEEKEND_HOURS = 0.0
HALF_DAY_BASELINE_HOURS = 4.5
OVERTIME_FACTOR = 1.5
DOUBLE_OVERTIME_FACTOR = 2.0

# Salary estimate: two thirds of the monthly salary spread over the standard month
MONTHLY_STANDARD_HOURS = 187.5
SALARY_OVERTIME_SHARE = 2 / 3

# =============================================================================
# PAY PERIODS & LEAVE
# =============================================================================

MAX_PERIOD_DAYS = 35

DEFAULT_PERIOD = {
    "id": "period-default",
    "label": "23 Jan - 20 Feb 2026",
    "start": "2026-01-23",
    "end": "2026-02-20",
}

DEFAULT_ANNUAL_VACATION_DAYS = 10.0
DEFAULT_SICK_DAYS = 7.0

CLEAR_ALL_CONFIRMATION = "DELETE ALL"

# =============================================================================
# STORAGE KEYS (flat key-value layout)
# =============================================================================

KEY_ENTRIES = "timeEntries"
KEY_PERIODS = "payPeriods"
KEY_CURRENT_PERIOD = "currentPeriodId"
KEY_ANNUAL_VACATION = "annualVacation"
KEY_SICK_DAYS = "sickDays"
KEY_FULL_NAME = "fullName"
KEY_SALARY = "salary"
KEY_HIDE_SALARY = "hideSalary"
KEY_USE_12_HOUR = "use12HourFormat"
KEY_DETAILED_VIEW = "detailedView"
KEY_THEME = "theme"

STORAGE_KEYS = [
    KEY_ENTRIES,
    KEY_PERIODS,
    KEY_CURRENT_PERIOD,
    KEY_ANNUAL_VACATION,
    KEY_SICK_DAYS,
    KEY_FULL_NAME,
    KEY_SALARY,
    KEY_HIDE_SALARY,
    KEY_USE_12_HOUR,
    KEY_DETAILED_VIEW,
    KEY_THEME,
]

VALID_THEMES = {"light", "dark"}

# =============================================================================
# IMPORT / EXPORT CONFIGURATION
# =============================================================================

IMPORT_DATE_FORMAT = "%d/%m/%Y"
EXPORT_DATE_FORMAT = "%d/%m/%Y"

# Matched case-insensitively as substrings of the header cell
IMPORT_COLUMNS = {
    "date": "date",
    "type": "type",
    "check_in": "check in",
    "check_out": "check out",
    "break_out": "break out",
    "break_in": "break in",
    "notes": "notes",
    "duration": "duration",
    "double_hours": "double hours",
}

SKIPPED_SHEET_MARKER = "instruction"

DETAIL_HEADERS = [
    "Date",
    "Check In",
    "Check Out",
    "Hours Worked",
    "Extra Hours",
    "Extra Hours (Weighted)",
    "Type",
    "Break Out Times",
    "Break In Times",
    "Hours Spent Outside",
    "Double Hours",
    "Notes",
]
SIMPLE_HEADERS = ["Date", "Check In", "Check Out", "Hours Worked", "Type"]
TEMPLATE_HEADERS = [
    "Date (DD/MM/YYYY)",
    "Type",
    "Check In (HH:MM:SS)",
    "Check Out (HH:MM:SS)",
    "Break Out Times",
    "Break In Times",
    "Notes",
]
BLANK_TEMPLATE_ROWS = 5

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "10"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
API_VERSION = "1.0.0"

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
