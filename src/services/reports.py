"""
Excel export of pay periods and import templates.

Exported sheets use the same headers, date format, and break layout that the
importer reads, so an export can be imported again unchanged.
"""

from datetime import date
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import (
    BLANK_TEMPLATE_ROWS,
    DETAIL_HEADERS,
    EXPORT_DATE_FORMAT,
    OUTPUT_DIR,
    SIMPLE_HEADERS,
    TEMPLATE_HEADERS,
)
from core.timecalc import format_hours
from models.entries import DayRecord, DayType, PayPeriod
from services.periods import aggregate_period, period_dates, records_in_range

# Excel sheet name limit
MAX_SHEET_NAME_LENGTH = 31

DOUBLE_HOURS_MARK = "Yes"

DETAIL_WIDTHS = [12, 10, 10, 14, 12, 22, 12, 18, 18, 20, 14, 30]
SIMPLE_WIDTHS = [12, 10, 10, 14, 12]
TEMPLATE_WIDTHS = [18, 15, 20, 20, 20, 20, 30]
INSTRUCTION_WIDTHS = [25, 50, 40]

TEMPLATE_INSTRUCTIONS = [
    ["TIMESHEET TEMPLATE - IMPORT INSTRUCTIONS"],
    [],
    ["FILE & SHEETS"],
    ["Any file name is accepted. Every sheet is imported except this one."],
    ["Keep the header row; columns are matched by name, not position."],
    [],
    ["Column", "Description", "Format / Examples"],
    ["Date", "Date in DD/MM/YYYY format", "01/02/2026, 28/02/2026"],
    ["Type", "Day type", "Regular, Vacation, Sick Leave, Holiday, Leave, To Be Added"],
    ["Check In", "Check-in time (24-hour with seconds)", "08:30:00, 09:15:00"],
    ["Check Out", "Check-out time (24-hour with seconds)", "17:30:00, 18:45:00"],
    ["Break Out Times", "Break end times (comma-separated)", "13:30:00, 15:15:00"],
    ["Break In Times", "Break start times (comma-separated)", "13:00:00, 15:00:00"],
    ["Notes", "Any notes (optional)", "Training, Meeting"],
    ["Double Hours", "Yes to pay the day at double rate (optional)", "Yes"],
    [],
    ["RULES"],
    ["1. Dates MUST be DD/MM/YYYY (not MM/DD/YYYY)"],
    ["2. Times MUST be HH:MM:SS in 24-hour format (14:30:00, not 2:30 PM)"],
    ["3. Check Out must be after Check In"],
    ["4. Break columns are optional; list the same number of starts and ends"],
    ["5. Leave time fields empty for Vacation, Holiday and other days off"],
    ["6. Add 'Half Day' to the type for half-day leave (e.g. 'Vacation Half Day')"],
    [],
    ["CALCULATED ON IMPORT"],
    ["Hours Worked (Check In to Check Out, minus breaks outside 13:00-13:30)"],
    ["Extra Hours (hours beyond the 9h weekday standard)"],
    ["Extra Hours (Weighted) (1.5x for overtime, 2x for weekends and holidays)"],
    ["Hours Spent Outside (break time outside the 13:00-13:30 window)"],
    [],
    ["EXAMPLE ROWS"],
    ["Date", "Type", "Check In", "Check Out", "Break Out Times", "Break In Times", "Notes"],
    ["01/02/2026", "Regular", "08:30:00", "18:00:00", "13:30:00", "13:00:00", "Normal day"],
    [
        "02/02/2026",
        "Regular",
        "09:00:00",
        "19:30:00",
        "13:30:00, 16:00:00",
        "13:00:00, 15:45:00",
        "Overtime + 2 breaks",
    ],
    ["03/02/2026", "Vacation", "", "", "", "", "Paid leave"],
    ["04/02/2026", "Sick Leave", "", "", "", "", "Was sick"],
]


# =============================================================================
# FORMATTING
# =============================================================================


def format_date_export(d: date) -> str:
    """Format date as DD/MM/YYYY, the import format."""
    return d.strftime(EXPORT_DATE_FORMAT)


def format_cell_time(time_str: str | None) -> str:
    return time_str or "-"


def make_sheet_name(name: str, suffix: str = "") -> str:
    """Create a valid Excel sheet name with suffix (31 chars max)."""
    sanitized = name
    for char in [":", "\\", "/", "?", "*", "[", "]"]:
        sanitized = sanitized.replace(char, "-")

    max_base_len = MAX_SHEET_NAME_LENGTH - len(suffix)
    if len(sanitized) > max_base_len:
        sanitized = sanitized[:max_base_len].rstrip()

    return sanitized + suffix


# =============================================================================
# ROW BUILDING
# =============================================================================


def _shows_hours(record: DayRecord) -> bool:
    return record.type == DayType.REGULAR or record.has_time_data


def type_label(record: DayRecord) -> str:
    """Day type as written to the sheet; half-day leave keeps its duration."""
    if record.type != DayType.REGULAR and record.duration == 0.5:
        return f"{record.type.value} Half Day"
    return record.type.value


def build_record_row(record: DayRecord, detailed: bool = True) -> list:
    """One export row; break starts go under Break In Times, ends under Break Out Times."""
    primary = record.primary
    check_in = format_cell_time(primary.time_in if primary else None)
    check_out = format_cell_time(primary.time_out if primary else None)
    hours_cell = format_hours(record.hours_worked) if _shows_hours(record) else record.type.value

    if not detailed:
        return [format_date_export(record.date), check_in, check_out, hours_cell, type_label(record)]

    break_ends = ", ".join(format_cell_time(b.time_out) for b in record.breaks) or "-"
    break_starts = ", ".join(format_cell_time(b.time_in) for b in record.breaks) or "-"

    if _shows_hours(record):
        extra = format_hours(record.extra_hours)
        weighted = format_hours(record.extra_hours_with_factor)
        outside = format_hours(record.hours_spent_outside)
    else:
        extra = weighted = outside = "-"

    return [
        format_date_export(record.date),
        check_in,
        check_out,
        hours_cell,
        extra,
        weighted,
        type_label(record),
        break_ends,
        break_starts,
        outside,
        DOUBLE_HOURS_MARK if record.double_hours else "",
        record.notes,
    ]


def build_period_rows(
    records: list[DayRecord], period: PayPeriod, detailed: bool = True
) -> list[list]:
    """Header row, one row per record in the period, then the TOTAL row."""
    headers = DETAIL_HEADERS if detailed else SIMPLE_HEADERS
    rows = [list(headers)]
    for record in records_in_range(records, period.start, period.end):
        rows.append(build_record_row(record, detailed))

    totals = aggregate_period(records, period)
    if detailed:
        rows.append(
            [
                "TOTAL",
                "",
                "",
                format_hours(totals.total_hours_worked),
                format_hours(totals.total_extra_hours),
                format_hours(totals.total_extra_hours_with_factor),
                "",
                "",
                "",
                "",
                "",
                "",
            ]
        )
    else:
        rows.append(["TOTAL", "", "", format_hours(totals.total_hours_worked), ""])
    return rows


def build_template_rows(period: PayPeriod | None = None) -> list[list]:
    """
    Template rows for manual entry.

    Without a period there are a few blank Regular rows. With one, every date
    of the period is listed and weekends are typed Leave.
    """
    rows = [list(TEMPLATE_HEADERS)]
    if period is None:
        for _ in range(BLANK_TEMPLATE_ROWS):
            rows.append(["", DayType.REGULAR.value, "", "", "", "", ""])
        return rows

    for day in period_dates(period):
        day_type = DayType.LEAVE if day.weekday() >= 5 else DayType.REGULAR
        rows.append([format_date_export(day), day_type.value, "", "", "", "", ""])
    return rows


# =============================================================================
# WORKBOOK GENERATION
# =============================================================================


def write_sheet(ws, rows: list[list], widths: list[int]) -> None:
    """Write rows to a worksheet with a bold header row and fixed column widths."""
    for row_idx, row_data in enumerate(rows, start=1):
        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if row_idx == 1:
                cell.font = Font(bold=True)

    for col_idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def create_export_workbook(
    records: list[DayRecord], periods: list[PayPeriod], detailed: bool = True
) -> Workbook:
    """One sheet per period, named after the period label."""
    if not periods:
        raise ValueError("Select at least one period to export")

    wb = Workbook()
    wb.remove(wb.active)
    used_names = set()

    for period in periods:
        name = make_sheet_name(period.label or period.id)
        counter = 2
        while name.lower() in used_names:
            name = make_sheet_name(period.label or period.id, f" ({counter})")
            counter += 1
        used_names.add(name.lower())

        ws = wb.create_sheet(title=name)
        write_sheet(
            ws,
            build_period_rows(records, period, detailed),
            DETAIL_WIDTHS if detailed else SIMPLE_WIDTHS,
        )
    return wb


def create_template_workbook(period: PayPeriod | None = None) -> Workbook:
    """Template sheet plus an Instructions sheet (skipped on import)."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Template"
    write_sheet(ws, build_template_rows(period), TEMPLATE_WIDTHS)

    ws_instructions = wb.create_sheet(title="Instructions")
    write_sheet(ws_instructions, TEMPLATE_INSTRUCTIONS, INSTRUCTION_WIDTHS)
    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer.getvalue()


# =============================================================================
# OUTPUT FILES
# =============================================================================


def _slug(label: str) -> str:
    return "_".join(label.split())


def export_base_name(periods: list[PayPeriod]) -> str:
    if len(periods) == 1:
        return f"timesheet_{_slug(periods[0].label)}"
    return "timesheet_multiple_periods"


def template_base_name(period: PayPeriod | None = None) -> str:
    if period is None:
        return "timesheet_template_blank"
    return f"timesheet_template_{_slug(period.label)}"


def generate_output_filename(base_name: str, output_dir: Path | None = None) -> Path:
    """
    Generate output filename with versioning.

    Adds _a, _b, _c suffix if file exists for proper alphabetical sorting.
    """
    output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "exports"
    output_dir.mkdir(parents=True, exist_ok=True)

    suffix_char = ord("a")
    while True:
        output_path = output_dir / f"{base_name}_{chr(suffix_char)}.xlsx"
        if not output_path.exists():
            return output_path
        suffix_char += 1
        if suffix_char > ord("z"):
            raise RuntimeError("Too many output files exist")


def export_periods(
    records: list[DayRecord],
    periods: list[PayPeriod],
    detailed: bool = True,
    output_dir: Path | None = None,
    silent: bool = False,
) -> Path:
    """Write the period export to a versioned file and return its path."""
    wb = create_export_workbook(records, periods, detailed)
    output_path = generate_output_filename(export_base_name(periods), output_dir)
    wb.save(str(output_path))

    if not silent:
        layout = "detailed" if detailed else "simple"
        print(f"Exported {len(periods)} period(s) ({layout} layout)")
        print(f"Saved Excel export to: {output_path}")
    return output_path


def export_template(
    period: PayPeriod | None = None,
    output_dir: Path | None = None,
    silent: bool = False,
) -> Path:
    """Write an import template to a versioned file and return its path."""
    wb = create_template_workbook(period)
    output_path = generate_output_filename(template_base_name(period), output_dir)
    wb.save(str(output_path))

    if not silent:
        scope = f"period {period.label}" if period else "blank"
        print(f"Saved {scope} template to: {output_path}")
    return output_path
