"""Excel import and export endpoints."""

import asyncio
import tempfile
from datetime import date
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response

from api.dependencies import get_store
from api.errors import conflict, invalid_request, not_found, validation_error
from api.models.responses import ErrorCodes, ImportResponse, PeriodResponse
from core.config import MAX_UPLOAD_SIZE_BYTES, XLSX_MEDIA_TYPE
from models.entries import DateRange, ImportPreview
from services.importer import read_import_workbook
from services.merge import ImportMode
from services.reports import (
    create_export_workbook,
    create_template_workbook,
    export_base_name,
    template_base_name,
    workbook_to_bytes,
)
from services.tracker import TimesheetStore

router = APIRouter(prefix="/v1", tags=["transfer"])


def _read_in_thread(file_content: bytes) -> ImportPreview:
    """Write the upload to a temp file (openpyxl reads from a path) and parse it."""
    tmp = tempfile.NamedTemporaryFile(suffix=".xlsx", delete=False)
    tmp_path = Path(tmp.name)
    try:
        tmp.write(file_content)
        tmp.flush()
        tmp.close()

        return read_import_workbook(tmp_path, silent=True)
    finally:
        tmp_path.unlink(missing_ok=True)


def _xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResponse)
async def import_timesheet(
    file: Annotated[UploadFile, File(description="Excel timesheet (.xlsx)")],
    mode: Annotated[ImportMode | None, Form(description="merge or replace")] = None,
    start: Annotated[date | None, Form(description="Range start (defaults to file)")] = None,
    end: Annotated[date | None, Form(description="Range end (defaults to file)")] = None,
    proceed_with_errors: Annotated[bool, Form()] = False,
    store: TimesheetStore = Depends(get_store),
):
    """
    Import day records from an Excel workbook.

    Without a mode, an import into a range that already has entries is
    refused with 409 so the caller can choose merge or replace.
    """
    if not file or not file.filename:
        raise invalid_request("No file provided")

    if not file.filename.lower().endswith(".xlsx"):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail={
                "error": "File is not an Excel workbook",
                "code": ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                "details": [f"Received: {file.filename}"],
            },
        )

    file_content = await file.read()
    if len(file_content) > MAX_UPLOAD_SIZE_BYTES:
        max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": f"File exceeds maximum size of {max_mb} MB",
                "code": ErrorCodes.FILE_TOO_LARGE,
                "details": [f"File size: {len(file_content) / (1024 * 1024):.1f} MB"],
            },
        )

    if (start is None) != (end is None):
        raise invalid_request("Give both start and end, or neither")

    preview = await asyncio.to_thread(_read_in_thread, file_content)

    if preview.errors and not proceed_with_errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Excel file validation failed",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": preview.errors,
            },
        )
    if not preview.entries:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "No records found in file",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": preview.errors,
            },
        )

    date_range = DateRange(start, end) if start else preview.date_range

    if mode is None:
        try:
            existing = store.import_conflict(preview, date_range)
        except ValueError as e:
            raise validation_error(e, "Import failed")
        if existing.has_existing:
            raise conflict(
                "Entries already exist in the import range",
                [
                    f"{existing.existing_count} existing entries between "
                    f"{existing.start.isoformat()} and {existing.end.isoformat()}",
                    f"{existing.importing_count} entries to import",
                    "Choose mode 'merge' or 'replace'",
                ],
            )
        mode = ImportMode.MERGE

    try:
        # SQLite writes stay off the event loop
        result = await asyncio.to_thread(
            store.apply_import,
            preview,
            mode,
            date_range=date_range,
            proceed_with_errors=proceed_with_errors,
        )
    except ValueError as e:
        raise validation_error(e, "Import failed")

    return ImportResponse(
        imported_count=result.imported_count,
        mode=result.mode.value,
        start=result.date_range.start,
        end=result.date_range.end,
        replaced_count=result.replaced_count,
        period_created=(
            PeriodResponse.from_period(result.period_created) if result.period_created else None
        ),
        skipped_errors=result.skipped_errors,
        duplicate_dates=preview.duplicate_dates,
    )


@router.get("/export")
def export_timesheet(
    period_id: Annotated[list[str] | None, Query()] = None,
    all_periods: Annotated[bool, Query(alias="all")] = False,
    simple: bool = False,
    store: TimesheetStore = Depends(get_store),
):
    """
    Download selected periods as an Excel workbook, one sheet per period.

    Without period_id or all=true the current period is exported.
    """
    try:
        if all_periods:
            periods = list(store.periods)
        elif period_id:
            periods = [store.get_period(pid) for pid in period_id]
        else:
            periods = [store.current_period] if store.current_period else []
    except KeyError as e:
        raise not_found(e)

    if not periods:
        raise invalid_request("No pay periods to export")

    wb = create_export_workbook(store.records, periods, detailed=not simple)
    return _xlsx_response(workbook_to_bytes(wb), f"{export_base_name(periods)}.xlsx")


@router.get("/export/template")
def export_template(
    period_id: str | None = None,
    blank: bool = False,
    store: TimesheetStore = Depends(get_store),
):
    """Download an import template, blank or prefilled with a period's dates."""
    period = None
    if not blank:
        try:
            period = store.get_period(period_id) if period_id else store.current_period
        except KeyError as e:
            raise not_found(e)

    wb = create_template_workbook(period)
    return _xlsx_response(workbook_to_bytes(wb), f"{template_base_name(period)}.xlsx")
