#!/usr/bin/env python3
"""
Import day records from an Excel workbook.

Reads every sheet (except Instructions), shows what was found, and applies the
records to the chosen date range. Entries outside the range are never touched.

Usage:
    uv run python src/scripts/import_timesheet.py <file.xlsx> [--mode merge|replace]
        [--start YYYY-MM-DD --end YYYY-MM-DD] [--yes] [--proceed-with-errors]

Example:
    uv run python src/scripts/import_timesheet.py output/exports/timesheet_23_Jan_-_20_Feb_2026_a.xlsx --mode merge
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.entries import DateRange
from services.importer import read_import_workbook
from services.merge import ImportMode
from services.tracker import TimesheetStore


def choose_mode(existing_count: int, assume_yes: bool) -> ImportMode | None:
    """Ask how to handle entries already in the range. None means cancel."""
    if assume_yes:
        return ImportMode.MERGE
    print(f"\n{existing_count} entries already exist in this range.")
    print("  [m] Merge: keep existing entries, overwrite matching dates")
    print("  [r] Replace: delete existing entries in the range first")
    print("  [c] Cancel")
    answer = input("Choice [m/r/c]: ").strip().lower()
    if answer.startswith("m"):
        return ImportMode.MERGE
    if answer.startswith("r"):
        return ImportMode.REPLACE
    return None


def main():
    parser = argparse.ArgumentParser(description="Import timesheet data from an Excel file")
    parser.add_argument("input_file", type=Path, help="Path to the .xlsx file")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ImportMode],
        help="How to treat existing entries in the range (asked if omitted)",
    )
    parser.add_argument("--start", type=date.fromisoformat, help="Range start (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, help="Range end (YYYY-MM-DD)")
    parser.add_argument("--yes", action="store_true", help="Don't prompt; merge on conflict")
    parser.add_argument(
        "--proceed-with-errors",
        action="store_true",
        help="Import the valid rows even if some rows failed to parse",
    )
    parser.add_argument("--db", type=Path, help="Database path (defaults to TIMESHEET_DB_PATH)")
    args = parser.parse_args()

    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")

    store = None
    try:
        preview = read_import_workbook(args.input_file)

        if preview.errors:
            print(f"\nERROR: {len(preview.errors)} rows could not be read:")
            for error in preview.errors:
                print(f"  - {error}")
            if not args.proceed_with_errors:
                print("\nFix the file or re-run with --proceed-with-errors")
                sys.exit(1)

        if not preview.entries:
            print("\nNo records to import")
            sys.exit(1)

        store = TimesheetStore.open(args.db)
        date_range = DateRange(args.start, args.end) if args.start else preview.date_range

        mode = ImportMode(args.mode) if args.mode else None
        if mode is None:
            existing = store.import_conflict(preview, date_range)
            if existing.has_existing:
                mode = choose_mode(existing.existing_count, args.yes)
                if mode is None:
                    print("Import cancelled")
                    return
            else:
                mode = ImportMode.MERGE

        result = store.apply_import(
            preview,
            mode,
            date_range=date_range,
            proceed_with_errors=args.proceed_with_errors,
        )
        if result.period_created:
            print(f"Created pay period: {result.period_created.label}")
        print(f"\nImport complete: {result.imported_count} records ({result.mode.value})")

    except (FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()


if __name__ == "__main__":
    main()
