#!/usr/bin/env python3
"""
Export pay periods or an import template to Excel.

Usage:
    uv run python src/scripts/export_timesheet.py                      # current period, detailed
    uv run python src/scripts/export_timesheet.py --all --simple
    uv run python src/scripts/export_timesheet.py --period period-default --period period-abc
    uv run python src/scripts/export_timesheet.py --template [--blank]
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.reports import export_periods, export_template
from services.tracker import TimesheetStore


def main():
    parser = argparse.ArgumentParser(description="Export timesheet data to Excel")
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "--period",
        action="append",
        dest="period_ids",
        metavar="ID",
        help="Period id to export (repeatable). Defaults to the current period.",
    )
    selection.add_argument("--all", action="store_true", help="Export every period")
    parser.add_argument("--simple", action="store_true", help="Simple layout (5 columns)")
    parser.add_argument("--template", action="store_true", help="Export an import template")
    parser.add_argument(
        "--blank", action="store_true", help="With --template: blank rows instead of period dates"
    )
    parser.add_argument("--output-dir", type=Path, help="Directory for the .xlsx file")
    parser.add_argument("--db", type=Path, help="Database path (defaults to TIMESHEET_DB_PATH)")
    args = parser.parse_args()

    if args.blank and not args.template:
        parser.error("--blank requires --template")

    store = TimesheetStore.open(args.db)
    try:
        if args.template:
            period = None
            if not args.blank:
                period = store.get_period(args.period_ids[0]) if args.period_ids else store.current_period
            output_path = export_template(period, args.output_dir)
        else:
            if args.all:
                periods = list(store.periods)
            elif args.period_ids:
                periods = [store.get_period(pid) for pid in args.period_ids]
            else:
                periods = [store.current_period] if store.current_period else []
            output_path = export_periods(
                store.records, periods, detailed=not args.simple, output_dir=args.output_dir
            )
        print(f"\nExport complete: {output_path}")
    except (KeyError, ValueError) as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
