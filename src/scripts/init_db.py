#!/usr/bin/env python3
"""
Create the timesheet SQLite3 database and seed default settings.

Usage:
    uv run python src/scripts/init_db.py [--db PATH]
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    DB_PATH,
    DEFAULT_ANNUAL_VACATION_DAYS,
    DEFAULT_PERIOD,
    DEFAULT_SICK_DAYS,
    KEY_ANNUAL_VACATION,
    KEY_CURRENT_PERIOD,
    KEY_ENTRIES,
    KEY_PERIODS,
    KEY_SICK_DAYS,
)
from core.database import get_connection, list_keys, save_values


def create_database(db_path: Path | None = None) -> Path:
    """Create the database and write defaults for any missing keys."""
    db_path = Path(db_path) if db_path else DB_PATH
    conn = get_connection(db_path)
    try:
        existing = set(list_keys(conn))
        defaults = {
            KEY_ENTRIES: [],
            KEY_PERIODS: [DEFAULT_PERIOD],
            KEY_CURRENT_PERIOD: DEFAULT_PERIOD["id"],
            KEY_ANNUAL_VACATION: DEFAULT_ANNUAL_VACATION_DAYS,
            KEY_SICK_DAYS: DEFAULT_SICK_DAYS,
        }
        missing = {key: value for key, value in defaults.items() if key not in existing}
        if missing:
            save_values(conn, missing)
    finally:
        conn.close()

    print(f"Database ready at: {db_path}")
    if missing:
        print(f"  Seeded defaults: {', '.join(sorted(missing))}")
    return db_path


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the timesheet database")
    parser.add_argument("--db", type=Path, help="Database path (defaults to TIMESHEET_DB_PATH)")
    args = parser.parse_args()

    create_database(args.db)
