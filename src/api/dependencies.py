"""FastAPI dependencies for shared resources."""

from collections.abc import Iterator
from pathlib import Path

from core import config
from services.tracker import TimesheetStore


def get_db_path() -> Path:
    """Database location, read at request time."""
    return config.DB_PATH


def get_store() -> Iterator[TimesheetStore]:
    """
    Open the timesheet store for one request.

    The connection is closed once the response has been sent.
    """
    store = TimesheetStore.open(get_db_path(), silent=True)
    try:
        yield store
    finally:
        store.close()
