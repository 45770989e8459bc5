"""
SQLite key-value storage for timesheet state.

Each piece of state (entries, periods, settings, preferences) is stored as a
JSON value under its own flat key.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any

from core.config import DB_PATH


def get_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Get a database connection, creating the file and schema if needed."""
    path = Path(db_path) if db_path else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    # One request may touch the connection from more than one worker thread
    conn = sqlite3.connect(path, check_same_thread=False)
    create_schema(conn)
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the key-value table if it doesn't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def load_value(conn: sqlite3.Connection, key: str, default: Any = None) -> Any:
    """
    Load and decode one value.

    Missing keys and unreadable JSON both return the default.
    """
    cursor = conn.cursor()
    cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
    row = cursor.fetchone()
    if row is None:
        return default
    try:
        return json.loads(row[0])
    except json.JSONDecodeError:
        print(f"  Warning: stored value for '{key}' is not valid JSON, using default")
        return default


def save_value(conn: sqlite3.Connection, key: str, value: Any) -> None:
    """Encode and write one value, replacing any previous one."""
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
        """,
        (key, json.dumps(value)),
    )
    conn.commit()


def save_values(conn: sqlite3.Connection, values: dict[str, Any]) -> None:
    """Write several keys in one commit."""
    cursor = conn.cursor()
    for key, value in values.items():
        cursor.execute(
            """
            INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """,
            (key, json.dumps(value)),
        )
    conn.commit()


def delete_value(conn: sqlite3.Connection, key: str) -> None:
    conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    conn.commit()


def list_keys(conn: sqlite3.Connection) -> list[str]:
    cursor = conn.cursor()
    cursor.execute("SELECT key FROM kv_store ORDER BY key")
    return [key for (key,) in cursor.fetchall()]


def clear_all(conn: sqlite3.Connection) -> int:
    """Delete every stored key. Returns the number of keys removed."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM kv_store")
    conn.commit()
    return cursor.rowcount
