"""Tests for the key-value storage layer."""

import pytest

from core import database


@pytest.fixture
def conn(db_path):
    conn = database.get_connection(db_path)
    yield conn
    conn.close()


def test_connection_creates_parent_directory(db_path):
    conn = database.get_connection(db_path)
    conn.close()
    assert db_path.exists()


def test_missing_key_returns_default(conn):
    assert database.load_value(conn, "timeEntries", []) == []
    assert database.load_value(conn, "salary") is None


def test_save_and_load_round_trip(conn):
    database.save_value(conn, "payPeriods", [{"id": "p1", "start": "2026-01-23"}])
    database.save_value(conn, "hideSalary", True)
    assert database.load_value(conn, "payPeriods") == [{"id": "p1", "start": "2026-01-23"}]
    assert database.load_value(conn, "hideSalary") is True


def test_save_replaces_value(conn):
    database.save_value(conn, "theme", "light")
    database.save_value(conn, "theme", "dark")
    assert database.load_value(conn, "theme") == "dark"
    assert database.list_keys(conn) == ["theme"]


def test_save_values_and_delete(conn):
    database.save_values(conn, {"fullName": "Dana", "salary": 3000.0})
    assert database.list_keys(conn) == ["fullName", "salary"]
    database.delete_value(conn, "salary")
    assert database.list_keys(conn) == ["fullName"]


def test_invalid_json_falls_back_to_default(conn):
    conn.execute("INSERT INTO kv_store (key, value) VALUES (?, ?)", ("theme", "{not json"))
    conn.commit()
    assert database.load_value(conn, "theme", "light") == "light"


def test_clear_all(conn):
    database.save_values(conn, {"a": 1, "b": 2})
    assert database.clear_all(conn) == 2
    assert database.list_keys(conn) == []
