"""API tests against a temporary database."""

from datetime import date
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook, load_workbook

from api.main import app
from core import config
from services.tracker import TimesheetStore

HEADERS = ("Date", "Type", "Check In", "Check Out", "Break Out Times", "Break In Times", "Notes")


@pytest.fixture
def client(db_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", db_path)
    with TestClient(app) as client:
        yield client


def _xlsx(*rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Feb"
    ws.append(HEADERS)
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _upload(client, content, **data):
    return client.post(
        "/v1/import",
        files={"file": ("timesheet.xlsx", content, config.XLSX_MEDIA_TYPE)},
        data=data,
    )


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database_available"] is True


class TestEntries:
    def test_check_in_and_out(self, client):
        response = client.post("/v1/entries/check-in", json={"date": "2026-02-02", "time": "08:30:00"})
        assert response.status_code == 200
        assert response.json()["intervals"] == [{"in": "08:30:00", "out": None, "notes": None}]

        response = client.post("/v1/entries/check-out", json={"date": "2026-02-02", "time": "18:00:00"})
        body = response.json()
        assert body["hours_worked"] == 9.5
        assert body["extra_hours_with_factor"] == 0.75

    def test_double_check_in_is_validation_error(self, client):
        client.post("/v1/entries/check-in", json={"date": "2026-02-02", "time": "09:00:00"})
        response = client.post("/v1/entries/check-in", json={"date": "2026-02-02", "time": "10:00:00"})
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"] == ["Already checked in. Check out first."]

    def test_check_in_now(self, client):
        response = client.post("/v1/entries/check-in")
        assert response.status_code == 200
        assert response.json()["date"] == date.today().isoformat()

    def test_list_defaults_to_current_period(self, client):
        client.post("/v1/entries/special-days", json={"date": "2026-02-03", "type": "Vacation"})
        client.post("/v1/entries/special-days", json={"date": "2026-03-03", "type": "Vacation"})
        response = client.get("/v1/entries")
        assert [e["date"] for e in response.json()] == ["2026-02-03"]

        response = client.get("/v1/entries", params={"start": "2026-03-01", "end": "2026-03-31"})
        assert [e["date"] for e in response.json()] == ["2026-03-03"]

    def test_special_day_half_label(self, client):
        response = client.post(
            "/v1/entries/special-days", json={"date": "2026-02-03", "type": "Sick Leave Half Day"}
        )
        assert response.status_code == 201
        assert response.json()["type"] == "Sick Leave"
        assert response.json()["duration"] == 0.5

    def test_break_and_patch(self, client):
        client.post("/v1/entries/check-in", json={"date": "2026-02-02", "time": "09:00:00"})
        client.post("/v1/entries/check-out", json={"date": "2026-02-02", "time": "18:00:00"})
        response = client.post(
            "/v1/entries/2026-02-02/breaks", json={"start": "15:00:00", "end": "15:30:00"}
        )
        assert response.json()["hours_worked"] == 8.5

        response = client.patch(
            "/v1/entries/2026-02-02",
            json={"intervals": [{"in": "08:00:00", "out": "19:00:00"}], "notes": "Release"},
        )
        assert response.status_code == 200
        assert response.json()["hours_worked"] == 11.0
        assert response.json()["notes"] == "Release"

    def test_missing_entry_is_404(self, client):
        response = client.get("/v1/entries/2026-02-02")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"
        assert response.json()["error"] == "No entry for 2026-02-02"

    def test_delete_entry(self, client):
        client.post("/v1/entries/special-days", json={"date": "2026-02-03", "type": "Holiday"})
        assert client.delete("/v1/entries/2026-02-03").json() == {"removed": 1}
        assert client.delete("/v1/entries/2026-02-03").status_code == 404

    def test_clear_range_needs_confirm(self, client):
        client.post("/v1/entries/special-days", json={"date": "2026-02-03", "type": "Holiday"})
        params = {"start": "2026-02-01", "end": "2026-02-28"}
        response = client.delete("/v1/entries", params=params)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"

        response = client.delete("/v1/entries", params={**params, "confirm": "true"})
        assert response.json() == {"removed": 1}

    def test_bad_body_is_validation_error(self, client):
        response = client.post("/v1/entries/special-days", json={"type": "Vacation"})
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestPeriods:
    def test_list_periods(self, client):
        body = client.get("/v1/periods").json()
        assert body["current_period_id"] == "period-default"
        assert body["periods"][0]["status"] == "current"
        assert body["gaps"] == []

    def test_create_and_activate(self, client):
        response = client.post("/v1/periods", json={"start": "2026-03-01", "end": "2026-03-31"})
        assert response.status_code == 201
        period_id = response.json()["id"]

        body = client.get("/v1/periods").json()
        assert body["gaps"] == [{"start": "2026-02-21", "end": "2026-02-28"}]

        response = client.post(f"/v1/periods/{period_id}/activate")
        assert response.json()["status"] == "current"
        assert client.get("/v1/periods").json()["current_period_id"] == period_id

    def test_overlap_rejected(self, client):
        response = client.post("/v1/periods", json={"start": "2026-02-10", "end": "2026-03-05"})
        assert response.status_code == 422
        assert "overlaps" in response.json()["details"][0]

    def test_unknown_period(self, client):
        assert client.put(
            "/v1/periods/nope", json={"start": "2026-03-01", "end": "2026-03-31"}
        ).status_code == 404
        assert client.delete("/v1/periods/nope").status_code == 404

    def test_summary_hides_salary(self, client):
        client.put("/v1/settings/employee", json={"salary": 3000})
        client.post("/v1/entries/check-in", json={"date": "2026-02-02", "time": "08:00:00"})
        client.post("/v1/entries/check-out", json={"date": "2026-02-02", "time": "19:00:00"})

        body = client.get("/v1/periods/current/summary").json()
        assert body["totals"]["total_extra_hours_with_factor"] == 3.0
        assert body["compensation"]["overtime_money"] == pytest.approx(3.0 * 3000 * 2 / 3 / 187.5)

        client.put("/v1/settings/preferences", json={"hide_salary": True})
        body = client.get("/v1/periods/current/summary").json()
        assert body["compensation"] is None

    def test_clear_period_entries(self, client):
        client.post("/v1/entries/special-days", json={"date": "2026-02-03", "type": "Holiday"})
        client.post("/v1/entries/special-days", json={"date": "2026-03-03", "type": "Holiday"})
        response = client.delete("/v1/periods/current/entries", params={"confirm": "true"})
        assert response.json() == {"removed": 1}
        assert client.get("/v1/entries/2026-03-03").status_code == 200


class TestSettings:
    def test_defaults(self, client):
        body = client.get("/v1/settings").json()
        assert body["leave"] == {"annual_vacation_days": 10.0, "sick_days": 7.0}
        assert body["preferences"]["theme"] == "light"

    def test_updates(self, client):
        client.put("/v1/settings/leave", json={"sick_days": 5})
        body = client.put("/v1/settings/employee", json={"name": "Dana", "salary": 2500}).json()
        assert body["leave"]["sick_days"] == 5.0
        assert body["employee"] == {"name": "Dana", "salary": 2500.0}

    def test_hidden_salary(self, client):
        client.put("/v1/settings/employee", json={"salary": 2500})
        body = client.put("/v1/settings/preferences", json={"hide_salary": True}).json()
        assert body["employee"]["salary"] is None

    def test_invalid_theme(self, client):
        response = client.put("/v1/settings/preferences", json={"theme": "neon"})
        assert response.status_code == 422

    def test_clear_all(self, client):
        client.post("/v1/entries/special-days", json={"date": "2026-02-03", "type": "Holiday"})
        assert client.post("/v1/settings/clear-all", json={"confirmation": "yes"}).status_code == 422
        assert client.post("/v1/settings/clear-all", json={"confirmation": "DELETE ALL"}).status_code == 200
        assert client.get("/v1/entries/2026-02-03").status_code == 404


class TestTransfer:
    ROWS = (
        ("02/02/2026", "Regular", "09:00:00", "18:00:00", None, None, None),
        ("03/02/2026", "Vacation", None, None, None, None, None),
    )

    def test_import_into_empty_range(self, client):
        response = _upload(client, _xlsx(*self.ROWS))
        assert response.status_code == 200
        body = response.json()
        assert body["imported_count"] == 2
        assert body["mode"] == "merge"
        assert body["start"] == "2026-02-02"
        assert body["end"] == "2026-02-03"
        assert client.get("/v1/entries/2026-02-02").json()["hours_worked"] == 9.0

    def test_import_conflict_then_replace(self, client):
        client.post("/v1/entries/special-days", json={"date": "2026-02-02", "type": "Holiday"})
        response = _upload(client, _xlsx(*self.ROWS))
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

        response = _upload(client, _xlsx(*self.ROWS), mode="replace")
        assert response.status_code == 200
        assert response.json()["replaced_count"] == 1
        assert client.get("/v1/entries/2026-02-02").json()["type"] == "Regular"

    def test_import_with_row_errors(self, client):
        content = _xlsx(*self.ROWS, ("04/02/2026", "Regular", "18:00:00", "09:00:00", None, None, None))
        response = _upload(client, content)
        assert response.status_code == 422
        assert response.json()["details"][0].startswith('Sheet "Feb", Row 4:')

        response = _upload(client, content, proceed_with_errors="true")
        assert response.status_code == 200
        assert len(response.json()["skipped_errors"]) == 1

    def test_import_is_written_to_the_database(self, client, db_path):
        response = _upload(client, _xlsx(*self.ROWS), proceed_with_errors="false")
        assert response.status_code == 200

        store = TimesheetStore.open(db_path, silent=True)
        try:
            assert [r.date for r in store.records] == [date(2026, 2, 2), date(2026, 2, 3)]
            assert store.records[0].hours_worked == 9.0
        finally:
            store.close()

    def test_import_rejects_non_excel(self, client):
        response = client.post("/v1/import", files={"file": ("notes.csv", b"a,b", "text/csv")})
        assert response.status_code == 415
        assert response.json()["code"] == "UNSUPPORTED_MEDIA_TYPE"

    def test_import_needs_both_range_ends(self, client):
        response = _upload(client, _xlsx(*self.ROWS), start="2026-02-01")
        assert response.status_code == 400

    def test_export_current_period(self, client):
        client.post("/v1/entries/check-in", json={"date": "2026-02-02", "time": "09:00:00"})
        client.post("/v1/entries/check-out", json={"date": "2026-02-02", "time": "18:00:00"})
        response = client.get("/v1/export")
        assert response.status_code == 200
        assert "timesheet_23_Jan_-_20_Feb_2026.xlsx" in response.headers["content-disposition"]

        wb = load_workbook(BytesIO(response.content))
        ws = wb["23 Jan - 20 Feb 2026"]
        assert ws["A2"].value == "02/02/2026"
        assert ws["A3"].value == "TOTAL"

    def test_export_unknown_period(self, client):
        assert client.get("/v1/export", params={"period_id": "nope"}).status_code == 404

    def test_blank_template(self, client):
        response = client.get("/v1/export/template", params={"blank": "true"})
        assert response.status_code == 200
        assert "timesheet_template_blank.xlsx" in response.headers["content-disposition"]
        wb = load_workbook(BytesIO(response.content))
        assert wb.sheetnames == ["Template", "Instructions"]
