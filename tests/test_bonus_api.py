from io import BytesIO

import pytest
from fastapi import status
from openpyxl import load_workbook

from bono.dependencies import get_store
from bono.main import app
from bono.services.presentation import XLSX_MEDIA_TYPE
from bono.stores.base import COLUMNS
from bono.stores.sheet_store import SheetRecordStore

FORM = {
    "agent_id": "A1",
    "name": "Laura",
    "email": "laura@example.com",
    "sales": 150,
    "quality": 96,
    "absenteeism": 1,
    "timestamp": "2024-03-01T09:00:00Z",
}
TS = "2024-03-01T09:00:00.000Z"


def _create(client, **overrides):
    return client.post("/api/bonos", json={**FORM, **overrides})


def test_create_record(client):
    response = _create(client)
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["success"] is True
    assert body["data"]["total_bono"] == 427050
    assert body["data"]["timestamp"] == TS


def test_create_rejects_client_total(client):
    response = _create(client, total_bono=1)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["errors"][0]["field"] == "total_bono"


def test_create_without_body(client):
    response = client.post("/api/bonos")
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "VALIDATION_ERROR"


def test_create_duplicate(client):
    _create(client)
    response = _create(client, name="Again")
    assert response.status_code == 409
    assert response.json()["errors"][0]["code"] == "DUPLICATE_RECORD"


def test_list_records(client):
    _create(client)
    _create(client, agent_id="B2")
    body = client.get("/api/bonos").json()
    assert body["metadata"]["count"] == 2
    assert [r["agent_id"] for r in body["data"]] == ["A1", "B2"]


def test_get_record_by_key(client):
    _create(client)
    response = client.get(f"/api/bonos/A1/{TS}")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Laura"

    # Any equivalent spelling of the instant finds the same record
    assert client.get("/api/bonos/A1/2024-03-01T09:00:00Z").status_code == 200
    assert client.get("/api/bonos/A1/2024-03-02T09:00:00Z").status_code == 404


def test_update_record(client):
    _create(client)
    payload = {"record_key": {"agent_id": "A1", "timestamp": TS}, "sales": 99, "quality": 96, "absenteeism": 6}
    response = client.put("/api/bonos", json=payload)
    assert response.status_code == 200
    assert response.json()["data"]["total_bono"] == 128115

    again = client.put("/api/bonos", json=payload)
    assert again.json()["data"]["total_bono"] == 128115


def test_update_without_key(client):
    response = client.put("/api/bonos", json={"sales": 1})
    assert response.status_code == 400


def test_update_unknown_record(client):
    payload = {"record_key": {"agent_id": "nobody", "timestamp": TS}, "sales": 1}
    response = client.put("/api/bonos", json=payload)
    assert response.status_code == 404
    assert "Cannot update bonus record" in response.json()["errors"][0]["msg"]


def test_delete_record(client):
    _create(client)
    response = client.delete(f"/api/bonos/A1/{TS}")
    assert response.status_code == 200
    assert response.json()["data"] == {"agent_id": "A1", "timestamp": TS}
    assert client.get(f"/api/bonos/A1/{TS}").status_code == 404
    assert client.delete(f"/api/bonos/A1/{TS}").status_code == 404


def test_kpis(client):
    empty = client.get("/api/bonos/kpis").json()["data"]
    assert empty == {"distinct_agents": 0, "avg_bonus": 0, "avg_quality": 0}

    _create(client)
    _create(client, agent_id="B2", quality=90, sales=99, absenteeism=6)
    kpis = client.get("/api/bonos/kpis").json()["data"]
    assert kpis["distinct_agents"] == 2
    assert kpis["avg_bonus"] == pytest.approx((427050 + 42705) / 2)
    assert kpis["avg_quality"] == 93


def test_individual_report(client):
    _create(client)
    _create(client, timestamp="2024-03-20T09:00:00Z", quality=80)
    _create(client, timestamp="2024-04-01T00:00:00Z")

    march = client.get("/api/reports/A1", params={"start_date": "2024-03-01", "end_date": "2024-03-31"})
    assert march.status_code == 200
    data = march.json()["data"]
    assert data["record_count"] == 2
    assert data["bonus_earned"] is False
    assert data["awarded_amount"] == 0

    april = client.get("/api/reports/A1", params={"start_date": "2024-04-01"}).json()["data"]
    assert april["bonus_earned"] is True
    assert april["awarded_amount"] == 427050


def test_report_not_found(client):
    response = client.get("/api/reports/nobody")
    assert response.status_code == 404
    assert response.json()["errors"][0]["code"] == "NOT_FOUND"


def test_report_bad_range(client):
    response = client.get("/api/reports/A1", params={"start_date": "2024-04-02", "end_date": "2024-04-01"})
    assert response.status_code == 400


def test_preview_does_not_store(client):
    response = client.post("/api/bonos/preview", json={"sales": 130, "quality": 96, "absenteeism": 4})
    assert response.json()["data"]["total_bono"] == 170820 + 128115 + 27331.2
    assert client.get("/api/bonos").json()["data"] == []


def test_rules_endpoint(client):
    body = client.get("/api/bonos/rules").json()
    assert body["data"]["sales"]["tiers"][0] == {"threshold": 150, "payout": 213525}
    assert body["metadata"]["targets"] == {"sales": 100, "quality": 90, "absenteeism": 4}


def test_export_workbook(client):
    _create(client)
    response = client.get("/api/bonos/export.xlsx")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(XLSX_MEDIA_TYPE)
    assert "bonos.xlsx" in response.headers["content-disposition"]

    rows = list(load_workbook(BytesIO(response.content)).active.iter_rows(values_only=True))
    assert list(rows[0]) == COLUMNS
    assert rows[1][:3] == ("A1", "Laura", "laura@example.com")
    assert rows[1][6] == 427050
    assert rows[1][7] == TS


def test_agent_named_report_is_reachable_by_key(client):
    assert _create(client, agent_id="report").status_code == 201
    response = client.get(f"/api/bonos/report/{TS}")
    assert response.status_code == 200
    assert response.json()["data"]["agent_id"] == "report"

    assert client.get("/api/reports/report").json()["data"]["record_count"] == 1
    assert client.delete(f"/api/bonos/report/{TS}").status_code == 200


def test_request_id_is_echoed(client):
    response = client.get("/api/bonos", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert "X-Process-Time" in response.headers


def test_sheet_backend(client):
    sheet = SheetRecordStore()
    app.dependency_overrides[get_store] = lambda: sheet
    _create(client)
    assert client.get("/api/bonos").json()["metadata"]["count"] == 1
    assert sheet.list_all()[0].total_bono == 427050
