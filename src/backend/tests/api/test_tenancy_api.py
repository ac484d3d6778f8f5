import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.tenancy import router


SCHEDULE = {
    "frequency": "Weekly",
    "rent_amount": "400",
    "due_anchor": "Thursday",
    "tracking_start_date": "2026-01-15",
}


@pytest.fixture
def client(monkeypatch):
    for name in ("TENANCY_DEFAULT_REGION", "TENANCY_HOLIDAYS_PATH", "TENANCY_STRIKE_WORKING_DAYS"):
        monkeypatch.delenv(name, raising=False)
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def test_balance_endpoint(client):
    resp = client.post("/tenancy/balance", json={"schedule": SCHEDULE, "as_of": "2026-01-22"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["current_balance"] == "800.00"
    assert body["cycles_elapsed"] == 2
    assert body["oldest_unpaid_due_date"] == "2026-01-15"


def test_balance_endpoint_rejects_zero_rent(client):
    resp = client.post(
        "/tenancy/balance",
        json={"schedule": {**SCHEDULE, "rent_amount": "0"}, "as_of": "2026-01-22"},
    )

    assert resp.status_code == 422
    assert "rent_amount" in resp.json()["detail"]


def test_compliance_endpoint(client):
    resp = client.post(
        "/tenancy/compliance",
        json={"schedule": SCHEDULE, "as_of": "2026-01-22", "region": "Auckland"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ActionRequired"
    assert body["working_days_overdue"] == 5
    assert body["next_strike_number"] == 1
    assert body["region"] == "Auckland"


def test_compliance_endpoint_rejects_strike_without_due_date(client):
    resp = client.post(
        "/tenancy/compliance",
        json={
            "schedule": SCHEDULE,
            "as_of": "2026-01-22",
            "notices": [{"notice_id": "s1", "official_service_date": "2026-01-20", "type": "Strike"}],
        },
    )

    assert resp.status_code == 422


def test_service_date_endpoint(client):
    resp = client.post(
        "/tenancy/service-date",
        json={"sent_at": "2026-01-19T05:00:00Z", "region": "Auckland"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["official_service_date"] == "2026-01-20"
    assert body["remedy_expiry_date"] == "2026-02-03"
    assert body["tribunal_deadline"] == "2026-02-17"


def test_reconcile_endpoint(client):
    resp = client.post(
        "/tenancy/reconcile",
        json={
            "schedule": SCHEDULE,
            "payments": [{"id": "p1", "amount": "400", "date": "2026-01-15"}],
            "change": {"rent_amount": "450"},
            "now": "2026-01-22",
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["policy"] == "preserve_cash_balance"
    assert body["schedule"]["tracking_start_date"] == "2026-01-22"
    assert body["post_change_balance"]["current_balance"] == "400.00"


def test_reconcile_endpoint_rejects_mismatched_anchor(client):
    resp = client.post(
        "/tenancy/reconcile",
        json={"schedule": SCHEDULE, "change": {"frequency": "Monthly"}, "now": "2026-01-22"},
    )

    assert resp.status_code == 422
