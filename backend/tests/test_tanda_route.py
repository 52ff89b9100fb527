"""Tests for the /api/tanda endpoints."""
from fastapi.testclient import TestClient

from tanda_engine.main import app

client = TestClient(app)

_DRAFT = {
    "group": {
        "name": "Tanda Ruta 25",
        "members": [
            {"id": f"M{i}", "name": f"Miembro {i}", "prio": i, "contribution": 5_000}
            for i in range(1, 6)
        ],
        "product": {"price": 950_000, "dp_pct": 0.15, "term": 60, "rate_annual": 0.299, "fees": 10_000},
        "seed": 12345,
    },
    "config": {"horizon_months": 12, "events": []},
}


def test_simulate_returns_200():
    response = client.post("/api/tanda/simulate", json=_DRAFT)
    assert response.status_code == 200
    data = response.json()
    assert len(data["months"]) == 12
    assert data["first_award_t"] == 7
    assert data["kpis"]["delivered_count"] == 1
    assert "M1" in data["awards_by_member"]


def test_simulate_month_shape():
    data = client.post("/api/tanda/simulate", json=_DRAFT).json()
    month = data["months"][7]
    for key in ("t", "inflow", "debt_due", "deficit", "savings", "awards", "risk_badge", "rescue", "price"):
        assert key in month
    assert month["risk_badge"] == "debtDeficit"


def test_simulate_with_events():
    draft = {
        **_DRAFT,
        "config": {
            "horizon_months": 3,
            "events": [{"t": 1, "type": "rescue", "data": {"amount": 200_000}}],
        },
    }
    data = client.post("/api/tanda/simulate", json=draft).json()
    assert data["months"][0]["rescue"] == 200_000
    assert data["first_award_t"] == 1


def test_simulate_duplicate_priority_returns_422():
    members = [dict(m, prio=1) for m in _DRAFT["group"]["members"]]
    draft = {**_DRAFT, "group": {**_DRAFT["group"], "members": members}}
    response = client.post("/api/tanda/simulate", json=draft)
    assert response.status_code == 422


def test_senior_summary_response_structure():
    response = client.post("/api/tanda/senior-summary", json={"draft": _DRAFT, "delta_amount": 1_000})
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["suggested_extra"] == 1_000
    assert data["summary"]["next_delivery_month"] == 6
    assert data["summary"]["months_advanced"] == 1
    assert data["timeline"][0] == {"month": 7, "member": "Miembro 1", "unit_number": 1}
    assert data["share_text"].startswith("🚛 *Tanda Ruta 25*")
    assert len(data["result"]["months"]) == 12


def test_senior_summary_default_delta():
    response = client.post("/api/tanda/senior-summary", json={"draft": _DRAFT})
    assert response.status_code == 200
    assert response.json()["summary"]["suggested_extra"] == 500


def test_timeline_csv():
    response = client.post("/api/tanda/timeline.csv", json=_DRAFT)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("t,inflow,debt_due")
    assert len(lines) == 13
