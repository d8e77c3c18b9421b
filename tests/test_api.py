"""
API tests for api/main.py using FastAPI's TestClient.

Runs against the compiled-in sample dataset unless a test points the data
directory somewhere else.
"""
import pytest
from fastapi.testclient import TestClient

from api.main import app
from core import data as data_module


@pytest.fixture
def client():
    return TestClient(app)


# ── meta ──────────────────────────────────────────────────────────────────────

def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.text


def test_meta_options(client):
    body = client.get("/meta/options").json()
    assert body["regions"][0] == "All Regions"
    assert body["metrics"][1] == {"key": "orders", "label": "Orders"}


# ── dashboard / kpis ──────────────────────────────────────────────────────────

def test_dashboard_defaults(client):
    resp = client.post("/dashboard", json={})
    assert resp.status_code == 200
    body = resp.json()
    assert body["kpis"][0]["formatted_value"] == "$328,000"
    assert body["series"]["metric"] == "revenue"
    assert body["charts"]["trend"]["mark"]["type"] == "line"


def test_dashboard_invalid_metric(client):
    resp = client.post("/dashboard", json={"metric": "profit"})
    assert resp.status_code == 422
    assert resp.json()["type"] == "InvalidMetricKey"


def test_dashboard_invalid_region(client):
    resp = client.post("/dashboard", json={"region": "Mars"})
    assert resp.status_code == 422
    assert resp.json() == {"error": "Invalid value for region: 'Mars'", "type": "InvalidFilterValue", "field": "region"}


def test_kpis_endpoint(client):
    body = client.post("/kpis", json={"date_range": "Last Month"}).json()
    assert body["filters"]["date_range"] == "Last Month"
    assert body["kpis"][1]["value"] == 189
    assert body["kpis"][3]["formatted_value"] == "$354.50"


def test_zero_orders_dataset(client, tmp_path, monkeypatch):
    (tmp_path / "sales.csv").write_text("period,revenue,orders,customers\nJan,0,0,0\n")
    monkeypatch.setenv(data_module.DATA_DIR_ENV, str(tmp_path))
    body = client.post("/kpis", json={}).json()
    aov = body["kpis"][3]
    assert aov["value"] is None
    assert aov["available"] is False
    assert aov["formatted_value"] == "N/A"


# ── series / categories ───────────────────────────────────────────────────────

def test_series(client):
    body = client.get("/series", params={"metric": "customers"}).json()
    assert body["label"] == "Customers"
    assert [p["value"] for p in body["points"]][:2] == [85, 98]


def test_series_unknown_metric(client):
    resp = client.get("/series", params={"metric": "unknown"})
    assert resp.status_code == 422
    assert "points" not in resp.json()


def test_categories(client):
    body = client.get("/categories", params={"kind": "bar"}).json()
    assert body["slices"][0] == {"name": "Electronics", "value": 125000, "color": "#880015"}


def test_categories_unknown_kind(client):
    assert client.get("/categories", params={"kind": "donut"}).status_code == 422


# ── export ────────────────────────────────────────────────────────────────────

def test_export_sales_csv(client):
    resp = client.post("/export/sales", json={"date_range": "Last 3 Months"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "sales.csv" in resp.headers["content-disposition"]
    lines = resp.text.strip().splitlines()
    assert lines[0] == "period,revenue,orders,customers"
    assert lines[1].startswith("Apr,")
    assert len(lines) == 4


def test_export_kpis_csv(client):
    resp = client.post("/export/kpis", json={})
    assert "Total Revenue" in resp.text


def test_export_unknown_page(client):
    assert client.post("/export/bogus", json={}).status_code == 404


def test_export_failure_returns_json_error(client, tmp_path, monkeypatch):
    (tmp_path / "sales.csv").write_text("")
    monkeypatch.setenv(data_module.DATA_DIR_ENV, str(tmp_path))
    resp = client.post("/export/sales", json={})
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json()["type"] == "EmptyDataError"


def test_dashboard_skips_infinite_rows(client, tmp_path, monkeypatch):
    (tmp_path / "sales.csv").write_text("period,revenue,orders,customers\nJan,inf,1,1\nFeb,400,4,2\n")
    monkeypatch.setenv(data_module.DATA_DIR_ENV, str(tmp_path))
    resp = client.post("/dashboard", json={})
    assert resp.status_code == 200
    body = resp.json()
    assert [p["label"] for p in body["series"]["points"]] == ["Feb"]
    assert body["kpis"][3]["formatted_value"] == "$100"
