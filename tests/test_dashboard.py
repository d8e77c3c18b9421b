"""
Tests for core/dashboard.py: the combined page payload.
"""
import json

from core.dashboard import compute_dashboard, dashboard_options, windowed_kpis
from core.data import SalesDataset
from core.filters import FilterSelection


def test_default_payload(sample_dataset):
    payload = compute_dashboard(sample_dataset, FilterSelection())
    assert payload["filters"]["metric"] == "revenue"
    assert [k["title"] for k in payload["kpis"]] == ["Total Revenue", "Total Orders", "Customers", "Avg Order Value"]
    assert payload["kpis"][0]["change_label"] == "+12.5%"
    assert len(payload["series"]["points"]) == 6
    assert payload["categories"]["kind"] == "pie"
    assert payload["categories"]["slices"][0] == {"name": "Electronics", "value": 35, "color": "#880015"}
    assert len(payload["top_categories"]) == 5
    assert set(payload["charts"]) == {"trend", "categories"}


def test_payload_is_json_serializable(sample_dataset):
    payload = compute_dashboard(sample_dataset, FilterSelection(chart_kind="bar", category_chart_kind="bar"))
    assert json.loads(json.dumps(payload))["series"]["label"] == "Revenue"


def test_date_range_windows_kpis_and_series(sample_dataset):
    payload = compute_dashboard(sample_dataset, FilterSelection(date_range="Last 3 Months", metric="orders"))
    assert [p["label"] for p in payload["series"]["points"]] == ["Apr", "May", "Jun"]
    assert payload["kpis"][1]["value"] == 168 + 151 + 189
    # Window comparison comes from the data, not the static sample labels.
    assert payload["kpis"][0]["change_label"] == "+21.8%"


def test_empty_dataset():
    payload = compute_dashboard(SalesDataset(), FilterSelection())
    assert payload["series"]["points"] == []
    assert payload["categories"]["slices"] == []
    assert payload["kpis"][3]["available"] is False
    assert payload["kpis"][3]["formatted_value"] == "N/A"


def test_is_idempotent(sample_dataset):
    selection = FilterSelection(metric="customers")
    assert compute_dashboard(sample_dataset, selection) == compute_dashboard(sample_dataset, selection)


def test_options(sample_dataset):
    options = dashboard_options(sample_dataset)
    assert options["chart_kinds"] == ["line", "bar"]
    assert options["category_chart_kinds"] == ["pie", "bar"]
    assert [m["key"] for m in options["metrics"]] == ["revenue", "orders", "customers"]


def test_windowed_kpis_keep_static_labels_for_full_window(sample_dataset):
    kpis = windowed_kpis(sample_dataset, "Last Year")
    assert kpis[2].change_label == "+15.3%"
