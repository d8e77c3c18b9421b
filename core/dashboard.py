from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from core.categories import category_leaderboard, shape_category_view
from core.charts import category_chart, to_vega_spec, trend_chart
from core.data import SalesDataset
from core.filters import CATEGORY_CHART_KINDS, CHART_KINDS, FilterSelection, apply_date_range
from core.kpis import Kpi, compute_kpis
from core.metrics import get_metric, metric_options
from core.series import select_series


def dashboard_options(dataset: SalesDataset) -> Dict[str, Any]:
    return {
        "regions": list(dataset.regions),
        "date_ranges": list(dataset.date_ranges),
        "metrics": metric_options(),
        "chart_kinds": list(CHART_KINDS),
        "category_chart_kinds": list(CATEGORY_CHART_KINDS),
    }


def windowed_kpis(dataset: SalesDataset, date_range: str) -> List[Kpi]:
    sales = apply_date_range(dataset.sales, date_range)
    # Static comparison labels describe the full dataset window only.
    changes = dataset.kpi_changes if len(sales) == len(dataset.sales) else None
    return compute_kpis(sales, changes=changes)


def compute_dashboard(dataset: SalesDataset, selection: FilterSelection) -> Dict[str, Any]:
    """Everything the dashboard page renders for one filter selection."""
    metric = get_metric(selection.metric)
    sales = apply_date_range(dataset.sales, selection.date_range)
    kpis = windowed_kpis(dataset, selection.date_range)
    points = select_series(sales, metric.key)
    slices = shape_category_view(dataset.categories, selection.category_chart_kind)

    return {
        "filters": asdict(selection),
        "options": dashboard_options(dataset),
        "kpis": [asdict(k) for k in kpis],
        "series": {
            "metric": metric.key,
            "label": metric.label,
            "points": [asdict(p) for p in points],
        },
        "categories": {
            "kind": selection.category_chart_kind,
            "slices": [asdict(s) for s in slices],
        },
        "top_categories": [asdict(r) for r in category_leaderboard(dataset.categories)],
        "charts": {
            "trend": to_vega_spec(trend_chart(points, metric.key, selection.chart_kind)),
            "categories": to_vega_spec(category_chart(slices, selection.category_chart_kind)),
        },
    }
