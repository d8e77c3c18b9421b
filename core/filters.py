from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from core.data import DEFAULT_DATE_RANGES, DEFAULT_REGIONS, SalesRecord
from core.errors import InvalidChartKind, InvalidFilterValue
from core.metrics import get_metric

CHART_KINDS: Tuple[str, ...] = ("line", "bar")
CATEGORY_CHART_KINDS: Tuple[str, ...] = ("pie", "bar")

# Trailing periods kept for each date range option.
DATE_RANGE_PERIODS: Dict[str, int] = {
    "Last Month": 1,
    "Last 3 Months": 3,
    "Last 6 Months": 6,
    "Last Year": 12,
}


@dataclass(frozen=True)
class FilterSelection:
    region: str = "All Regions"
    date_range: str = "Last 6 Months"
    metric: str = "revenue"
    chart_kind: str = "line"
    category_chart_kind: str = "pie"


def _as_str(value: object, default: str) -> str:
    if value is None:
        return default
    out = str(value).strip()
    return out or default


def normalize_filters(
    raw: dict,
    *,
    regions: Optional[Sequence[str]] = None,
    date_ranges: Optional[Sequence[str]] = None,
) -> FilterSelection:
    regions = list(regions or DEFAULT_REGIONS)
    date_ranges = list(date_ranges or DEFAULT_DATE_RANGES)
    defaults = FilterSelection()

    region = _as_str(raw.get("region"), defaults.region)
    if region not in regions:
        raise InvalidFilterValue("region", region)

    date_range = _as_str(raw.get("date_range"), defaults.date_range)
    if date_range not in date_ranges:
        raise InvalidFilterValue("date_range", date_range)

    metric = get_metric(_as_str(raw.get("metric"), defaults.metric)).key

    chart_kind = _as_str(raw.get("chart_kind"), defaults.chart_kind).lower()
    if chart_kind not in CHART_KINDS:
        raise InvalidChartKind(chart_kind, CHART_KINDS)

    category_chart_kind = _as_str(raw.get("category_chart_kind"), defaults.category_chart_kind).lower()
    if category_chart_kind not in CATEGORY_CHART_KINDS:
        raise InvalidChartKind(category_chart_kind, CATEGORY_CHART_KINDS)

    return FilterSelection(
        region=region,
        date_range=date_range,
        metric=metric,
        chart_kind=chart_kind,
        category_chart_kind=category_chart_kind,
    )


def apply_date_range(records: Sequence[SalesRecord], date_range: str) -> Tuple[SalesRecord, ...]:
    """Keep the trailing periods covered by ``date_range``, in input order."""
    if date_range not in DATE_RANGE_PERIODS:
        raise InvalidFilterValue("date_range", date_range)
    periods = DATE_RANGE_PERIODS[date_range]
    return tuple(records[-periods:]) if records else ()
