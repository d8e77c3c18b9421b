"""Metric registry and display formatting."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Callable, Dict, List, Optional

import pandas as pd

from core.errors import InvalidMetricKey


def _is_finite(value: object) -> bool:
    if value is None or pd.isna(value):
        return False
    return math.isfinite(float(value))


def _quantize(value: object, ndigits: int) -> Optional[Decimal]:
    if not _is_finite(value):
        return None
    d = Decimal(str(value))
    with localcontext() as ctx:
        # Enough digits for the integer part plus the kept decimals.
        ctx.prec = max(28, d.adjusted() + ndigits + 2)
        return d.quantize(Decimal(10) ** -ndigits, rounding=ROUND_HALF_UP)


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    q = _quantize(value, ndigits)
    return float(q) if q is not None else None


def _grouped(value: object) -> str:
    rounded = _quantize(value, 2)
    if rounded is None:
        return "N/A"
    if rounded == rounded.to_integral_value():
        return f"{int(rounded):,}"
    return f"{rounded:,.2f}"


def format_currency(value: object) -> str:
    if not _is_finite(value):
        return "N/A"
    return f"${_grouped(value)}"


def format_count(value: object) -> str:
    return _grouped(value)


@dataclass(frozen=True)
class MetricDescriptor:
    key: str
    label: str
    formatter: Callable[[object], str]


METRICS: Dict[str, MetricDescriptor] = {
    "revenue": MetricDescriptor("revenue", "Revenue", format_currency),
    "orders": MetricDescriptor("orders", "Orders", format_count),
    "customers": MetricDescriptor("customers", "Customers", format_count),
}


def get_metric(key: object) -> MetricDescriptor:
    if not isinstance(key, str) or key not in METRICS:
        raise InvalidMetricKey(key)
    return METRICS[key]


def metric_options() -> List[Dict[str, str]]:
    return [{"key": m.key, "label": m.label} for m in METRICS.values()]


def format_metric(metric_key: str, value: object) -> str:
    """Render ``value`` with the formatter registered for ``metric_key``."""
    return get_metric(metric_key).formatter(value)
