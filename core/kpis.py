from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

from core.data import SalesRecord, sales_frame
from core.metrics import format_count, format_currency


@dataclass(frozen=True)
class Kpi:
    key: str
    title: str
    value: Optional[float]
    formatted_value: str
    change_label: str
    available: bool = True


def average_order_value(revenue: float, orders: float) -> Optional[float]:
    """Revenue per order, or ``None`` when there are no orders."""
    if not orders:
        return None
    return revenue / orders


def _pct_change(current: Optional[float], previous: Optional[float]) -> str:
    if current is None or previous in (None, 0):
        return "N/A"
    return f"{(current - previous) / previous * 100:+.1f}%"


def period_changes(records: Sequence[SalesRecord]) -> dict:
    """Change labels comparing the last period with the one before it."""
    if len(records) < 2:
        return {}
    prev, cur = records[-2], records[-1]
    return {
        "revenue": _pct_change(cur.revenue, prev.revenue),
        "orders": _pct_change(cur.orders, prev.orders),
        "customers": _pct_change(cur.customers, prev.customers),
        "avg_order_value": _pct_change(
            average_order_value(cur.revenue, cur.orders),
            average_order_value(prev.revenue, prev.orders),
        ),
    }


def compute_kpis(records: Sequence[SalesRecord], *, changes: Optional[Mapping[str, str]] = None) -> List[Kpi]:
    """Summary tiles in fixed order: revenue, orders, customers, average order value.

    ``changes`` overrides the comparison labels; without it they are derived
    from the last two periods.
    """
    df = sales_frame(records)
    # fsum keeps the float total independent of record order.
    total_revenue = math.fsum(df["revenue"]) if not df.empty else 0.0
    total_orders = int(df["orders"].sum()) if not df.empty else 0
    total_customers = int(df["customers"].sum()) if not df.empty else 0
    aov = average_order_value(total_revenue, total_orders)

    labels = dict(changes) if changes is not None else period_changes(records)

    return [
        Kpi("revenue", "Total Revenue", total_revenue, format_currency(total_revenue), labels.get("revenue", "N/A")),
        Kpi("orders", "Total Orders", total_orders, format_count(total_orders), labels.get("orders", "N/A")),
        Kpi("customers", "Customers", total_customers, format_count(total_customers), labels.get("customers", "N/A")),
        Kpi(
            "avg_order_value",
            "Avg Order Value",
            aov,
            format_currency(aov),
            labels.get("avg_order_value", "N/A"),
            available=aov is not None,
        ),
    ]
