from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from core.data import CategoryRecord
from core.errors import InvalidChartKind
from core.metrics import format_currency

PALETTE = ("#880015", "#B8001F", "#E60026", "#FF3347", "#FF6B7A")

CATEGORY_VALUE_FIELDS = {"pie": "share_of_total", "bar": "sales_amount"}


@dataclass(frozen=True)
class CategorySlice:
    name: str
    value: float
    color: str


@dataclass(frozen=True)
class CategoryRank:
    name: str
    sales: float
    formatted_sales: str
    share: float
    color: str
    bar_width_pct: float


def color_for(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


def shape_category_view(records: Sequence[CategoryRecord], chart_kind: str) -> List[CategorySlice]:
    """Category distribution for a pie (share of total) or bar (sales) chart.

    Colors are assigned by position and wrap around the palette.
    """
    if chart_kind not in CATEGORY_VALUE_FIELDS:
        raise InvalidChartKind(chart_kind, tuple(CATEGORY_VALUE_FIELDS))
    field_name = CATEGORY_VALUE_FIELDS[chart_kind]
    return [CategorySlice(r.name, getattr(r, field_name), color_for(i)) for i, r in enumerate(records)]


def category_leaderboard(records: Sequence[CategoryRecord]) -> List[CategoryRank]:
    return [
        CategoryRank(
            name=r.name,
            sales=r.sales_amount,
            formatted_sales=format_currency(r.sales_amount),
            share=r.share_of_total,
            color=color_for(i),
            bar_width_pct=min(100.0, r.share_of_total * 2),
        )
        for i, r in enumerate(records)
    ]
