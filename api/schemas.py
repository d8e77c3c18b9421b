from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class FilterSelectionModel(BaseModel):
    region: str = "All Regions"
    date_range: str = "Last 6 Months"
    metric: str = "revenue"
    chart_kind: str = "line"
    category_chart_kind: str = "pie"


class MetricOptionModel(BaseModel):
    key: str
    label: str


class OptionsResponse(BaseModel):
    regions: List[str]
    date_ranges: List[str]
    metrics: List[MetricOptionModel]
    chart_kinds: List[str]
    category_chart_kinds: List[str]


class ErrorResponse(BaseModel):
    error: str
    type: str
    field: Optional[str] = None
