from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

from core.data import SalesRecord
from core.metrics import get_metric


@dataclass(frozen=True)
class SeriesPoint:
    label: str
    value: Union[int, float]


def select_series(records: Sequence[SalesRecord], metric_key: str) -> List[SeriesPoint]:
    """Project one metric across the records, keeping their order."""
    metric = get_metric(metric_key)
    return [SeriesPoint(r.period, getattr(r, metric.key)) for r in records]
