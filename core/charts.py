from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Sequence

import altair as alt
import pandas as pd

from core.categories import CategorySlice
from core.errors import InvalidChartKind
from core.filters import CATEGORY_CHART_KINDS, CHART_KINDS
from core.metrics import get_metric
from core.series import SeriesPoint

alt.data_transformers.disable_max_rows()

LINE_COLOR = "#880015"


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def trend_chart(points: Sequence[SeriesPoint], metric_key: str, chart_kind: str) -> alt.Chart:
    metric = get_metric(metric_key)
    axis_format = "$,.0f" if metric.key == "revenue" else ",.0f"
    df = pd.DataFrame([asdict(p) for p in points], columns=["label", "value"])
    order = df["label"].tolist()
    encoding = dict(
        x=alt.X("label:N", title=None, sort=order, axis=alt.Axis(labelAngle=0, grid=False)),
        y=alt.Y("value:Q", title=metric.label, axis=alt.Axis(format=axis_format, gridDash=[3, 3])),
        tooltip=[alt.Tooltip("label:N", title="Period"), alt.Tooltip("value:Q", title=metric.label, format=axis_format)],
    )

    if chart_kind == "line":
        # Named so repeated builds emit identical specs.
        hover = alt.selection_point(name="trend_hover", fields=["label"], on="mouseover", empty="all")
        return (
            alt.Chart(df)
            .mark_line(point={"filled": True, "size": 60}, color=LINE_COLOR, strokeWidth=2)
            .encode(**encoding)
            .add_params(hover)
            .properties(height=300)
        )
    if chart_kind == "bar":
        return alt.Chart(df).mark_bar(color=LINE_COLOR).encode(**encoding).properties(height=300)
    raise InvalidChartKind(chart_kind, CHART_KINDS)


def category_chart(slices: Sequence[CategorySlice], chart_kind: str) -> alt.Chart:
    df = pd.DataFrame([asdict(s) for s in slices], columns=["name", "value", "color"])
    names = df["name"].tolist()
    color = alt.Color(
        "name:N",
        scale=alt.Scale(domain=names, range=df["color"].tolist()),
        legend=alt.Legend(title=None) if chart_kind == "pie" else None,
    )

    if chart_kind == "pie":
        return (
            alt.Chart(df)
            .mark_arc(outerRadius=80)
            .encode(
                theta=alt.Theta("value:Q"),
                color=color,
                tooltip=[alt.Tooltip("name:N", title="Category"), alt.Tooltip("value:Q", title="Share %")],
            )
            .properties(height=300)
        )
    if chart_kind == "bar":
        return (
            alt.Chart(df)
            .mark_bar()
            .encode(
                x=alt.X("value:Q", title="Sales", axis=alt.Axis(format="$,.0f")),
                y=alt.Y("name:N", title=None, sort=names),
                color=color,
                tooltip=[alt.Tooltip("name:N", title="Category"), alt.Tooltip("value:Q", title="Sales", format="$,.0f")],
            )
            .properties(height=300)
        )
    raise InvalidChartKind(chart_kind, CATEGORY_CHART_KINDS)
