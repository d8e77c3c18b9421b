from contextlib import contextmanager

import pandas as pd
import streamlit as st

from core.dashboard import compute_dashboard
from core.data import load_dashboard_data, sales_frame
from core.filters import CATEGORY_CHART_KINDS, CHART_KINDS, apply_date_range, normalize_filters
from core.metrics import METRICS


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .cat-row {display: flex;align-items: center;gap: 10px;margin-bottom: 12px;}
        .cat-swatch {width: 8px;height: 44px;border-radius: 4px;}
        .cat-body {flex: 1;}
        .cat-head {display: flex;justify-content: space-between;font-size: 0.9rem;font-weight: 600;}
        .cat-track {width: 100%;background: #e5e7eb;border-radius: 4px;height: 8px;margin-top: 4px;}
        .cat-fill {height: 8px;border-radius: 4px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-title">{title}</div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_top_categories(rows: list, title: str = "Top Performing Categories"):
    with card(title):
        html = []
        for row in rows:
            html.append(
                f"""
                <div class="cat-row">
                  <div class="cat-swatch" style="background:{row['color']}"></div>
                  <div class="cat-body">
                    <div class="cat-head"><span>{row['name']}</span><span>{row['formatted_sales']}</span></div>
                    <div class="cat-track"><div class="cat-fill" style="width:{row['bar_width_pct']}%;background:{row['color']}"></div></div>
                  </div>
                </div>
                """
            )
        st.markdown("".join(html), unsafe_allow_html=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Sales Dashboard", layout="wide")
inject_base_styles()

dataset = load_dashboard_data()

header_left, header_right = st.columns([8, 2])
with header_left:
    st.title("Sales Dashboard")
    st.caption("Monitor your business performance")

with st.sidebar:
    st.markdown("### Filters")
    region = st.selectbox("Region", list(dataset.regions), index=0)
    date_range = st.selectbox("Date range", list(dataset.date_ranges), index=0)
    st.markdown("---")
    st.markdown("### Trend Analysis")
    metric = st.selectbox("Metric", list(METRICS), format_func=lambda k: METRICS[k].label)
    chart_kind = st.radio("Chart", list(CHART_KINDS), horizontal=True, format_func=str.capitalize)
    st.markdown("### Sales by Category")
    category_chart_kind = st.radio("Category chart", list(CATEGORY_CHART_KINDS), horizontal=True, format_func=str.capitalize)

selection = normalize_filters(
    {
        "region": region,
        "date_range": date_range,
        "metric": metric,
        "chart_kind": chart_kind,
        "category_chart_kind": category_chart_kind,
    },
    regions=dataset.regions,
    date_ranges=dataset.date_ranges,
)
payload = compute_dashboard(dataset, selection)

with header_right:
    export_df = sales_frame(apply_date_range(dataset.sales, selection.date_range))
    st.download_button(
        "Export Report",
        data=export_df.to_csv(index=False).encode("utf-8"),
        file_name="sales.csv",
        mime="text/csv",
        disabled=export_df.empty,
    )

# ----- KPI tiles -----
cols = st.columns(len(payload["kpis"]))
for col, kpi in zip(cols, payload["kpis"]):
    col.metric(
        kpi["title"],
        kpi["formatted_value"],
        delta=f"{kpi['change_label']} vs last period" if kpi["change_label"] != "N/A" else None,
        help=None if kpi["available"] else "Not available: no orders in the selected range.",
    )

# ----- Trend -----
with card("Trend Analysis"):
    if payload["series"]["points"]:
        st.vega_lite_chart(payload["charts"]["trend"], use_container_width=True)
    else:
        st.info("No sales records in the selected range.")

# ----- Categories -----
left, right = st.columns(2)
with left:
    with card("Sales by Category"):
        if payload["categories"]["slices"]:
            st.vega_lite_chart(payload["charts"]["categories"], use_container_width=True)
        else:
            st.info("No category data available.")
with right:
    render_top_categories(payload["top_categories"])

with st.expander("Raw data", expanded=False):
    st.dataframe(pd.DataFrame(payload["series"]["points"]), use_container_width=True)
