from __future__ import annotations

from dataclasses import asdict
import logging
import math
import os

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from api.schemas import ErrorResponse, FilterSelectionModel, OptionsResponse
from core.categories import shape_category_view
from core.dashboard import compute_dashboard, dashboard_options, windowed_kpis
from core.data import SalesDataset, category_frame, load_dashboard_data, sales_frame
from core.errors import DashboardError
from core.filters import FilterSelection, apply_date_range, normalize_filters
from core.metrics import METRICS
from core.series import select_series

CORS_ORIGINS_ENV = "SALES_DASHBOARD_CORS_ORIGINS"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

app = FastAPI(title="Sales Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get(CORS_ORIGINS_ENV, DEFAULT_CORS_ORIGINS).split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _selection_from_model(model: FilterSelectionModel, dataset: SalesDataset) -> FilterSelection:
    return normalize_filters(model.model_dump(), regions=dataset.regions, date_ranges=dataset.date_ranges)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=str(exc), type=type(exc).__name__, field=getattr(exc, "field", None))
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Backend server is running!"


@app.get("/meta/options", response_model=OptionsResponse)
def meta_options():
    try:
        return _json(dashboard_options(load_dashboard_data()))
    except Exception as exc:
        logger.exception("meta_options failed")
        return _error(exc, 500)


@app.post("/dashboard")
def dashboard(filters: FilterSelectionModel):
    try:
        dataset = load_dashboard_data()
        selection = _selection_from_model(filters, dataset)
        return _json(compute_dashboard(dataset, selection))
    except DashboardError as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("dashboard failed")
        return _error(exc, 500)


@app.post("/kpis")
def kpis(filters: FilterSelectionModel):
    try:
        dataset = load_dashboard_data()
        selection = _selection_from_model(filters, dataset)
        return _json({"filters": asdict(selection), "kpis": [asdict(k) for k in windowed_kpis(dataset, selection.date_range)]})
    except DashboardError as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("kpis failed")
        return _error(exc, 500)


@app.get("/series")
def series(
    metric: str = Query(default="revenue"),
    date_range: str = Query(default="Last 6 Months"),
):
    try:
        dataset = load_dashboard_data()
        points = select_series(apply_date_range(dataset.sales, date_range), metric)
        return _json({"metric": metric, "label": METRICS[metric].label, "points": [asdict(p) for p in points]})
    except DashboardError as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("series failed")
        return _error(exc, 500)


@app.get("/categories")
def categories(kind: str = Query(default="pie")):
    try:
        dataset = load_dashboard_data()
        slices = shape_category_view(dataset.categories, kind)
        return _json({"kind": kind, "slices": [asdict(s) for s in slices]})
    except DashboardError as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("categories failed")
        return _error(exc, 500)


@app.post("/export/{page}")
def export_page(page: str, filters: FilterSelectionModel):
    try:
        dataset = load_dashboard_data()
        selection = _selection_from_model(filters, dataset)
        sales = apply_date_range(dataset.sales, selection.date_range)
        if page == "sales":
            export_df = sales_frame(sales)
        elif page == "categories":
            export_df = category_frame(dataset.categories)
        elif page == "kpis":
            export_df = pd.DataFrame([asdict(k) for k in windowed_kpis(dataset, selection.date_range)])
        else:
            return JSONResponse(status_code=404, content={"error": f"Unknown export page: {page}", "type": "NotFound"})
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    except DashboardError as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("export_page failed")
        return _error(exc, 500)

    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={page}.csv"},
    )
