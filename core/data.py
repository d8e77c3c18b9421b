from __future__ import annotations

import logging
import math
import os
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from core.errors import InvalidRecord

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "SALES_DASHBOARD_DATA_DIR"
SALES_FILE = "sales.csv"
CATEGORIES_FILE = "categories.csv"

SALES_FIELDS = ["period", "revenue", "orders", "customers"]
CATEGORY_FIELDS = ["name", "share_of_total", "sales_amount"]

# Header aliases, matched case-insensitively.
SALES_COLUMNS = {
    "month": "period",
    "period": "period",
    "revenue": "revenue",
    "net revenue": "revenue",
    "orders": "orders",
    "order count": "orders",
    "customers": "customers",
    "customer count": "customers",
}

CATEGORY_COLUMNS = {
    "name": "name",
    "category": "name",
    "value": "share_of_total",
    "share": "share_of_total",
    "share_of_total": "share_of_total",
    "share %": "share_of_total",
    "sales": "sales_amount",
    "sales_amount": "sales_amount",
}

DEFAULT_REGIONS = ("All Regions", "North America", "Europe", "Asia", "South America")
DEFAULT_DATE_RANGES = ("Last 6 Months", "Last 3 Months", "Last Month", "Last Year")


def _is_amount(value: object) -> bool:
    """Finite and non-negative."""
    if value is None or pd.isna(value):
        return False
    return math.isfinite(value) and value >= 0


@dataclass(frozen=True)
class SalesRecord:
    period: str
    revenue: float
    orders: int
    customers: int

    def __post_init__(self) -> None:
        if not _is_amount(self.revenue):
            raise InvalidRecord(f"{self.period}: revenue must be a finite non-negative number, got {self.revenue!r}")
        for name in ("orders", "customers"):
            value = getattr(self, name)
            if not _is_amount(value) or not float(value).is_integer():
                raise InvalidRecord(f"{self.period}: {name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class CategoryRecord:
    name: str
    share_of_total: float
    sales_amount: float

    def __post_init__(self) -> None:
        if not _is_amount(self.share_of_total) or self.share_of_total > 100:
            raise InvalidRecord(f"{self.name}: share_of_total must be within [0, 100], got {self.share_of_total!r}")
        if not _is_amount(self.sales_amount):
            raise InvalidRecord(f"{self.name}: sales_amount must be a finite non-negative number, got {self.sales_amount!r}")


@dataclass(frozen=True)
class SalesDataset:
    sales: Tuple[SalesRecord, ...] = ()
    categories: Tuple[CategoryRecord, ...] = ()
    regions: Tuple[str, ...] = DEFAULT_REGIONS
    date_ranges: Tuple[str, ...] = DEFAULT_DATE_RANGES
    kpi_changes: Optional[Mapping[str, str]] = field(default=None, compare=False)


def generate_sample_data() -> SalesDataset:
    """Compiled-in sample dataset used when no data directory is configured."""
    return SalesDataset(
        sales=(
            SalesRecord("Jan", 45000, 120, 85),
            SalesRecord("Feb", 52000, 145, 98),
            SalesRecord("Mar", 48000, 132, 91),
            SalesRecord("Apr", 61000, 168, 112),
            SalesRecord("May", 55000, 151, 103),
            SalesRecord("Jun", 67000, 189, 128),
        ),
        categories=(
            CategoryRecord("Electronics", 35, 125000),
            CategoryRecord("Clothing", 25, 89000),
            CategoryRecord("Food", 20, 71000),
            CategoryRecord("Books", 12, 43000),
            CategoryRecord("Other", 8, 28000),
        ),
        kpi_changes={
            "revenue": "+12.5%",
            "orders": "+8.2%",
            "customers": "+15.3%",
            "avg_order_value": "+4.1%",
        },
    )


def sales_frame(records: Sequence[SalesRecord]) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in records], columns=SALES_FIELDS)


def category_frame(records: Sequence[CategoryRecord]) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in records], columns=CATEGORY_FIELDS)


# ---------- CSV loading ----------


def get_data_dir() -> Optional[Path]:
    raw = os.environ.get(DATA_DIR_ENV, "").strip()
    return Path(raw) if raw else None


def get_source_files(data_dir: Path) -> List[Path]:
    return [p for p in (data_dir / SALES_FILE, data_dir / CATEGORIES_FILE) if p.is_file()]


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((f.name, f.stat().st_mtime) for f in files)


def canonicalize_columns(df: pd.DataFrame, aliases: Dict[str, str]) -> pd.DataFrame:
    renamed = {c: aliases.get(str(c).strip().lower(), str(c).strip().lower()) for c in df.columns}
    df = df.rename(columns=renamed)
    return df.loc[:, ~df.columns.duplicated()]


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            series = series.replace({"nan": pd.NA, "None": pd.NA, "": pd.NA})
            df[col] = series
    return df


def _prepare_frame(
    path: Path,
    aliases: Dict[str, str],
    fields: List[str],
    numeric: List[str],
    label_col: str,
    integral: Sequence[str] = (),
) -> pd.DataFrame:
    df = canonicalize_columns(pd.read_csv(path), aliases)
    missing = [c for c in fields if c not in df.columns]
    if missing:
        raise InvalidRecord(f"{path.name} is missing columns: {', '.join(missing)}")
    df = df[fields].copy()
    df = numericize(df, numeric)
    df = coerce_str_safe(df, [label_col])
    valid = df.dropna(subset=fields)
    values = valid[numeric].astype(float)
    keep = (np.isfinite(values) & (values >= 0)).all(axis=1)
    if integral:
        keep &= (values[list(integral)] % 1 == 0).all(axis=1)
    valid = valid[keep]
    dropped = len(df) - len(valid)
    if dropped:
        logger.warning("Dropped %d invalid row(s) from %s", dropped, path.name)
    return valid


def load_sales_csv(path: Path) -> Tuple[SalesRecord, ...]:
    df = _prepare_frame(
        path,
        SALES_COLUMNS,
        SALES_FIELDS,
        ["revenue", "orders", "customers"],
        "period",
        integral=["orders", "customers"],
    )
    return tuple(
        SalesRecord(str(r.period), float(r.revenue), int(r.orders), int(r.customers))
        for r in df.itertuples(index=False)
    )


def load_categories_csv(path: Path) -> Tuple[CategoryRecord, ...]:
    df = _prepare_frame(path, CATEGORY_COLUMNS, CATEGORY_FIELDS, ["share_of_total", "sales_amount"], "name")
    df = df[df["share_of_total"] <= 100]
    df = df.drop_duplicates(subset=["name"], keep="first")
    return tuple(
        CategoryRecord(str(r.name), float(r.share_of_total), float(r.sales_amount))
        for r in df.itertuples(index=False)
    )


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(data_dir: str, files_sig: Tuple[Tuple[str, float], ...]) -> SalesDataset:
    base = Path(data_dir)
    names = {name for name, _ in files_sig}
    logger.info("Loading dashboard data from %s (%s)", base, ", ".join(sorted(names)))
    sales = load_sales_csv(base / SALES_FILE)
    categories = load_categories_csv(base / CATEGORIES_FILE) if CATEGORIES_FILE in names else ()
    return SalesDataset(sales=sales, categories=categories)


def load_dashboard_data() -> SalesDataset:
    data_dir = get_data_dir()
    if data_dir is None:
        return generate_sample_data()
    files = get_source_files(data_dir)
    if not any(f.name == SALES_FILE for f in files):
        logger.warning("No %s found in %s; using sample data", SALES_FILE, data_dir)
        return generate_sample_data()
    return _load_dashboard_data_cached(str(data_dir), file_signature(files))
