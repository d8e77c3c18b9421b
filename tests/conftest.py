"""
Shared pytest fixtures for the sales dashboard tests.

Provides the compiled-in sample dataset, small hand-built record lists, and
an isolated data directory for CSV loading tests.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core import data as data_module  # noqa: E402
from core.data import CategoryRecord, SalesRecord, generate_sample_data  # noqa: E402


@pytest.fixture
def sample_dataset():
    return generate_sample_data()


@pytest.fixture
def two_months():
    return [
        SalesRecord("Jan", 45000, 120, 85),
        SalesRecord("Feb", 52000, 145, 98),
    ]


@pytest.fixture
def seven_categories():
    return [
        CategoryRecord(name, share, sales)
        for name, share, sales in [
            ("Electronics", 30, 100000),
            ("Clothing", 20, 80000),
            ("Food", 15, 60000),
            ("Books", 10, 40000),
            ("Toys", 10, 35000),
            ("Garden", 10, 30000),
            ("Other", 5, 10000),
        ]
    ]


@pytest.fixture(autouse=True)
def isolated_data_dir(monkeypatch):
    """Every test starts on the sample dataset with an empty loader cache."""
    monkeypatch.delenv(data_module.DATA_DIR_ENV, raising=False)
    data_module._load_dashboard_data_cached.cache_clear()
    yield
    data_module._load_dashboard_data_cached.cache_clear()
