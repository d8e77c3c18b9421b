"""Core (UI-agnostic) sales dashboard logic.

This package contains:
- the sales dataset model, sample data and CSV loading
- filter normalization
- KPI aggregation and chart-data shaping (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
