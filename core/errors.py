from __future__ import annotations


class DashboardError(ValueError):
    """Base class for recoverable dashboard input errors."""


class InvalidMetricKey(DashboardError):
    def __init__(self, key: object):
        super().__init__(f"Unknown metric: {key!r}")
        self.key = key


class InvalidChartKind(DashboardError):
    def __init__(self, kind: object, allowed: tuple[str, ...] = ()):
        msg = f"Unknown chart kind: {kind!r}"
        if allowed:
            msg += f" (expected one of {', '.join(allowed)})"
        super().__init__(msg)
        self.kind = kind


class InvalidFilterValue(DashboardError):
    def __init__(self, field: str, value: object):
        super().__init__(f"Invalid value for {field}: {value!r}")
        self.field = field
        self.value = value


class InvalidRecord(DashboardError):
    pass
