"""Sources of aggregate KPI values."""

from collections.abc import Mapping
from typing import Any
from typing import Protocol

from .exceptions import UnknownMetricError


class MetricsProvider(Protocol):
    """Computes an aggregate KPI family, typically with database queries."""

    async def compute(self, family: str, params: Mapping[str, str]) -> dict[str, Any]: ...


class StaticMetricsProvider:
    """Serves fixed KPI values; used for local development and tests."""

    def __init__(self, values: Mapping[str, Mapping[str, Any]]) -> None:
        self.values = {family: dict(kpis) for family, kpis in values.items()}
        self.calls = 0

    async def compute(self, family: str, params: Mapping[str, str]) -> dict[str, Any]:
        if family not in self.values:
            msg = f"Unknown KPI family: {family}"
            raise UnknownMetricError(msg)
        self.calls += 1
        return {"family": family, "params": dict(params), "values": dict(self.values[family])}
