"""
AnalyzerContext - immutable snapshot of analyzer -> metric results.

Produced by a batch analysis run and handed to constraints for evaluation.
Lookups are by analyzer equality, so any analyzer instance with the same
defining fields finds the stored metric.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

import polars as pl
import structlog

from dq_constraints.core.analyzers import Analyzer, DataFrameLike
from dq_constraints.core.metrics import Metric
from dq_constraints.core.state_provider import StateLoader, StatePersister

logger = structlog.get_logger(__name__)


class AnalyzerContext(Mapping[Analyzer[Any, Any], Metric[Any]]):
    """Read-only mapping from analyzer to its computed metric."""

    def __init__(self, metric_map: Mapping[Analyzer[Any, Any], Metric[Any]] | None = None) -> None:
        # Private copy so later changes to the caller's dict are not visible
        self._metric_map = MappingProxyType(dict(metric_map or {}))

    @classmethod
    def empty(cls) -> AnalyzerContext:
        return cls()

    @classmethod
    def run_analyzers(
        cls,
        data: DataFrameLike,
        analyzers: Iterable[Analyzer[Any, Any]],
        aggregate_with: StateLoader | None = None,
        save_states_with: StatePersister | None = None,
    ) -> AnalyzerContext:
        """
        Calculate each distinct analyzer once and collect the results.

        Args:
            data: DataFrame to analyze
            analyzers: Analyzers to run (duplicates by equality are computed once)
            aggregate_with: Optional state loader passed to every analyzer
            save_states_with: Optional state persister passed to every analyzer

        Returns:
            AnalyzerContext holding one metric per distinct analyzer
        """
        metrics: dict[Analyzer[Any, Any], Metric[Any]] = {}
        for analyzer in analyzers:
            if analyzer in metrics:
                continue
            metrics[analyzer] = analyzer.calculate(data, aggregate_with, save_states_with)

        logger.debug("analyzers_run", num_analyzers=len(metrics))
        return cls(metrics)

    def __getitem__(self, analyzer: Analyzer[Any, Any]) -> Metric[Any]:
        return self._metric_map[analyzer]

    def __iter__(self) -> Iterator[Analyzer[Any, Any]]:
        return iter(self._metric_map)

    def __len__(self) -> int:
        return len(self._metric_map)

    def __add__(self, other: AnalyzerContext) -> AnalyzerContext:
        """Combine two contexts; metrics from other win on duplicate analyzers."""
        return AnalyzerContext({**self._metric_map, **other._metric_map})

    def __repr__(self) -> str:
        return f"AnalyzerContext({dict(self._metric_map)!r})"

    def metric(self, analyzer: Analyzer[Any, Any]) -> Metric[Any] | None:
        return self._metric_map.get(analyzer)

    def all_metrics(self) -> list[Metric[Any]]:
        return list(self._metric_map.values())

    def success_metrics_as_dataframe(self) -> pl.DataFrame:
        """
        Successful metrics as a Polars DataFrame.

        Returns:
            DataFrame with columns entity, instance, name, value
        """
        rows = [
            {
                "entity": double_metric.entity.value,
                "instance": double_metric.instance,
                "name": double_metric.name,
                "value": double_metric.value.get(),
            }
            for metric in self._metric_map.values()
            for double_metric in metric.flatten()
            if double_metric.value.is_success
        ]
        schema = {"entity": pl.Utf8, "instance": pl.Utf8, "name": pl.Utf8, "value": pl.Float64}
        return pl.DataFrame(rows, schema=schema)
