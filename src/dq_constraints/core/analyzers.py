"""
Analyzers - units of computation mapping a dataset to a state and a state to a metric.

Every analyzer is identified by its defining fields: concrete analyzers are
frozen dataclasses, so two instances over the same column are equal and hash
the same. That identity is what AnalyzerContext lookups rely on.

calculate() never raises. Any error while validating or scanning the data is
converted into a failure-valued metric through the analyzer's own
to_failure_metric().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import pandas as pd
import polars as pl
import structlog

from dq_constraints.core.exceptions import EmptyStateException
from dq_constraints.core.metrics import DoubleMetric, Entity, Metric, metric_from_failure, metric_from_value
from dq_constraints.core.preconditions import Precondition, has_column, is_numeric
from dq_constraints.core.state import (
    DoubleValuedState,
    MeanState,
    NumMatches,
    NumMatchesAndCount,
    State,
    merge_states,
)
from dq_constraints.core.state_provider import StateLoader, StatePersister

logger = structlog.get_logger(__name__)

S = TypeVar("S", bound=State)
M = TypeVar("M", bound=Metric[Any])
DS = TypeVar("DS", bound=DoubleValuedState)

DataFrameLike = pl.DataFrame | pd.DataFrame


def as_polars(data: DataFrameLike) -> pl.DataFrame:
    """Return data as a Polars DataFrame, converting pandas input."""
    if isinstance(data, pd.DataFrame):
        return pl.from_pandas(data)
    return data


class Analyzer(ABC, Generic[S, M]):
    """
    Abstract base for all analyzers.

    Type parameters:
        S: State computed from the data
        M: Metric computed from the state
    """

    @abstractmethod
    def compute_state_from(self, data: pl.DataFrame) -> S | None:
        """
        Scan the data and compute this analyzer's state.

        Returns:
            State, or None when there is nothing to aggregate (e.g. empty input)
        """
        pass

    @abstractmethod
    def compute_metric_from(self, state: S | None) -> M:
        """Compute the metric from a (possibly absent) state."""
        pass

    @abstractmethod
    def to_failure_metric(self, exception: Exception) -> M:
        """Represent a failure of this analyzer as a failure-valued metric."""
        pass

    def preconditions(self) -> list[Precondition]:
        """Schema checks to run before scanning the data."""
        return []

    def calculate(
        self,
        data: DataFrameLike,
        aggregate_with: StateLoader | None = None,
        save_states_with: StatePersister | None = None,
    ) -> M:
        """
        Compute the metric for this analyzer on the given data.

        Args:
            data: Polars (or pandas) DataFrame to analyze
            aggregate_with: Optional loader whose stored state is merged into the fresh one
            save_states_with: Optional persister receiving the merged state

        Returns:
            Metric; a failure-valued one if anything went wrong
        """
        try:
            frame = as_polars(data)
            for condition in self.preconditions():
                condition(frame.schema)

            state = self.compute_state_from(frame)
            return self.calculate_metric(state, aggregate_with, save_states_with)
        except Exception as e:
            logger.debug("analyzer_failed", analyzer=repr(self), error=str(e), error_type=type(e).__name__)
            return self.to_failure_metric(e)

    def calculate_metric(
        self,
        state: S | None,
        aggregate_with: StateLoader | None = None,
        save_states_with: StatePersister | None = None,
    ) -> M:
        """
        Merge a stored state into state, persist the result and compute the metric.

        Args:
            state: Freshly computed state (may be None)
            aggregate_with: Optional loader for a previously stored state
            save_states_with: Optional persister for the merged state

        Returns:
            Metric computed from the merged state
        """
        loaded_state = aggregate_with.load(self) if aggregate_with is not None else None
        state_to_compute_metric_from = merge_states(state, loaded_state)

        if state_to_compute_metric_from is not None and save_states_with is not None:
            save_states_with.persist(self, state_to_compute_metric_from)

        return self.compute_metric_from(state_to_compute_metric_from)


class ScanShareableAnalyzer(Analyzer[DS, DoubleMetric]):
    """
    Analyzer whose state directly yields a double value.

    Subclasses define entity, name and instance; metric construction and
    failure handling are shared.
    """

    entity: Entity = Entity.COLUMN

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def instance(self) -> str:
        pass

    def compute_metric_from(self, state: DS | None) -> DoubleMetric:
        if state is None:
            return self.to_failure_metric(
                EmptyStateException(f"Empty state for analyzer {self!r}, all input values were NULL.")
            )
        return metric_from_value(state.metric_value(), self.name, self.instance, self.entity)

    def to_failure_metric(self, exception: Exception) -> DoubleMetric:
        return metric_from_failure(exception, self.name, self.instance, self.entity)


@dataclass(frozen=True)
class Size(ScanShareableAnalyzer[NumMatches]):
    """Number of rows in the dataset."""

    entity = Entity.DATASET

    @property
    def name(self) -> str:
        return "Size"

    @property
    def instance(self) -> str:
        return "*"

    def compute_state_from(self, data: pl.DataFrame) -> NumMatches | None:
        return NumMatches(data.height)


@dataclass(frozen=True)
class Completeness(ScanShareableAnalyzer[NumMatchesAndCount]):
    """Fraction of non-null values in a column."""

    column: str

    @property
    def name(self) -> str:
        return "Completeness"

    @property
    def instance(self) -> str:
        return self.column

    def preconditions(self) -> list[Precondition]:
        return [has_column(self.column)]

    def compute_state_from(self, data: pl.DataFrame) -> NumMatchesAndCount | None:
        if data.height == 0:
            return None
        non_null = data.height - data.get_column(self.column).null_count()
        return NumMatchesAndCount(non_null, data.height)


@dataclass(frozen=True)
class Mean(ScanShareableAnalyzer[MeanState]):
    """Mean of the non-null values of a numeric column."""

    column: str

    @property
    def name(self) -> str:
        return "Mean"

    @property
    def instance(self) -> str:
        return self.column

    def preconditions(self) -> list[Precondition]:
        return [has_column(self.column), is_numeric(self.column)]

    def compute_state_from(self, data: pl.DataFrame) -> MeanState | None:
        series = data.get_column(self.column).drop_nulls()
        if series.len() == 0:
            return None
        return MeanState(float(series.sum()), series.len())
