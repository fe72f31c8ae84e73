"""
Metric model - named, scoped values that are either a number or a captured failure.

A metric is created once per analyzer invocation (or read back unchanged from
an AnalyzerContext) and never mutated afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from dq_constraints.core.exceptions import wrap_if_necessary

T = TypeVar("T")


class Entity(str, Enum):
    """Scope a metric was computed over."""

    DATASET = "Dataset"
    COLUMN = "Column"
    MULTICOLUMN = "Multicolumn"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successfully computed value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    def get(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Captured exception in place of a value."""

    exception: BaseException

    @property
    def is_success(self) -> bool:
        return False

    def get(self) -> Any:
        raise self.exception

    @property
    def message(self) -> str:
        return str(self.exception)


MetricValue = Success[Any] | Failure


def try_value(fn: Callable[[], T]) -> Success[T] | Failure:
    """
    Run fn and capture its outcome.

    Args:
        fn: Zero-argument callable producing the value

    Returns:
        Success wrapping the return value, or Failure wrapping the raised exception
    """
    try:
        return Success(fn())
    except Exception as e:
        return Failure(e)


class Metric(ABC, Generic[T]):
    """Common surface of all metrics: entity, instance, name and value."""

    entity: Entity
    name: str
    instance: str
    value: Success[T] | Failure

    @abstractmethod
    def flatten(self) -> list[DoubleMetric]:
        """Break this metric down into plain double metrics."""


@dataclass(frozen=True)
class DoubleMetric(Metric[float]):
    """
    Metric holding a single floating point value.

    Attributes:
        entity: Scope of the metric (dataset, column, multicolumn)
        name: Metric name, e.g. "Completeness"
        instance: Instance name, e.g. the column ("*" for dataset-wide metrics)
        value: Success with the number, or Failure with the exception
    """

    entity: Entity
    name: str
    instance: str
    value: Success[float] | Failure

    def __post_init__(self) -> None:
        if not isinstance(self.value, (Success, Failure)):
            raise TypeError(f"Metric value must be Success or Failure, got {type(self.value).__name__}")

    def flatten(self) -> list[DoubleMetric]:
        return [self]


def metric_from_value(value: float, name: str, instance: str, entity: Entity = Entity.COLUMN) -> DoubleMetric:
    return DoubleMetric(entity, name, instance, Success(value))


def metric_from_failure(
    exception: BaseException, name: str, instance: str, entity: Entity = Entity.COLUMN
) -> DoubleMetric:
    """Build a failure-valued metric, wrapping foreign exceptions."""
    return DoubleMetric(entity, name, instance, Failure(wrap_if_necessary(exception)))
