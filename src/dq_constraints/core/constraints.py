"""
Constraints - analyzers bound to a pass/fail assertion on their metric value.

Evaluation never raises. Every failure mode ends up as a FAILURE
ConstraintResult whose message is one of:

- the analyzer's own error message, verbatim (data computation failed)
- MISSING_ANALYSIS (analyzer absent from the supplied results)
- PROBLEMATIC_METRIC_PICKER prefix (value picker raised)
- ASSERTION_EXCEPTION prefix (assertion raised)
- the "Value: ... does not meet the constraint requirement!" report,
  optionally followed by the hint (assertion returned False)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, TypeVar

import structlog

from dq_constraints.core import messages
from dq_constraints.core.analyzers import Analyzer, Completeness, DataFrameLike, Mean, Size
from dq_constraints.core.metrics import Metric

logger = structlog.get_logger(__name__)

V = TypeVar("V")

AnalysisResults = Mapping[Analyzer[Any, Any], Metric[Any]]


class ConstraintStatus(str, Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"


@dataclass(frozen=True)
class ConstraintResult:
    """
    Immutable outcome of evaluating a constraint.

    Attributes:
        constraint: Constraint that was evaluated
        status: SUCCESS or FAILURE
        message: Failure explanation; None exactly when status is SUCCESS
        metric: Metric the judgment was based on, if one was obtained
    """

    constraint: Constraint
    status: ConstraintStatus
    message: str | None = None
    metric: Metric[Any] | None = None

    def __post_init__(self) -> None:
        if self.status == ConstraintStatus.SUCCESS and self.message is not None:
            raise ValueError("Successful constraint result must not carry a message")
        if self.status == ConstraintStatus.FAILURE and self.message is None:
            raise ValueError("Failed constraint result must carry a message")


class Constraint(ABC):
    """Common interface of all constraints."""

    @abstractmethod
    def evaluate(self, analysis_results: AnalysisResults) -> ConstraintResult:
        """
        Judge this constraint against previously computed metrics.

        Args:
            analysis_results: Mapping from analyzer to metric, usually an AnalyzerContext

        Returns:
            ConstraintResult
        """
        pass


class ConstraintDecorator(Constraint):
    """Wraps another constraint and reports its results as its own."""

    def __init__(self, inner: Constraint) -> None:
        self._inner = inner

    @property
    def inner(self) -> Constraint:
        """Innermost non-decorator constraint."""
        constraint = self._inner
        while isinstance(constraint, ConstraintDecorator):
            constraint = constraint._inner
        return constraint

    def evaluate(self, analysis_results: AnalysisResults) -> ConstraintResult:
        return replace(self._inner.evaluate(analysis_results), constraint=self)


class NamedConstraint(ConstraintDecorator):
    def __init__(self, constraint: Constraint, name: str) -> None:
        super().__init__(constraint)
        self.name = name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"NamedConstraint({self.name!r})"


class AnalysisBasedConstraint(Constraint, Generic[V]):
    """
    Constraint judged on the metric of a single analyzer.

    The metric value is optionally transformed by value_picker before the
    assertion runs. The hint is appended only to the message of a failed
    assertion.
    """

    def __init__(
        self,
        analyzer: Analyzer[Any, Any],
        assertion: Callable[[V], bool],
        value_picker: Callable[[Any], V] | None = None,
        hint: str | None = None,
    ) -> None:
        """
        Args:
            analyzer: Analyzer producing the metric to judge
            assertion: Predicate over the (picked) metric value
            value_picker: Optional transform applied to the metric value first
            hint: Optional explanation appended to assertion failure messages
        """
        self.analyzer = analyzer
        self.assertion = assertion
        self.value_picker = value_picker
        self.hint = hint

    def __repr__(self) -> str:
        return f"AnalysisBasedConstraint({self.analyzer!r})"

    def calculate_and_evaluate(self, data: DataFrameLike) -> ConstraintResult:
        """
        Compute the analyzer's metric on data and judge it.

        No state is loaded or persisted.
        """
        metric = self.analyzer.calculate(data)
        return self._pick_value_and_assert(metric)

    def evaluate(self, analysis_results: AnalysisResults) -> ConstraintResult:
        metric = analysis_results.get(self.analyzer)

        if metric is None:
            logger.debug("constraint_missing_analysis", analyzer=repr(self.analyzer))
            return ConstraintResult(self, ConstraintStatus.FAILURE, messages.missing_analysis())

        return self._pick_value_and_assert(metric)

    def _pick_value_and_assert(self, metric: Metric[Any]) -> ConstraintResult:
        if not metric.value.is_success:
            logger.debug("constraint_metric_failed", analyzer=repr(self.analyzer), error=metric.value.message)
            return self._failure(metric.value.message, metric)

        metric_value = metric.value.get()

        if self.value_picker is not None:
            try:
                assert_on = self.value_picker(metric_value)
            except Exception as e:
                logger.debug("constraint_picker_failed", analyzer=repr(self.analyzer), error=str(e))
                return self._failure(messages.picker_failed(e), metric)
        else:
            assert_on = metric_value

        try:
            assertion_ok = bool(self.assertion(assert_on))
        except Exception as e:
            logger.debug("constraint_assertion_raised", analyzer=repr(self.analyzer), error=str(e))
            return self._failure(messages.assertion_raised(e), metric)

        if assertion_ok:
            return ConstraintResult(self, ConstraintStatus.SUCCESS, metric=metric)

        return self._failure(messages.assertion_failed(assert_on, self.hint), metric)

    def _failure(self, message: str, metric: Metric[Any]) -> ConstraintResult:
        return ConstraintResult(self, ConstraintStatus.FAILURE, message, metric)


def calculate(constraint: Constraint, data: DataFrameLike) -> ConstraintResult:
    """
    Evaluate a constraint directly on data, unwrapping decorators.

    Raises:
        TypeError: If the constraint is not analysis based
    """
    inner = constraint.inner if isinstance(constraint, ConstraintDecorator) else constraint
    if not isinstance(inner, AnalysisBasedConstraint):
        raise TypeError(f"Cannot calculate {type(inner).__name__} directly on data")

    return replace(inner.calculate_and_evaluate(data), constraint=constraint)


def size_constraint(assertion: Callable[[float], bool], hint: str | None = None) -> Constraint:
    """Constraint on the number of rows."""
    size = Size()
    constraint = AnalysisBasedConstraint[float](size, assertion, hint=hint)
    return NamedConstraint(constraint, f"SizeConstraint({size!r})")


def completeness_constraint(column: str, assertion: Callable[[float], bool], hint: str | None = None) -> Constraint:
    """Constraint on the fraction of non-null values in column."""
    completeness = Completeness(column)
    constraint = AnalysisBasedConstraint[float](completeness, assertion, hint=hint)
    return NamedConstraint(constraint, f"CompletenessConstraint({completeness!r})")


def mean_constraint(column: str, assertion: Callable[[float], bool], hint: str | None = None) -> Constraint:
    """Constraint on the mean of a numeric column."""
    mean = Mean(column)
    constraint = AnalysisBasedConstraint[float](mean, assertion, hint=hint)
    return NamedConstraint(constraint, f"MeanConstraint({mean!r})")
