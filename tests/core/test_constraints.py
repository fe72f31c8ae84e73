"""
Tests for constraint results, decorators and constraint factories.
"""

import pytest

from dq_constraints.core import messages
from dq_constraints.core.analyzer_context import AnalyzerContext
from dq_constraints.core.analyzers import Completeness, Mean, Size
from dq_constraints.core.constraints import (
    AnalysisBasedConstraint,
    Constraint,
    ConstraintResult,
    ConstraintStatus,
    NamedConstraint,
    calculate,
    completeness_constraint,
    mean_constraint,
    size_constraint,
)


class TestConstraintResult:
    def test_success_with_message_is_rejected(self):
        """Test that a successful result cannot carry a message."""
        # Arrange
        constraint = AnalysisBasedConstraint(Size(), lambda v: True)

        # Act & Assert
        with pytest.raises(ValueError):
            ConstraintResult(constraint, ConstraintStatus.SUCCESS, message="unexpected")

    def test_failure_without_message_is_rejected(self):
        """Test that a failed result must carry a message."""
        # Arrange
        constraint = AnalysisBasedConstraint(Size(), lambda v: True)

        # Act & Assert
        with pytest.raises(ValueError):
            ConstraintResult(constraint, ConstraintStatus.FAILURE)

    def test_result_is_frozen(self):
        # Arrange
        constraint = AnalysisBasedConstraint(Size(), lambda v: True)
        result = ConstraintResult(constraint, ConstraintStatus.SUCCESS)

        # Act & Assert
        with pytest.raises(AttributeError):
            result.status = ConstraintStatus.FAILURE  # type: ignore[misc]


class TestNamedConstraint:
    def test_named_constraint_reports_result_as_its_own(self, df_missing):
        """Test that the decorator re-attributes the inner result."""
        # Arrange
        inner = AnalysisBasedConstraint(Completeness("att1"), lambda v: v == 0.5)
        named = NamedConstraint(inner, "att1 is half complete")
        context = AnalyzerContext.run_analyzers(df_missing, [Completeness("att1")])

        # Act
        result = named.evaluate(context)

        # Assert
        assert result.status == ConstraintStatus.SUCCESS
        assert result.constraint is named
        assert str(named) == "att1 is half complete"
        assert named.inner is inner

    def test_nested_decorators_unwrap_to_innermost(self):
        # Arrange
        inner = AnalysisBasedConstraint(Size(), lambda v: True)

        # Act
        nested = NamedConstraint(NamedConstraint(inner, "inner name"), "outer name")

        # Assert
        assert nested.inner is inner


class TestCalculate:
    def test_calculate_unwraps_named_constraint(self, df_missing):
        """Test that calculate computes the inner analysis on the data."""
        # Arrange
        constraint = NamedConstraint(AnalysisBasedConstraint(Size(), lambda v: v == 12.0), "twelve rows")

        # Act
        result = calculate(constraint, df_missing)

        # Assert
        assert result.status == ConstraintStatus.SUCCESS
        assert result.constraint is constraint

    def test_calculate_rejects_non_analysis_constraint(self, df_missing):
        """Test that calculate refuses constraints it cannot compute directly."""

        # Arrange
        class AlwaysFailing(Constraint):
            def evaluate(self, analysis_results):
                return ConstraintResult(self, ConstraintStatus.FAILURE, "always")

        # Act & Assert
        with pytest.raises(TypeError):
            calculate(AlwaysFailing(), df_missing)


class TestConstraintFactories:
    def test_size_constraint(self, df_missing):
        # Arrange
        constraint = size_constraint(lambda v: v == 12.0)

        # Act
        result = calculate(constraint, df_missing)

        # Assert
        assert result.status == ConstraintStatus.SUCCESS
        assert str(constraint) == "SizeConstraint(Size())"

    def test_completeness_constraint_failure_with_hint(self, df_missing):
        """Test that a failed completeness check reports the value and the hint."""
        # Arrange
        constraint = completeness_constraint("att1", lambda v: v >= 0.9, hint="att1 should be mostly filled")

        # Act
        result = calculate(constraint, df_missing)

        # Assert
        assert result.status == ConstraintStatus.FAILURE
        assert result.message == (
            "Value: 0.5 does not meet the constraint requirement! att1 should be mostly filled"
        )
        assert str(constraint) == "CompletenessConstraint(Completeness(column='att1'))"

    def test_completeness_constraint_missing_column(self, df_missing):
        """Test that the precondition failure message is propagated verbatim."""
        # Arrange
        constraint = completeness_constraint("someMissingColumn", lambda v: v == 1.0)

        # Act
        result = calculate(constraint, df_missing)

        # Assert
        assert result.status == ConstraintStatus.FAILURE
        assert result.message == "Input data does not include column someMissingColumn!"

    def test_mean_constraint_evaluated_from_context(self, df_numeric):
        # Arrange
        constraint = mean_constraint("att1", lambda v: 3.0 < v < 4.0)
        context = AnalyzerContext.run_analyzers(df_numeric, [Mean("att1")])

        # Act
        result = constraint.evaluate(context)

        # Assert
        assert result.status == ConstraintStatus.SUCCESS
        assert result.metric is context[Mean("att1")]

    def test_factory_constraint_missing_from_context(self, df_numeric):
        # Arrange
        constraint = mean_constraint("att1", lambda v: True)
        context = AnalyzerContext.run_analyzers(df_numeric, [Size()])

        # Act
        result = constraint.evaluate(context)

        # Assert
        assert result.status == ConstraintStatus.FAILURE
        assert result.message == messages.MISSING_ANALYSIS
