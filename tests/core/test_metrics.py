"""
Tests for the metric model - success/failure values with scope and naming metadata.
"""

import pytest

from dq_constraints.core.exceptions import MetricCalculationRuntimeException, NoSuchColumnException
from dq_constraints.core.metrics import (
    DoubleMetric,
    Entity,
    Failure,
    Success,
    metric_from_failure,
    metric_from_value,
    try_value,
)


class TestMetricValue:
    def test_try_value_success_wraps_return_value(self):
        """Test that a returning callable yields Success."""
        # Arrange & Act
        value = try_value(lambda: 0.5)

        # Assert
        assert value == Success(0.5)
        assert value.is_success
        assert value.get() == 0.5

    def test_try_value_failure_captures_exception(self):
        """Test that a raising callable yields Failure with the exception."""

        # Arrange
        def broken() -> float:
            raise ValueError("bad data")

        # Act
        value = try_value(broken)

        # Assert
        assert isinstance(value, Failure)
        assert not value.is_success
        assert value.message == "bad data"
        with pytest.raises(ValueError, match="bad data"):
            value.get()


class TestDoubleMetric:
    def test_double_metric_is_frozen(self):
        """Test that metrics cannot be mutated after construction."""
        # Arrange
        metric = metric_from_value(1.0, "Completeness", "att1")

        # Act & Assert
        with pytest.raises(AttributeError):
            metric.value = Success(2.0)  # type: ignore[misc]

    def test_double_metric_rejects_raw_value(self):
        """Test that the value must be exactly Success or Failure."""
        # Arrange & Act & Assert
        with pytest.raises(TypeError):
            DoubleMetric(Entity.COLUMN, "Completeness", "att1", 1.0)  # type: ignore[arg-type]

    def test_flatten_returns_self(self):
        """Test that a double metric flattens to itself."""
        # Arrange
        metric = metric_from_value(12.0, "Size", "*", Entity.DATASET)

        # Act & Assert
        assert metric.flatten() == [metric]

    def test_metric_from_failure_wraps_foreign_exception(self):
        """Test that foreign exceptions are wrapped with their message kept."""
        # Arrange
        error = KeyError("att1")

        # Act
        metric = metric_from_failure(error, "Completeness", "att1")

        # Assert
        assert isinstance(metric.value.exception, MetricCalculationRuntimeException)
        assert metric.value.exception.__cause__ is error
        assert metric.value.message == str(error)

    def test_metric_from_failure_keeps_calculation_exception(self):
        """Test that calculation exceptions are stored unchanged."""
        # Arrange
        error = NoSuchColumnException("Input data does not include column att9!")

        # Act
        metric = metric_from_failure(error, "Completeness", "att9")

        # Assert
        assert metric.value.exception is error
