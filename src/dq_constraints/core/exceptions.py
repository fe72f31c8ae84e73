"""
Exception hierarchy for metric calculation.

Analyzers never let these escape from ``calculate``: they are captured inside
failure-valued metrics and surface later as constraint messages, so the
message of every exception here is part of the user-visible output.
"""


class MetricCalculationException(Exception):
    """Base class for errors raised while computing a metric."""


class MetricCalculationRuntimeException(MetricCalculationException):
    """Wraps a foreign exception, keeping its message verbatim."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.__cause__ = cause


class MetricCalculationPreconditionException(MetricCalculationException):
    """Input data does not satisfy an analyzer precondition."""


class NoSuchColumnException(MetricCalculationPreconditionException):
    pass


class WrongColumnTypeException(MetricCalculationPreconditionException):
    pass


class NoColumnsSpecifiedException(MetricCalculationPreconditionException):
    pass


class EmptyStateException(MetricCalculationException):
    """Metric was requested but no state could be computed (e.g. empty input)."""


class RequirementFailedError(ValueError):
    """Raised by require() when a data requirement does not hold."""


def require(condition: bool, message: str) -> None:
    """
    Assert a requirement on the data being analyzed.

    Args:
        condition: Requirement that must hold
        message: Explanation used when it does not

    Raises:
        RequirementFailedError: With message "requirement failed: {message}"
    """
    if not condition:
        raise RequirementFailedError(f"requirement failed: {message}")


def wrap_if_necessary(exception: BaseException) -> MetricCalculationException:
    """Return exception as a MetricCalculationException, wrapping only foreign errors."""
    if isinstance(exception, MetricCalculationException):
        return exception
    return MetricCalculationRuntimeException(exception)
