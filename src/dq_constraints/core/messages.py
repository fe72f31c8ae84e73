"""
Constraint messages - centralized failure message taxonomy.

Downstream reports match on these strings, so the text must stay stable.
"""

# Analyzer is not present in the supplied analysis results
MISSING_ANALYSIS = "Missing Analysis, can't run the constraint!"

# Value picker raised while transforming the metric value
PROBLEMATIC_METRIC_PICKER = "Can't retrieve the value to assert on"

# Assertion raised instead of returning a bool
ASSERTION_EXCEPTION = "Can't execute the assertion"

# Assertion returned False
ASSERTION_FAILED = "Value: {value} does not meet the constraint requirement!"


def missing_analysis() -> str:
    return MISSING_ANALYSIS


def picker_failed(error: BaseException) -> str:
    return f"{PROBLEMATIC_METRIC_PICKER}: {error}!"


def assertion_raised(error: BaseException) -> str:
    return f"{ASSERTION_EXCEPTION}: {error}!"


def assertion_failed(value: object, hint: str | None = None) -> str:
    """Value report for a failed assertion, with the hint appended when given."""
    message = ASSERTION_FAILED.format(value=value)
    if hint is not None:
        message += f" {hint}"
    return message
