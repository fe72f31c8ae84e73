"""Data-quality constraint evaluation: analyzers, metrics and analysis-based constraints."""

from dq_constraints.core.analyzer_context import AnalyzerContext
from dq_constraints.core.analyzers import Analyzer, Completeness, Mean, Size
from dq_constraints.core.constraints import (
    AnalysisBasedConstraint,
    Constraint,
    ConstraintResult,
    ConstraintStatus,
    NamedConstraint,
    calculate,
)
from dq_constraints.core.metrics import DoubleMetric, Entity, Failure, Success

__all__ = [
    "AnalysisBasedConstraint",
    "Analyzer",
    "AnalyzerContext",
    "calculate",
    "Completeness",
    "Constraint",
    "ConstraintResult",
    "ConstraintStatus",
    "DoubleMetric",
    "Entity",
    "Failure",
    "Mean",
    "NamedConstraint",
    "Size",
    "Success",
]
