"""Schema preconditions checked by analyzers before any data is scanned."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from dq_constraints.core.exceptions import (
    NoColumnsSpecifiedException,
    NoSuchColumnException,
    WrongColumnTypeException,
)

# Polars schema: column name -> dtype
Schema = Mapping[str, Any]
Precondition = Callable[[Schema], None]


def has_column(column: str) -> Precondition:
    """Require that the column exists."""

    def check(schema: Schema) -> None:
        if column not in schema:
            raise NoSuchColumnException(f"Input data does not include column {column}!")

    return check


def is_numeric(column: str) -> Precondition:
    """Require that the column has a numeric dtype."""

    def check(schema: Schema) -> None:
        dtype = schema[column]
        if not dtype.is_numeric():
            raise WrongColumnTypeException(
                f"Expected type of column {column} to be numeric, but found {dtype} instead!"
            )

    return check


def at_least_one(columns: Sequence[str]) -> Precondition:
    def check(schema: Schema) -> None:
        if not columns:
            raise NoColumnsSpecifiedException("At least one column needs to be specified!")

    return check
