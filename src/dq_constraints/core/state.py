"""
Analyzer states - intermediate aggregates that can be merged across partial computations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, TypeVar

S = TypeVar("S", bound="State")


class State(ABC):
    """
    Mergeable intermediate result of an analyzer.

    Subclasses are frozen dataclasses; persistence relies on their fields
    being plain JSON-serializable values.
    """

    @abstractmethod
    def sum(self: S, other: S) -> S:
        """Combine with another state of the same type."""

    def __add__(self: S, other: S) -> S:
        return self.sum(other)

    def to_dict(self) -> dict[str, Any]:
        return {"state_type": type(self).__name__, "fields": asdict(self)}  # type: ignore[call-overload]


class DoubleValuedState(State):
    """State that directly yields a floating point metric value."""

    @abstractmethod
    def metric_value(self) -> float:
        pass


@dataclass(frozen=True)
class NumMatches(DoubleValuedState):
    num_matches: int

    def sum(self, other: NumMatches) -> NumMatches:
        return NumMatches(self.num_matches + other.num_matches)

    def metric_value(self) -> float:
        return float(self.num_matches)


@dataclass(frozen=True)
class NumMatchesAndCount(DoubleValuedState):
    """Matching rows out of all rows; value is the ratio."""

    num_matches: int
    count: int

    def sum(self, other: NumMatchesAndCount) -> NumMatchesAndCount:
        return NumMatchesAndCount(self.num_matches + other.num_matches, self.count + other.count)

    def metric_value(self) -> float:
        if self.count == 0:
            return float("nan")
        return self.num_matches / self.count


@dataclass(frozen=True)
class MeanState(DoubleValuedState):
    total: float
    count: int

    def sum(self, other: MeanState) -> MeanState:
        return MeanState(self.total + other.total, self.count + other.count)

    def metric_value(self) -> float:
        if self.count == 0:
            return float("nan")
        return self.total / self.count


_STATE_TYPES: dict[str, type[State]] = {
    "NumMatches": NumMatches,
    "NumMatchesAndCount": NumMatchesAndCount,
    "MeanState": MeanState,
}


def merge_states(state: S | None, other: S | None) -> S | None:
    """
    Merge two optional states.

    Returns:
        The sum of both when both are present, whichever one is present otherwise,
        None when neither is.
    """
    if state is None:
        return other
    if other is None:
        return state
    return state.sum(other)


def state_from_dict(payload: dict[str, Any]) -> State:
    """
    Rebuild a state from its to_dict() form.

    Raises:
        ValueError: If the state type is unknown or the payload is malformed
    """
    state_type = payload.get("state_type")
    state_cls = _STATE_TYPES.get(state_type) if isinstance(state_type, str) else None
    if state_cls is None:
        raise ValueError(f"Unknown state type: {state_type!r}")

    fields = payload.get("fields")
    if not isinstance(fields, dict):
        raise ValueError(f"Missing fields for state type {state_type}")

    try:
        return state_cls(**fields)
    except TypeError as e:
        raise ValueError(f"Invalid fields for state type {state_type}: {e}") from e
