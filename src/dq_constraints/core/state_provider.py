"""
StateLoader / StatePersister - pluggable storage for analyzer states.

Analyzers can merge a previously stored state into a fresh computation
(aggregate_with) and store the combined state for later runs (save_states_with).
Both collaborators are optional; passing neither means "compute from scratch,
do not persist".
"""

from __future__ import annotations

import hashlib
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from dq_constraints.core.state import State, state_from_dict

if TYPE_CHECKING:
    from dq_constraints.core.analyzers import Analyzer

logger = structlog.get_logger(__name__)


class StateLoader(ABC):
    """Source of previously computed analyzer states."""

    @abstractmethod
    def load(self, analyzer: Analyzer[Any, Any]) -> State | None:
        """
        Load the stored state for an analyzer.

        Args:
            analyzer: Analyzer whose state is requested

        Returns:
            Stored state, or None if nothing is stored
        """
        pass


class StatePersister(ABC):
    """Sink for analyzer states."""

    @abstractmethod
    def persist(self, analyzer: Analyzer[Any, Any], state: State) -> None:
        """
        Store the state computed by an analyzer.

        Args:
            analyzer: Analyzer that produced the state
            state: State to store
        """
        pass


class InMemoryStateProvider(StateLoader, StatePersister):
    """Keeps states in a dict keyed by analyzer equality."""

    def __init__(self) -> None:
        self._states: dict[Analyzer[Any, Any], State] = {}

    def load(self, analyzer: Analyzer[Any, Any]) -> State | None:
        return self._states.get(analyzer)

    def persist(self, analyzer: Analyzer[Any, Any], state: State) -> None:
        self._states[analyzer] = state

    def __repr__(self) -> str:
        return f"InMemoryStateProvider({self._states!r})"


class FileSystemStateProvider(StateLoader, StatePersister):
    """
    File-based state storage.

    Stores one JSON file per analyzer in: {base_path}/{sha256(repr(analyzer))}.json
    """

    def __init__(self, base_path: Path | str | None = None, allow_overwrite: bool | None = None) -> None:
        """
        Initialize file-based state provider.

        Args:
            base_path: Directory holding state files (default: state config base_path)
            allow_overwrite: Whether persisting may replace an existing file
                (default: state config allow_overwrite)
        """
        if base_path is None or allow_overwrite is None:
            from dq_constraints.core.config_loader import load_state_config

            config = load_state_config()
            if base_path is None:
                base_path = config["base_path"]
            if allow_overwrite is None:
                allow_overwrite = config["allow_overwrite"]

        self.base_path = Path(base_path)
        self.allow_overwrite = bool(allow_overwrite)

    def _get_file_path(self, analyzer: Analyzer[Any, Any]) -> Path:
        identifier = hashlib.sha256(repr(analyzer).encode("utf-8")).hexdigest()
        return self.base_path / f"{identifier}.json"

    def persist(self, analyzer: Analyzer[Any, Any], state: State) -> None:
        """
        Write the state to its JSON file.

        Raises:
            FileExistsError: If a state is already stored and overwriting is disabled
        """
        self.base_path.mkdir(parents=True, exist_ok=True)
        file_path = self._get_file_path(analyzer)

        if file_path.exists() and not self.allow_overwrite:
            raise FileExistsError(f"State for {analyzer!r} already exists at {file_path}")

        serialized = {"analyzer": repr(analyzer), "state": state.to_dict()}
        with open(file_path, "w") as f:
            json.dump(serialized, f, indent=2)

        logger.debug("state_persisted", analyzer=repr(analyzer), path=str(file_path))

    def load(self, analyzer: Analyzer[Any, Any]) -> State | None:
        """
        Read the state from its JSON file.

        Returns:
            State if the file exists and is valid, None otherwise
        """
        file_path = self._get_file_path(analyzer)

        if not file_path.exists():
            return None

        try:
            with open(file_path) as f:
                data = json.load(f)
            return state_from_dict(data["state"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            # Corrupt state files are treated as absent
            logger.warning("state_load_failed", analyzer=repr(analyzer), path=str(file_path), error=str(e))
            return None
