"""Centralized configuration loader for YAML-based configuration.

This module provides functions to load configuration from YAML files with:
- Environment variable overrides (env var → YAML → defaults)
- Type coercion (string to bool, int, float, Path)
- Defaults declared as dataclasses
- Graceful degradation (missing files use defaults)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore

logger = logging.getLogger(__name__)


def get_project_root() -> Path:
    """
    Get project root directory.

    Uses pattern: config_loader.py → core/ → dq_constraints/ → src/ → project_root

    Returns:
        Path to project root directory

    Raises:
        ValueError: If config/ directory is not found at the detected project root
    """
    current_file = Path(__file__)
    project_root = current_file.parent.parent.parent.parent

    config_dir = project_root / "config"
    if not config_dir.is_dir():
        raise ValueError(
            f"Project root detection failed: config/ directory not found at {config_dir}. "
            f"Detected project root: {project_root}. "
            f"Pass config_path explicitly when running from an installed package."
        )

    return project_root


def _coerce_type(value: Any, target_type: type) -> Any:
    """
    Coerce value to target type.

    Handles:
    - String "true"/"false" → bool True/False (case-insensitive)
    - String "123" → int 123
    - String "0.5" → float 0.5
    - String "data/states" → Path("data/states")

    Raises:
        ValueError: If coercion fails
    """
    if value is None:
        return None

    if isinstance(value, target_type):
        return value

    if target_type is bool:
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value)

    if target_type is int:
        if isinstance(value, str):
            return int(float(value))
        return int(value)

    if target_type is float:
        return float(value)

    if issubclass(target_type, Path):
        return Path(value)

    if target_type is str:
        return str(value)

    return value


def _get_env_var(key: str, default: Any = None) -> str | None:
    return os.getenv(key, default)


def _read_yaml(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML mapping.

    Raises:
        ValueError: If YAML is invalid or not a mapping
    """
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML in {config_path}: expected a mapping, got {type(data).__name__}")
    return data


@dataclass
class LoggingConfigDefaults:
    """Default values for logging configuration."""

    root_level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    module_levels: dict[str, str] | None = None
    reduce_noise: dict[str, str] | None = None

    def __post_init__(self) -> None:
        if self.module_levels is None:
            self.module_levels = {
                "dq_constraints.core.analyzers": "INFO",
                "dq_constraints.core.constraints": "INFO",
                "dq_constraints.core.state_provider": "INFO",
            }
        if self.reduce_noise is None:
            self.reduce_noise = {
                "urllib3": "WARNING",
            }

    def to_dict(self) -> dict[str, Any]:
        return {
            "root_level": self.root_level,
            "format": self.format,
            "module_levels": self.module_levels.copy() if self.module_levels else {},
            "reduce_noise": self.reduce_noise.copy() if self.reduce_noise else {},
        }


def load_logging_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load logging config from YAML.

    Args:
        config_path: Optional path to config file. If None, uses default location.

    Returns:
        dict with keys:
        - root_level: str
        - format: str
        - module_levels: dict[str, str]
        - reduce_noise: dict[str, str]

    Raises:
        ValueError: If YAML is invalid
    """
    defaults = LoggingConfigDefaults().to_dict()

    if config_path is None:
        config_path = get_project_root() / "config" / "logging.yaml"

    config = defaults.copy()
    if config_path.exists():
        yaml_data = _read_yaml(config_path)
        for key, value in yaml_data.items():
            if key not in defaults:
                logger.warning(f"Ignoring unknown logging config key: {key}")
                continue
            if key in ("module_levels", "reduce_noise"):
                if isinstance(value, dict):
                    config[key].update(value)
            else:
                config[key] = value
    else:
        logger.debug(f"Config file not found at {config_path}, using defaults")

    return config


@dataclass
class StateConfigDefaults:
    """Default values for state storage configuration."""

    base_path: Path = Path("data/states")
    allow_overwrite: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"base_path": self.base_path, "allow_overwrite": self.allow_overwrite}


def load_state_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load state storage config from YAML with env var overrides.

    Precedence: Environment variable → YAML value → Default value

    Args:
        config_path: Optional path to config file. If None, uses default location.

    Returns:
        dict with keys:
        - base_path: Path (relative paths resolved against the project root
          when the default config location is used)
        - allow_overwrite: bool

    Raises:
        ValueError: If YAML is invalid or a value cannot be coerced
    """
    defaults = StateConfigDefaults().to_dict()

    project_root = None
    if config_path is None:
        project_root = get_project_root()
        config_path = project_root / "config" / "state.yaml"

    config = defaults.copy()
    if config_path.exists():
        yaml_data = _read_yaml(config_path)
        for key, value in yaml_data.items():
            if key in defaults:
                config[key] = value
    else:
        logger.debug(f"Config file not found at {config_path}, using defaults")

    env_mapping = {
        "DQ_STATE_BASE_PATH": "base_path",
        "DQ_STATE_ALLOW_OVERWRITE": "allow_overwrite",
    }
    for env_key, config_key in env_mapping.items():
        env_value = _get_env_var(env_key)
        if env_value is not None:
            config[config_key] = env_value

    target_types = {"base_path": Path, "allow_overwrite": bool}
    for key, target_type in target_types.items():
        try:
            config[key] = _coerce_type(config[key], target_type)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Type coercion failed for state config {key}={config[key]!r}: {e}") from e

    if project_root is not None and not config["base_path"].is_absolute():
        config["base_path"] = project_root / config["base_path"]

    return config
