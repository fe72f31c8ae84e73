"""
Centralized logging configuration.

Configure once in the application entry point, not per module. Library
modules only call structlog.get_logger(__name__).
"""

import logging
import sys
from pathlib import Path

import structlog

from dq_constraints.core.config_loader import load_logging_config


def configure_logging(level: int | None = None, config_path: Path | None = None) -> None:
    """
    Configure stdlib logging and structlog for the entire application.

    Truly idempotent: safe to call multiple times without side effects.
    Checks if root logger already has handlers before configuring.

    Args:
        level: Root level override; defaults to root_level from logging config
        config_path: Optional logging YAML; defaults to config/logging.yaml
    """
    root_logger = logging.getLogger()

    if root_logger.handlers:
        return

    config = load_logging_config(config_path)
    root_level = level if level is not None else logging.getLevelName(config["root_level"])

    logging.basicConfig(
        level=root_level,
        format=config["format"],
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for logger_name, logger_level in config["module_levels"].items():
        logging.getLogger(logger_name).setLevel(logger_level)

    # Reduce noise
    for logger_name, logger_level in config["reduce_noise"].items():
        logging.getLogger(logger_name).setLevel(logger_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
