"""Utility functions."""

import logging
from typing import Any, List, Optional, Union

from omegaconf import OmegaConf

PACKAGE_LOGGER = "rush_hour"


def _level_number(level: Union[int, str]) -> int:
    if isinstance(level, str):
        number = logging.getLevelName(level.upper())
        if not isinstance(number, int):
            raise ValueError(f"Unknown logging level: {level}")
        return number
    return level


def setup_logging(level: Union[int, str] = logging.INFO,
                  format_string: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        format_string: Custom format string
    """
    level = _level_number(level)

    if format_string is None:
        if level <= logging.DEBUG:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Hydra is chatty at INFO
    logging.getLogger('hydra').setLevel(logging.WARNING)


def apply_logging_config(config: Any) -> None:
    """Set the package logger level from the ``logging.level`` config key.

    Only the ``rush_hour`` logger is touched; installing handlers is left to
    ``setup_logging``.
    """
    level = OmegaConf.select(config, "logging.level", default=None)
    if level is None:
        return
    logging.getLogger(PACKAGE_LOGGER).setLevel(_level_number(str(level)))


def parse_levels(text: str) -> List[str]:
    """Split batch text into level strings, one per non-blank line."""
    return [line.strip() for line in text.splitlines() if line.strip()]
