"""Configuration validation for the Rush Hour solver."""

import logging
from typing import List

from omegaconf import DictConfig

from rush_hour.search.base import ALGORITHM_NAMES, TIE_BREAKS
from rush_hour.search.heuristics import get_heuristic_names

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""
    pass


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_solver_config(config.get('solver', {}))
        validate_search_config(config.get('search', {}))
        validate_heuristics_config(config.get('heuristics', {}))
        validate_learning_config(config.get('learning', {}))
        validate_logging_config(config.get('logging', {}))
    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}") from e

    logger.info("Configuration validation passed")


def validate_solver_config(solver_config: DictConfig) -> None:
    """Validate solver configuration section."""
    if not solver_config:
        return

    algorithm = solver_config.get('algorithm', 'best_first')
    if algorithm not in ALGORITHM_NAMES:
        raise ConfigValidationError(
            f"solver.algorithm must be one of {', '.join(ALGORITHM_NAMES)}, got {algorithm}"
        )

    timeout = solver_config.get('timeout_seconds', 30.0)
    if timeout is not None and (not _is_number(timeout) or timeout <= 0):
        raise ConfigValidationError(
            f"timeout_seconds must be positive number, got {timeout}"
        )


def _validate_heuristic_name(key: str, name) -> None:
    if name not in get_heuristic_names():
        raise ConfigValidationError(
            f"{key} must be one of {', '.join(get_heuristic_names())}, got {name}"
        )


def validate_search_config(search_config: DictConfig) -> None:
    """Validate search configuration section.

    Args:
        search_config: Search configuration section
    """
    if not search_config:
        return

    _validate_heuristic_name('search.heuristic', search_config.get('heuristic', 'composite'))

    tie_break = search_config.get('tie_break', 'fifo')
    if tie_break not in TIE_BREAKS:
        raise ConfigValidationError(
            f"search.tie_break must be one of {', '.join(TIE_BREAKS)}, got {tie_break}"
        )

    max_nodes = search_config.get('max_nodes', 0)
    if not _is_int(max_nodes) or max_nodes < 0:
        raise ConfigValidationError(
            f"search.max_nodes must be non-negative integer, got {max_nodes}"
        )

    max_time = search_config.get('max_computation_time', None)
    if max_time is not None and (not _is_number(max_time) or max_time <= 0):
        raise ConfigValidationError(
            f"search.max_computation_time must be positive number, got {max_time}"
        )

    max_depth = search_config.get('max_depth', 50)
    if not _is_int(max_depth) or max_depth < 0:
        raise ConfigValidationError(
            f"search.max_depth must be non-negative integer, got {max_depth}"
        )

    seed = search_config.get('seed', None)
    if seed is not None and not _is_int(seed):
        raise ConfigValidationError(f"search.seed must be integer or null, got {seed}")

    for algorithm in ('ida_star', 'bidirectional', 'best_first'):
        section = search_config.get(algorithm, {})
        if section and 'heuristic' in section:
            _validate_heuristic_name(f"search.{algorithm}.heuristic", section.heuristic)


def validate_heuristics_config(heuristics_config: DictConfig) -> None:
    """Validate heuristics configuration section."""
    if not heuristics_config:
        return

    for key, minimum in (('recursive_depth', 0), ('penalty', 0), ('distinct_depth', 1)):
        value = heuristics_config.get(key, minimum)
        if not _is_int(value) or value < minimum:
            raise ConfigValidationError(
                f"heuristics.{key} must be integer >= {minimum}, got {value}"
            )

    members = heuristics_config.get('composite_members', None)
    if members is not None:
        if len(members) == 0:
            raise ConfigValidationError("heuristics.composite_members must not be empty")
        for member in members:
            if member == 'composite':
                raise ConfigValidationError("heuristics.composite_members cannot contain composite")
            _validate_heuristic_name('heuristics.composite_members', member)


def validate_learning_config(learning_config: DictConfig) -> None:
    """Validate learning configuration section."""
    if not learning_config:
        return

    max_iterations = learning_config.get('max_iterations', 25)
    if not _is_int(max_iterations) or max_iterations < 1:
        raise ConfigValidationError(
            f"learning.max_iterations must be positive integer, got {max_iterations}"
        )

    tie_break = learning_config.get('tie_break', 'fifo')
    if tie_break not in TIE_BREAKS:
        raise ConfigValidationError(
            f"learning.tie_break must be one of {', '.join(TIE_BREAKS)}, got {tie_break}"
        )


def validate_logging_config(logging_config: DictConfig) -> None:
    """Validate logging configuration section."""
    if not logging_config:
        return

    level = str(logging_config.get('level', 'INFO')).upper()
    if level not in LOG_LEVELS:
        raise ConfigValidationError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level}"
        )


def validate_parameter_ranges(config: DictConfig) -> List[str]:
    """Validate parameter ranges and return warnings.

    Args:
        config: Configuration to validate

    Returns:
        List of warning messages
    """
    warnings = []

    search_config = config.get('search', {})
    if search_config:
        max_depth = search_config.get('max_depth', 50)
        if max_depth < 20:
            warnings.append(f"search.max_depth {max_depth} may be too shallow for harder levels")
        if search_config.get('randomize_moves', False) and search_config.get('seed', None) is None:
            warnings.append("search.randomize_moves without a seed is not reproducible")

    ida_config = search_config.get('ida_star', {}) if search_config else {}
    if ida_config and ida_config.get('heuristic', 'blocking') not in ('blocking', 'composite'):
        warnings.append(
            f"IDA* heuristic {ida_config.heuristic} is not admissible; solutions may not be minimal"
        )

    return warnings
