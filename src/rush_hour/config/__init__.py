"""Configuration management for the Rush Hour solver.

This module provides Hydra-based configuration management with per-section
validation and runtime override capabilities.
"""

from .config_manager import (
    ConfigContext, ConfigManager, get_config, get_parameter, load_config, reset_config,
)
from .validators import ConfigValidationError, validate_config, validate_parameter_ranges

__all__ = [
    'ConfigContext',
    'ConfigManager',
    'get_config',
    'get_parameter',
    'load_config',
    'reset_config',
    'ConfigValidationError',
    'validate_config',
    'validate_parameter_ranges',
]
