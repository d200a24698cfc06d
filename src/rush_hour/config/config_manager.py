"""Configuration manager using Hydra for hierarchical configuration."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig, OmegaConf, open_dict

from ..utils import apply_logging_config
from .validators import validate_config

logger = logging.getLogger(__name__)

# Packaged configuration shipped with the library
DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "conf"

# Global configuration instance
_global_config: Optional[DictConfig] = None


class ConfigManager:
    """Manages configuration loading and validation using Hydra."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory. If None, uses the
                packaged ``rush_hour/conf``.
        """
        self.config_dir = Path(config_dir or DEFAULT_CONFIG_DIR).resolve()
        self.config: Optional[DictConfig] = None

        if not self.config_dir.exists():
            raise FileNotFoundError(f"Configuration directory not found: {self.config_dir}")

        logger.debug(f"Configuration manager initialized with config_dir: {self.config_dir}")

    def load_config(self,
                    config_name: str = "config",
                    overrides: Optional[List[str]] = None,
                    validate: bool = True) -> DictConfig:
        """Load configuration with optional overrides.

        Args:
            config_name: Name of the main config file (without .yaml)
            overrides: Hydra override strings, e.g. ``search.tie_break=lifo``
            validate: Whether to validate the configuration

        Returns:
            Loaded and validated configuration
        """
        global _global_config

        GlobalHydra.instance().clear()
        try:
            with initialize_config_dir(config_dir=str(self.config_dir), version_base=None):
                cfg = compose(config_name=config_name, overrides=overrides or [])
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise

        if validate:
            validate_config(cfg)
        apply_logging_config(cfg)

        self.config = cfg
        _global_config = cfg

        logger.info(f"Configuration loaded successfully: {config_name}")
        if overrides:
            logger.info(f"Applied overrides: {overrides}")
        return cfg

    def get_config(self) -> Optional[DictConfig]:
        return self.config

    def _require_config(self) -> DictConfig:
        if self.config is None:
            raise RuntimeError("No configuration loaded. Call load_config() first.")
        return self.config

    def update_config(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values.

        Args:
            updates: Mapping of dotted keys to values
        """
        config = self._require_config()
        with open_dict(config):
            for key, value in updates.items():
                OmegaConf.update(config, key, value, merge=True)
        validate_config(config)
        apply_logging_config(config)

        logger.info(f"Configuration updated with: {updates}")

    def save_config(self, output_path: Union[str, Path]) -> None:
        """Save current configuration to a YAML file."""
        config = self._require_config()
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w') as f:
            OmegaConf.save(config, f)

        logger.info(f"Configuration saved to: {output_path}")

    def get_parameter(self, key: str, default: Any = None) -> Any:
        """Get a specific parameter from configuration.

        Args:
            key: Parameter key (supports dot notation, e.g. 'search.max_depth')
            default: Default value if key not found

        Returns:
            Parameter value or default
        """
        return OmegaConf.select(self._require_config(), key, default=default)

    def set_parameter(self, key: str, value: Any) -> None:
        """Set a specific parameter in configuration (dot notation)."""
        config = self._require_config()
        with open_dict(config):
            OmegaConf.update(config, key, value, merge=True)

        logger.debug(f"Parameter set: {key} = {value}")

    def to_yaml(self, resolve: bool = True) -> str:
        """Render current configuration as YAML."""
        return OmegaConf.to_yaml(self._require_config(), resolve=resolve)


def load_config(config_name: str = "config",
                overrides: Optional[List[str]] = None,
                config_dir: Optional[Union[str, Path]] = None,
                validate: bool = True) -> DictConfig:
    """Load configuration using a fresh config manager and make it global.

    Args:
        config_name: Name of the main config file
        overrides: List of configuration overrides
        config_dir: Path to configuration directory
        validate: Whether to validate the configuration

    Returns:
        Loaded configuration
    """
    manager = ConfigManager(config_dir)
    return manager.load_config(config_name, overrides, validate)


def get_config() -> Optional[DictConfig]:
    """Get the global configuration, or None if not loaded."""
    return _global_config


def reset_config() -> None:
    """Forget the global configuration."""
    global _global_config
    _global_config = None


def get_parameter(key: str, default: Any = None) -> Any:
    """Get a parameter from global configuration.

    Args:
        key: Parameter key (supports dot notation)
        default: Default value if key not found

    Returns:
        Parameter value or default
    """
    config = get_config()
    if config is None:
        logger.warning("No global configuration loaded")
        return default
    return OmegaConf.select(config, key, default=default)


class ConfigContext:
    """Context manager for temporary configuration changes.

    Example:
        with ConfigContext({'search.tie_break': 'lifo'}):
            solve(level)
    """

    def __init__(self, changes: Optional[Dict[str, Any]] = None, **kwargs):
        """Initialize with temporary configuration changes.

        Args:
            changes: Mapping of dotted keys to temporary values
            **kwargs: Top-level keys to temporarily change
        """
        self.changes = dict(changes or {})
        self.changes.update(kwargs)
        self.original_values: Dict[str, Any] = {}
        self.config = get_config()

    def __enter__(self) -> DictConfig:
        if self.config is None:
            raise RuntimeError("No global configuration loaded")

        for key in self.changes:
            self.original_values[key] = OmegaConf.select(self.config, key)

        with open_dict(self.config):
            for key, value in self.changes.items():
                OmegaConf.update(self.config, key, value, merge=True)
        return self.config

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.config is None:
            return
        with open_dict(self.config):
            for key, value in self.original_values.items():
                OmegaConf.update(self.config, key, value, merge=False)
