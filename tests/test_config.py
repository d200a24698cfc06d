"""Tests for configuration management system."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest
from omegaconf import DictConfig, OmegaConf

from rush_hour import solve
from rush_hour.config import (
    ConfigContext, ConfigManager, ConfigValidationError, get_config, get_parameter,
    load_config, validate_config, validate_parameter_ranges,
)
from rush_hour.learning.perceptron import LearningConfig
from rush_hour.search.base import SearchConfig
from rush_hour.solver import create_searcher


class TestConfigManager:
    """Test ConfigManager functionality."""

    @pytest.fixture
    def temp_config_dir(self):
        """Create temporary configuration directory."""
        temp_dir = tempfile.mkdtemp()
        config_dir = Path(temp_dir) / "conf"
        config_dir.mkdir()

        config_content = """
solver:
  algorithm: ids
  timeout_seconds: 5.0

search:
  heuristic: blocking
  tie_break: lifo
  max_nodes: 1000
  max_depth: 12
  dls:
    use_visited: false

heuristics:
  recursive_depth: 3
  penalty: 2

learning:
  max_iterations: 7
"""
        with open(config_dir / "config.yaml", 'w') as f:
            f.write(config_content)

        yield config_dir

        shutil.rmtree(temp_dir)

    def test_initialization(self, temp_config_dir):
        manager = ConfigManager(temp_config_dir)
        assert manager.config_dir == temp_config_dir.resolve()
        assert manager.config is None

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(tmp_path / "missing")

    def test_load_packaged_config(self):
        config = ConfigManager().load_config()
        assert isinstance(config, DictConfig)
        assert config.solver.algorithm == "best_first"
        assert config.search.heuristic == "composite"
        assert config.search.ida_star.heuristic == "blocking"
        assert list(config.heuristics.composite_members)[0] == "blocking"
        assert get_config() is config

    def test_load_custom_config(self, temp_config_dir):
        manager = ConfigManager(temp_config_dir)
        config = manager.load_config()
        assert config.solver.algorithm == "ids"
        assert manager.config is config

    def test_load_config_with_overrides(self):
        config = ConfigManager().load_config(
            overrides=["search.tie_break=lifo", "search.max_nodes=500"]
        )
        assert config.search.tie_break == "lifo"
        assert config.search.max_nodes == 500

    def test_invalid_override(self):
        with pytest.raises(ConfigValidationError):
            ConfigManager().load_config(overrides=["search.tie_break=random"])

    def test_get_and_set_parameter(self, temp_config_dir):
        manager = ConfigManager(temp_config_dir)
        manager.load_config()

        assert manager.get_parameter("search.max_depth") == 12
        assert manager.get_parameter("nonexistent.param", "default") == "default"

        manager.set_parameter("search.max_depth", 20)
        assert manager.get_parameter("search.max_depth") == 20
        manager.set_parameter("new.parameter", "test_value")
        assert manager.get_parameter("new.parameter") == "test_value"

    def test_update_config_validates(self, temp_config_dir):
        manager = ConfigManager(temp_config_dir)
        manager.load_config()

        manager.update_config({"learning.max_iterations": 3})
        assert manager.get_parameter("learning.max_iterations") == 3

        with pytest.raises(ConfigValidationError):
            manager.update_config({"learning.max_iterations": 0})

    def test_save_config(self, temp_config_dir):
        manager = ConfigManager(temp_config_dir)
        manager.load_config()
        manager.set_parameter("search.heuristic", "distinct_vehicles")

        output_file = temp_config_dir / "saved" / "config.yaml"
        manager.save_config(output_file)

        saved = OmegaConf.load(output_file)
        assert saved.search.heuristic == "distinct_vehicles"
        assert "distinct_vehicles" in manager.to_yaml()

    def test_without_loading(self, temp_config_dir):
        manager = ConfigManager(temp_config_dir)

        with pytest.raises(RuntimeError, match="No configuration loaded"):
            manager.get_parameter("solver.algorithm")
        with pytest.raises(RuntimeError, match="No configuration loaded"):
            manager.set_parameter("solver.algorithm", "ids")
        with pytest.raises(RuntimeError, match="No configuration loaded"):
            manager.save_config("test.yaml")


class TestConfigMapping:
    """Test mapping DictConfig sections onto dataclasses."""

    @pytest.fixture
    def config(self):
        return OmegaConf.create({
            'search': {
                'heuristic': 'blocking',
                'tie_break': 'lifo',
                'randomize_moves': True,
                'seed': 4,
                'max_nodes': 100,
                'max_depth': 9,
                'dls': {'use_visited': False},
                'ida_star': {'heuristic': 'unblock_distance'},
            },
            'heuristics': {
                'recursive_depth': 3,
                'penalty': 2,
                'distinct_depth': 4,
                'composite_members': ['blocking', 'unblock_distance'],
            },
            'learning': {'max_iterations': 6, 'tie_break': 'lifo'},
        })

    def test_search_config(self, config):
        search_config = SearchConfig.from_config(config)
        assert search_config.heuristic == "blocking"
        assert search_config.tie_break == "lifo"
        assert search_config.randomize_moves is True
        assert search_config.seed == 4
        assert search_config.max_nodes == 100
        assert search_config.max_depth == 9
        assert search_config.use_visited is False
        assert search_config.recursive_depth == 3
        assert search_config.penalty == 2
        assert search_config.distinct_depth == 4
        assert search_config.composite_members == ['blocking', 'unblock_distance']

    def test_algorithm_override(self, config):
        assert SearchConfig.from_config(config, 'ida_star').heuristic == "unblock_distance"
        assert SearchConfig.from_config(config, 'best_first').heuristic == "blocking"

    def test_learning_config(self, config):
        learning_config = LearningConfig.from_config(config)
        assert learning_config.max_iterations == 6
        assert learning_config.tie_break == "lifo"
        assert learning_config.seed == 4
        assert learning_config.search_config().tie_break == "lifo"

    def test_empty_config_gives_defaults(self):
        assert SearchConfig.from_config(OmegaConf.create({})) == SearchConfig()
        assert LearningConfig.from_config(OmegaConf.create({})) == LearningConfig()


class TestGlobalConfig:
    """Test global configuration functions."""

    def test_load_and_get(self):
        config = load_config(overrides=["search.max_depth=30"])
        assert get_config() is config
        assert get_parameter("search.max_depth") == 30
        assert get_parameter("missing.key", 5) == 5

    def test_get_parameter_without_config(self):
        assert get_config() is None
        assert get_parameter("search.max_depth", 50) == 50

    def test_searchers_follow_global_config(self):
        load_config(overrides=["search.tie_break=lifo", "search.ida_star.heuristic=distinct_vehicles"])
        assert create_searcher('best_first').config.tie_break == "lifo"
        assert create_searcher('ida_star').heuristic.name == "distinct_vehicles"

    def test_solve_uses_configured_algorithm(self, three_move_level):
        load_config(overrides=["solver.algorithm=ids"])
        result = solve(three_move_level)
        assert result.algorithm == "ids"
        assert len(result.moves) == 4

    def test_logging_level_applied(self):
        package_logger = logging.getLogger("rush_hour")
        load_config(overrides=["logging.level=DEBUG"])
        assert package_logger.level == logging.DEBUG

        manager = ConfigManager()
        manager.load_config()
        assert package_logger.level == logging.INFO

        manager.update_config({"logging.level": "warning"})
        assert package_logger.level == logging.WARNING

    def test_config_context(self):
        load_config()
        with ConfigContext({'search.tie_break': 'lifo'}) as config:
            assert config.search.tie_break == "lifo"
            assert SearchConfig.from_config(config).tie_break == "lifo"
        assert get_parameter("search.tie_break") == "fifo"

    def test_config_context_requires_config(self):
        with pytest.raises(RuntimeError):
            with ConfigContext({'search.tie_break': 'lifo'}):
                pass


class TestValidation:
    """Test configuration validation."""

    def test_valid_config(self):
        validate_config(OmegaConf.create({
            'solver': {'algorithm': 'perceptron', 'timeout_seconds': 10},
            'search': {'heuristic': 'composite', 'tie_break': 'fifo', 'max_nodes': 0},
            'logging': {'level': 'debug'},
        }))

    @pytest.mark.parametrize("section", [
        {'solver': {'algorithm': 'dijkstra'}},
        {'solver': {'timeout_seconds': -1}},
        {'search': {'heuristic': 'manhattan'}},
        {'search': {'tie_break': 'random'}},
        {'search': {'max_nodes': -5}},
        {'search': {'max_depth': 'deep'}},
        {'search': {'max_computation_time': 0}},
        {'search': {'seed': 1.5}},
        {'search': {'ida_star': {'heuristic': 'manhattan'}}},
        {'heuristics': {'recursive_depth': -1}},
        {'heuristics': {'composite_members': []}},
        {'heuristics': {'composite_members': ['composite']}},
        {'heuristics': {'composite_members': ['blocking', 'nope']}},
        {'learning': {'max_iterations': 0}},
        {'learning': {'tie_break': 'stack'}},
        {'logging': {'level': 'LOUD'}},
    ])
    def test_invalid_sections(self, section):
        with pytest.raises(ConfigValidationError):
            validate_config(OmegaConf.create(section))

    def test_parameter_range_warnings(self):
        warnings = validate_parameter_ranges(OmegaConf.create({
            'search': {
                'max_depth': 5,
                'randomize_moves': True,
                'seed': None,
                'ida_star': {'heuristic': 'unblock_obstacles'},
            },
        }))
        assert len(warnings) == 3

    def test_packaged_config_has_no_warnings(self):
        assert validate_parameter_ranges(load_config()) == []
