"""Tests for the solve entry point and utilities."""

import logging

import pytest

from rush_hour import solve
from rush_hour.core.data_models import parse_solution
from rush_hour.core.exceptions import MalformedLevel, UnknownAlgorithm
from rush_hour.core.puzzle import PuzzleState
from rush_hour.levels import BUILTIN_LEVELS
from rush_hour.search.base import ALGORITHM_NAMES, SearchConfig
from rush_hour.search.best_first import BestFirstSearcher, depth_score
from rush_hour.search.ida_star import IDAStarSearcher
from rush_hour.solver import ALGORITHMS, create_searcher
from rush_hour.utils import parse_levels, setup_logging


class TestCreateSearcher:
    """Test the algorithm registry."""

    def test_registry(self):
        assert set(ALGORITHMS) | {'perceptron'} == set(ALGORITHM_NAMES)

    def test_create(self):
        searcher = create_searcher('ida_star', SearchConfig(heuristic="blocking"))
        assert isinstance(searcher, IDAStarSearcher)
        assert searcher.heuristic.name == "blocking"

    def test_defaults_without_global_config(self):
        searcher = create_searcher('best_first')
        assert isinstance(searcher, BestFirstSearcher)
        assert searcher.config == SearchConfig()

    def test_unknown(self):
        with pytest.raises(UnknownAlgorithm):
            create_searcher('dijkstra')


class TestSolve:
    """Test solve()."""

    @pytest.mark.parametrize("algorithm", ALGORITHM_NAMES)
    def test_every_algorithm(self, algorithm, three_move_level):
        result = solve(three_move_level, algorithm, timeout=60)
        assert result.success
        assert PuzzleState(three_move_level).verify_solution(parse_solution(result.solution))

    def test_solved_board_dls(self, solved_level):
        result = solve(solved_level, 'dls', limit=0)
        assert result.solution == "XR6"

    def test_default_algorithm(self, three_move_level):
        result = solve(three_move_level)
        assert result.algorithm == "best_first"

    def test_custom_score(self, three_move_level):
        result = solve(three_move_level, 'best_first', score=depth_score)
        assert len(result.moves) == 4

    def test_score_rejected_for_other_algorithms(self, three_move_level):
        with pytest.raises(ValueError):
            solve(three_move_level, 'ids', score=depth_score)

    def test_dls_limit(self, three_move_level):
        result = solve(three_move_level, 'dls', limit=2)
        assert not result.success
        assert result.termination_reason == "cutoff"

    def test_malformed_level(self):
        with pytest.raises(MalformedLevel):
            solve("XX", 'best_first')

    def test_unknown_algorithm(self, three_move_level):
        with pytest.raises(UnknownAlgorithm):
            solve(three_move_level, 'dijkstra')

    def test_timeout(self):
        result = solve(BUILTIN_LEVELS[-1], 'ids', timeout=1e-6)
        assert not result.success
        assert result.termination_reason == "timeout"
        assert result.solution is None


class TestUtils:
    """Test utility helpers."""

    def test_parse_levels(self):
        text = f"{BUILTIN_LEVELS[0]}\n\n  {BUILTIN_LEVELS[1]}  \n"
        assert parse_levels(text) == [BUILTIN_LEVELS[0], BUILTIN_LEVELS[1]]

    def test_parse_levels_empty(self):
        assert parse_levels("\n \n") == []

    def test_setup_logging_accepts_names(self):
        setup_logging("DEBUG")
        setup_logging(logging.WARNING)
        with pytest.raises(ValueError):
            setup_logging("LOUD")
