"""Tests for cost-bounded search and IDA*."""

import pytest

from rush_hour.core.exceptions import NoSolutionWithinBound
from rush_hour.search.base import SearchConfig
from rush_hour.search.ida_star import CostBoundedSearcher, IDAStarSearcher


class TestCostBoundedSearch:
    """Test a single cost-bounded episode."""

    @pytest.fixture
    def searcher(self):
        return CostBoundedSearcher(SearchConfig(heuristic="blocking"))

    def test_bound_too_small(self, searcher, two_move_state):
        result = searcher.search(two_move_state, 1)
        assert not result.success
        assert result.termination_reason == "cutoff"

    def test_next_bound_reported(self, searcher, two_move_state):
        with pytest.raises(NoSolutionWithinBound) as exc_info:
            searcher.run_bounded(two_move_state.clone(), 1)
        assert exc_info.value.next_bound == 2
        assert exc_info.value.min_depth == 1

    def test_sufficient_bound(self, searcher, two_move_state):
        result = searcher.search(two_move_state, 2)
        assert result.success
        assert len(result.moves) == 3
        assert two_move_state.verify_solution(result.moves)


class TestIDAStar:
    """Test IDA*."""

    @pytest.fixture
    def searcher(self):
        return IDAStarSearcher(SearchConfig(heuristic="blocking"))

    def test_solved_board(self, searcher, solved_state):
        result = searcher.search(solved_state)
        assert result.success
        assert result.solution == "XR6"

    @pytest.mark.parametrize("fixture,depth", [
        ("one_blocker_state", 1),
        ("two_move_state", 2),
        ("three_move_state", 3),
    ])
    def test_optimal_with_admissible_heuristic(self, searcher, request, fixture, depth):
        state = request.getfixturevalue(fixture)
        result = searcher.search(state)
        assert result.success
        assert len(result.moves) == depth + 1
        assert state.verify_solution(result.moves)
        assert result.algorithm == "ida_star"

    def test_bounds_grow_per_iteration(self, searcher, three_move_state):
        # h(root) = 1, so bounds 1, 2 and 3 are needed
        result = searcher.search(three_move_state)
        assert result.iterations == 3
        assert result.nodes_scanned > 0

    def test_depth_statistics(self, searcher, three_move_state):
        # The first iteration prunes every child of the root
        result = searcher.search(three_move_state)
        assert result.min_depth == 1
        assert 0 < result.min_depth <= result.max_depth
        assert result.max_depth >= 3

    def test_depth_statistics_when_exhausted(self, searcher, unsolvable_state):
        result = searcher.search(unsolvable_state)
        assert result.min_depth == 0
        assert result.max_depth == 0

    def test_composite_heuristic(self, three_move_state):
        result = IDAStarSearcher(SearchConfig(heuristic="composite")).search(three_move_state)
        assert result.success
        assert len(result.moves) == 4

    def test_exhausted(self, searcher, unsolvable_state):
        result = searcher.search(unsolvable_state)
        assert not result.success
        assert result.termination_reason == "search_exhausted"

    def test_bound_limit(self, searcher, three_move_state):
        result = searcher.search(three_move_state, max_bound=2)
        assert not result.success
        assert result.termination_reason == "depth_limit"

    def test_state_untouched(self, searcher, three_move_state):
        before = three_move_state.hash()
        searcher.search(three_move_state)
        assert three_move_state.hash() == before
