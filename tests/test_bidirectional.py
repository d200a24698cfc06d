"""Tests for bidirectional best-first search."""

import pytest

from rush_hour.core.puzzle import PuzzleState
from rush_hour.levels import BUILTIN_LEVELS
from rush_hour.search.base import SearchConfig
from rush_hour.search.best_first import BestFirstSearcher
from rush_hour.search.bidirectional import BidirectionalResult, BidirectionalSearcher


class TestBidirectionalSearch:
    """Test bidirectional search."""

    @pytest.fixture
    def searcher(self):
        return BidirectionalSearcher(SearchConfig())

    def test_solved_board(self, searcher, solved_state):
        result = searcher.search(solved_state)
        assert isinstance(result, BidirectionalResult)
        assert result.success
        assert result.solution == "XR6"

    @pytest.mark.parametrize("fixture", ["one_blocker_state", "two_move_state", "three_move_state"])
    def test_path_reaches_goal(self, searcher, request, fixture):
        state = request.getfixturevalue(fixture)
        result = searcher.search(state)
        assert result.success

        goal = state.clone().replay(result.best_first.moves[:-1])
        board = state.clone().replay(result.bidirectional.moves[:-1])
        assert board.hash() == goal.hash()
        assert state.verify_solution(result.bidirectional.moves)

    def test_builtin_levels(self, searcher):
        for level in BUILTIN_LEVELS[:3]:
            state = PuzzleState(level)
            result = searcher.search(state)
            assert result.success
            assert state.verify_solution(result.bidirectional.moves)

    def test_meet_between_known_states(self, searcher, three_move_state):
        forward = BestFirstSearcher(SearchConfig()).search(three_move_state)
        goal = three_move_state.clone().replay(forward.moves[:-1])

        result = searcher.meet(three_move_state, goal)
        assert result.success
        assert result.moves[-1] == goal.exit_move()
        board = three_move_state.clone().replay(result.moves[:-1])
        assert board.hash() == goal.hash()
        assert result.nodes_scanned >= 2

    def test_statistics(self, searcher, three_move_state):
        result = searcher.search(three_move_state)
        stats = result.bidirectional
        assert stats.algorithm == "bidirectional"
        assert 0 <= stats.min_depth <= stats.max_depth
        assert result.total_nodes == result.best_first.nodes_scanned + stats.nodes_scanned
        data = result.to_dict()
        assert data['bidirectional']['success'] is True

    def test_goal_search_failure(self, searcher, unsolvable_state):
        result = searcher.search(unsolvable_state)
        assert not result.success
        assert result.best_first.termination_reason == "search_exhausted"
        assert result.bidirectional.termination_reason == "search_exhausted"
