"""Tests for best-first search."""

import pytest

from rush_hour.core.data_models import Direction, Move
from rush_hour.core.puzzle import PuzzleState
from rush_hour.levels import BUILTIN_LEVELS
from rush_hour.search.base import SearchConfig
from rush_hour.search.best_first import (
    BestFirstSearcher, Frontier, SearchNode, SearchTree, depth_score,
)
from rush_hour.search.uninformed import IterativeDeepeningSearcher


class TestSearchNode:
    """Test node ordering."""

    def test_ordering(self):
        a = SearchNode(index=0, parent=None, action=None, depth=0, score=1, order=5,
                       key="a", state=None)
        b = SearchNode(index=1, parent=None, action=None, depth=0, score=2, order=0,
                       key="b", state=None)
        c = SearchNode(index=2, parent=None, action=None, depth=0, score=1, order=6,
                       key="c", state=None)
        assert a < b
        assert a < c
        assert not c < a


class TestSearchTree:
    """Test the arena tree."""

    def test_paths_and_depths(self, one_blocker_state):
        tree = SearchTree()
        root = tree.add(one_blocker_state, None, None, 0, 0)
        up = Move("A", Direction.UP, 1)
        down = Move("A", Direction.DOWN, 1)
        child = tree.add(one_blocker_state, root.index, up, 1, 1)
        grandchild = tree.add(one_blocker_state, child.index, down, 2, 2)

        assert len(tree) == 3
        assert tree.path(grandchild.index) == [up, down]
        assert tree[child.index].children == [grandchild.index]
        assert tree.max_depth == 2
        assert tree.min_depth == 2


class TestFrontier:
    """Test frontier bookkeeping."""

    def test_expand_registers_children(self, one_blocker_state):
        frontier = Frontier(depth_score)
        root = frontier.add(one_blocker_state.clone())
        children = frontier.expand(root, one_blocker_state.possible_moves())

        assert len(children) == 4
        assert root.state is None
        assert len(frontier.tree) == 5
        assert all(child.key in frontier.visited for child in children)
        assert len(frontier) == 0

    def test_duplicate_states_skipped(self, one_blocker_state):
        frontier = Frontier(depth_score)
        root = frontier.add(one_blocker_state.clone())
        children = frontier.expand(root, one_blocker_state.possible_moves())
        first = children[0]
        # Moving back to the root state is not rediscovered
        again = frontier.expand(first, [first.action.opposite()])
        assert again == []

    @pytest.mark.parametrize("tie_break,expected", [("fifo", 0), ("lifo", 3)])
    def test_tie_break(self, one_blocker_state, tie_break, expected):
        frontier = Frontier(lambda s, d, a, p: 0, tie_break)
        root = frontier.add(one_blocker_state.clone())
        children = frontier.expand(root, one_blocker_state.possible_moves())
        for child in children:
            frontier.push(child)
        assert frontier.pop() is children[expected]

    def test_unknown_tie_break(self):
        with pytest.raises(ValueError):
            Frontier(depth_score, "random")


class TestBestFirstSearch:
    """Test the best-first engine."""

    @pytest.fixture
    def searcher(self):
        return BestFirstSearcher(SearchConfig())

    def test_solved_board(self, searcher, solved_state):
        result = searcher.search(solved_state)
        assert result.success
        assert result.solution == "XR6"
        assert result.nodes_scanned == 1

    def test_one_blocker(self, searcher, one_blocker_state):
        result = searcher.search(one_blocker_state)
        assert result.success
        assert len(result.moves) == 2
        assert one_blocker_state.verify_solution(result.moves)

    @pytest.mark.parametrize("fixture", ["two_move_state", "three_move_state"])
    def test_depth_score_matches_ids(self, searcher, request, fixture):
        state = request.getfixturevalue(fixture)
        breadth_first = searcher.search(state, score=depth_score)
        deepening = IterativeDeepeningSearcher(SearchConfig(heuristic="blocking")).search(state)
        assert breadth_first.success and deepening.success
        assert len(breadth_first.moves) == len(deepening.moves)

    def test_builtin_levels(self, searcher):
        for level in BUILTIN_LEVELS[:3]:
            state = PuzzleState(level)
            result = searcher.search(state)
            assert result.success
            assert state.verify_solution(result.moves)
            assert state.hash() == level

    def test_constructor_score(self, three_move_state):
        searcher = BestFirstSearcher(SearchConfig(), score=depth_score)
        result = searcher.search(three_move_state)
        assert len(result.moves) == 4

    def test_lifo_tie_break(self, three_move_state):
        result = BestFirstSearcher(SearchConfig(tie_break="lifo")).search(three_move_state)
        assert result.success
        assert three_move_state.verify_solution(result.moves)

    def test_randomized_move_order(self, three_move_state):
        config = SearchConfig(randomize_moves=True, seed=11)
        result = BestFirstSearcher(config).search(three_move_state, score=depth_score)
        assert result.success
        assert len(result.moves) == 4

    def test_statistics(self, searcher, three_move_state):
        result = searcher.search(three_move_state)
        assert result.nodes_scanned > 1
        assert 0 <= result.min_depth <= result.max_depth
        assert result.depth_ratio == pytest.approx(len(result.moves) / result.nodes_scanned)
        assert result.heuristic_stats['computation_count'] > 0

    def test_exhausted(self, searcher, unsolvable_state):
        result = searcher.search(unsolvable_state)
        assert not result.success
        assert result.termination_reason == "search_exhausted"
        assert result.nodes_scanned == 1
        assert result.solution is None

    def test_node_cap(self, two_move_state):
        result = BestFirstSearcher(SearchConfig(max_nodes=1)).search(two_move_state)
        assert not result.success
        assert result.termination_reason == "max_nodes"

    def test_deadline(self, two_move_state):
        config = SearchConfig(max_computation_time=1e-9)
        result = BestFirstSearcher(config).search(two_move_state)
        assert not result.success
        assert result.termination_reason == "timeout"

    def test_to_dict(self, searcher, one_blocker_state):
        data = searcher.search(one_blocker_state).to_dict()
        assert data['success'] is True
        assert data['algorithm'] == "best_first"
        assert data['solution'].endswith("XR6")
