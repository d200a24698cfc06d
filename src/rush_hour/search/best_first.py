"""Best-first search over an arena search tree.

Nodes live in a flat list and refer to their parent by index, so the tree
can be kept for statistics after the search without reference cycles.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from rush_hour.core.data_models import Move
from rush_hour.core.exceptions import SearchTimeout
from rush_hour.core.puzzle import PuzzleState
from rush_hour.search.base import (
    TIE_BREAKS, BaseSearcher, ScoreFunction, SearchConfig, SearchResult,
)
from rush_hour.search.heuristics import BaseHeuristic

logger = logging.getLogger(__name__)


@dataclass
class SearchNode:
    """Node in the best-first search tree."""
    index: int
    parent: Optional[int]
    action: Optional[Move]
    depth: int
    score: int
    order: int  # Tie-break key among equal scores
    key: str  # State hash
    state: Optional[PuzzleState]  # Released once the node is expanded
    children: List[int] = field(default_factory=list)

    def __lt__(self, other: 'SearchNode') -> bool:
        """Comparison for priority queue (lower score first)."""
        if self.score != other.score:
            return self.score < other.score
        return self.order < other.order


class SearchTree:
    """Arena of search nodes indexed by insertion order."""

    def __init__(self):
        self.nodes: List[SearchNode] = []
        self._max_depth = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> SearchNode:
        return self.nodes[index]

    def add(self, state: PuzzleState, parent: Optional[int], action: Optional[Move],
            score: int, order: int) -> SearchNode:
        depth = 0 if parent is None else self.nodes[parent].depth + 1
        node = SearchNode(index=len(self.nodes), parent=parent, action=action, depth=depth,
                          score=score, order=order, key=state.hash(), state=state)
        self.nodes.append(node)
        if parent is not None:
            self.nodes[parent].children.append(node.index)
        self._max_depth = max(self._max_depth, depth)
        return node

    def path(self, index: int) -> List[Move]:
        """Actions from the root to the node at ``index``."""
        actions = []
        node = self.nodes[index]
        while node.parent is not None:
            actions.append(node.action)
            node = self.nodes[node.parent]
        return list(reversed(actions))

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def min_depth(self) -> int:
        """Depth of the shallowest leaf."""
        leaves = [node.depth for node in self.nodes if not node.children]
        return min(leaves) if leaves else 0


class Frontier:
    """Priority queue plus visited map over one search tree.

    A state is registered as visited the moment it is discovered, so the
    tree never holds two nodes for the same state.
    """

    def __init__(self, score: ScoreFunction, tie_break: str = "fifo"):
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"Unknown tie-break: {tie_break}. Available: {', '.join(TIE_BREAKS)}")
        self.score = score
        self.tree = SearchTree()
        self.visited: Dict[str, int] = {}
        self._heap: List[SearchNode] = []
        self._counter = itertools.count()
        self._sign = 1 if tie_break == "fifo" else -1

    def __len__(self) -> int:
        return len(self._heap)

    def add(self, state: PuzzleState, parent: Optional[SearchNode] = None,
            action: Optional[Move] = None) -> SearchNode:
        """Discover a state: score it and record it in the tree and visited map."""
        depth = 0 if parent is None else parent.depth + 1
        parent_key = None if parent is None else parent.key
        score = self.score(state, depth, action, parent_key)
        node = self.tree.add(state, None if parent is None else parent.index, action,
                             score, self._sign * next(self._counter))
        self.visited[node.key] = node.index
        return node

    def expand(self, node: SearchNode, moves: Iterable[Move]) -> List[SearchNode]:
        """Discover every unvisited successor of ``node``.

        The children are added to the tree but not pushed; the node's own
        state is released afterwards.
        """
        children = []
        for move in moves:
            child = node.state.clone()
            child.apply_move(move)
            if child.hash() in self.visited:
                continue
            children.append(self.add(child, node, move))
        node.state = None
        return children

    def push(self, node: SearchNode) -> None:
        heapq.heappush(self._heap, node)

    def pop(self) -> Optional[SearchNode]:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)


class BestFirstSearcher(BaseSearcher):
    """Best-first search driven by a pluggable score function.

    The default score is depth + heuristic, which makes the search A*-like;
    scoring by depth alone gives breadth-first order.
    """

    name = "best_first"

    def __init__(self, config: Optional[SearchConfig] = None,
                 heuristic: Optional[BaseHeuristic] = None,
                 score: Optional[ScoreFunction] = None):
        """Initialize best-first searcher.

        Args:
            config: Search configuration parameters
            heuristic: Heuristic used by the default score
            score: Score function overriding depth + heuristic
        """
        super().__init__(config, heuristic)
        self.score = score

    def default_score(self, state: PuzzleState, depth: int, action: Optional[Move],
                      parent_hash: Optional[str]) -> int:
        return depth + self.heuristic(state)

    def search(self, state: PuzzleState, score: Optional[ScoreFunction] = None) -> SearchResult:
        """Search for a solution.

        Args:
            state: Initial puzzle state; it is cloned, never mutated
            score: Score function for this run only

        Returns:
            SearchResult with statistics taken from the search tree
        """
        start_time = self._start_clock()
        score_fn = score or self.score or self.default_score
        frontier = Frontier(score_fn, self.config.tie_break)
        max_nodes = self.config.max_nodes

        root = frontier.add(state.clone())
        if root.state.is_goal():
            return self._finish(True, start_time, frontier.tree, [root.state.exit_move()],
                                "solution_found")
        frontier.push(root)

        try:
            while True:
                node = frontier.pop()
                if node is None:
                    return self._finish(False, start_time, frontier.tree,
                                        reason="search_exhausted")
                self._check_deadline(len(frontier.tree))

                children = frontier.expand(node, self._moves(node.state))
                for child in children:
                    if child.state.is_goal():
                        moves = frontier.tree.path(child.index) + [child.state.exit_move()]
                        return self._finish(True, start_time, frontier.tree, moves,
                                            "solution_found")
                for child in children:
                    frontier.push(child)

                if max_nodes and len(frontier.tree) >= max_nodes:
                    logger.warning(f"Best-first search hit node cap {max_nodes}")
                    return self._finish(False, start_time, frontier.tree, reason="max_nodes")
        except SearchTimeout:
            logger.warning(f"Best-first search timed out after {len(frontier.tree)} nodes")
            return self._finish(False, start_time, frontier.tree, reason="timeout")

    def _finish(self, success: bool, start_time: float, tree: SearchTree,
                moves: Optional[List[Move]] = None, reason: str = "unknown") -> SearchResult:
        return self._result(success, start_time, moves, nodes_scanned=len(tree),
                            min_depth=tree.min_depth, max_depth=tree.max_depth,
                            termination_reason=reason)


def depth_score(state: PuzzleState, depth: int, action: Optional[Move],
                parent_hash: Optional[str]) -> int:
    """Score by depth only (breadth-first order)."""
    return depth


def create_best_first_searcher(config: Optional[SearchConfig] = None,
                               heuristic: Optional[BaseHeuristic] = None,
                               score: Optional[ScoreFunction] = None) -> BestFirstSearcher:
    """Factory function to create a best-first searcher."""
    return BestFirstSearcher(config, heuristic, score)
