"""Bidirectional best-first search.

The goal configuration of a Rush Hour level is not known up front, so a
forward best-first run supplies it first. Two frontiers then grow towards
each other, scored by depth plus the number of vehicles whose position
differs from the opposite endpoint, until one discovers a state the other
has already seen.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from rush_hour.core.data_models import Move
from rush_hour.core.exceptions import SearchTimeout
from rush_hour.core.puzzle import PuzzleState
from rush_hour.search.base import BaseSearcher, SearchConfig, SearchResult
from rush_hour.search.best_first import BestFirstSearcher, Frontier, SearchTree
from rush_hour.search.heuristics import BaseHeuristic

logger = logging.getLogger(__name__)


@dataclass
class BidirectionalResult:
    """Best-first run that located the goal and the bidirectional run after it."""
    best_first: SearchResult
    bidirectional: SearchResult

    @property
    def success(self) -> bool:
        return self.bidirectional.success

    @property
    def solution(self) -> Optional[str]:
        return self.bidirectional.solution

    @property
    def total_nodes(self) -> int:
        return self.best_first.nodes_scanned + self.bidirectional.nodes_scanned

    def to_dict(self) -> Dict[str, Any]:
        return {
            'best_first': self.best_first.to_dict(),
            'bidirectional': self.bidirectional.to_dict(),
            'total_nodes': self.total_nodes,
        }


class BidirectionalSearcher(BaseSearcher):
    """Meet-in-the-middle search between the initial and a known goal state."""

    name = "bidirectional"

    def __init__(self, config: Optional[SearchConfig] = None,
                 heuristic: Optional[BaseHeuristic] = None,
                 goal_searcher: Optional[BestFirstSearcher] = None):
        """Initialize bidirectional searcher.

        Args:
            config: Search configuration parameters
            heuristic: Heuristic for the goal-locating best-first run
            goal_searcher: Searcher used to find the goal configuration
        """
        super().__init__(config, heuristic)
        self.goal_searcher = goal_searcher or BestFirstSearcher(self.config, self.heuristic)

    def search(self, state: PuzzleState) -> BidirectionalResult:
        """Locate a goal state with best-first search, then search towards it from both ends.

        Args:
            state: Initial puzzle state

        Returns:
            BidirectionalResult holding both runs
        """
        forward = self.goal_searcher.search(state)
        if not forward.success:
            logger.warning(f"Goal search failed ({forward.termination_reason})")
            failed = SearchResult(success=False, termination_reason=forward.termination_reason,
                                  algorithm=self.name)
            return BidirectionalResult(forward, failed)

        goal = state.clone().replay(forward.moves[:-1])
        return BidirectionalResult(forward, self.meet(state, goal))

    def meet(self, initial: PuzzleState, goal: PuzzleState) -> SearchResult:
        """Search from ``initial`` and ``goal`` simultaneously.

        Forward and backward expansions alternate; the search stops as soon as
        a newly discovered state is already in the opposite frontier.

        Args:
            initial: Start state
            goal: Solved state reachable from ``initial``

        Returns:
            SearchResult whose moves lead from ``initial`` to ``goal`` followed
            by the exit action
        """
        start_time = self._start_clock()
        initial = initial.clone()
        goal = goal.clone()
        if initial.hash() == goal.hash():
            return self._result(True, start_time, [goal.exit_move()], nodes_scanned=1,
                                termination_reason="solution_found")

        forward = Frontier(lambda s, depth, a, p: depth + s.distance(goal), self.config.tie_break)
        backward = Frontier(lambda s, depth, a, p: depth + s.distance(initial),
                            self.config.tie_break)
        forward.push(forward.add(initial.clone()))
        backward.push(backward.add(goal.clone()))
        max_nodes = self.config.max_nodes

        def finish(success: bool, reason: str, moves: Optional[List[Move]] = None) -> SearchResult:
            return self._result(
                success, start_time, moves,
                nodes_scanned=len(forward.tree) + len(backward.tree),
                min_depth=min(forward.tree.min_depth, backward.tree.min_depth),
                max_depth=max(forward.tree.max_depth, backward.tree.max_depth),
                termination_reason=reason,
            )

        try:
            while True:
                for frontier, other, is_forward in ((forward, backward, True),
                                                    (backward, forward, False)):
                    node = frontier.pop()
                    if node is None:
                        return finish(False, "search_exhausted")
                    self._check_deadline(len(forward.tree) + len(backward.tree))

                    children = frontier.expand(node, self._moves(node.state))
                    for child in children:
                        match = other.visited.get(child.key)
                        if match is None:
                            continue
                        if is_forward:
                            moves = self._join(forward.tree, child.index, backward.tree, match)
                        else:
                            moves = self._join(forward.tree, match, backward.tree, child.index)
                        return finish(True, "solution_found", moves + [goal.exit_move()])
                    for child in children:
                        frontier.push(child)

                    if max_nodes and len(forward.tree) + len(backward.tree) >= max_nodes:
                        logger.warning(f"Bidirectional search hit node cap {max_nodes}")
                        return finish(False, "max_nodes")
        except SearchTimeout:
            logger.warning("Bidirectional search timed out")
            return finish(False, "timeout")

    @staticmethod
    def _join(forward: SearchTree, forward_index: int,
              backward: SearchTree, backward_index: int) -> List[Move]:
        """Forward path to the meeting state, then the backward path undone in reverse."""
        tail = [move.opposite() for move in reversed(backward.path(backward_index))]
        return forward.path(forward_index) + tail


def create_bidirectional_searcher(config: Optional[SearchConfig] = None,
                                  heuristic: Optional[BaseHeuristic] = None) -> BidirectionalSearcher:
    """Factory function to create a bidirectional searcher."""
    return BidirectionalSearcher(config, heuristic)
