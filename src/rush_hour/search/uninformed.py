"""Depth-limited and iterative-deepening search.

Both searches mutate a single private copy of the board and undo every move
on the way back up, so memory stays proportional to the depth limit.
"""

import logging
from typing import Dict, List, Optional

from rush_hour.core.data_models import Move
from rush_hour.core.exceptions import NoSolutionWithinBound, SearchTimeout
from rush_hour.core.puzzle import PuzzleState
from rush_hour.search.base import BaseSearcher, PathNode, SearchResult

logger = logging.getLogger(__name__)

# Deadline is polled once per this many nodes
DEADLINE_CHECK_INTERVAL = 256


class DepthLimitedSearcher(BaseSearcher):
    """Depth-first search that never goes below a fixed depth."""

    name = "dls"

    def _reset(self) -> None:
        self._nodes = 0
        self._max_depth = 0
        self._min_leaf: Optional[int] = None
        self._cutoff = False

    def search(self, state: PuzzleState, limit: int) -> SearchResult:
        """Search for a solution of at most ``limit`` board moves.

        Args:
            state: Initial puzzle state
            limit: Maximum number of board moves before the exit action

        Returns:
            SearchResult; ``termination_reason`` is "cutoff" if the limit was
            exhausted without reaching the goal
        """
        start_time = self._start_clock()
        logger.info(f"Starting depth-limited search with limit {limit}")
        try:
            moves = self.run_bounded(state.clone(), limit)
        except NoSolutionWithinBound as e:
            return self._result(False, start_time, nodes_scanned=e.nodes_scanned,
                                min_depth=e.min_depth or 0, max_depth=e.max_depth,
                                termination_reason="cutoff")
        except SearchTimeout as e:
            logger.warning(f"Depth-limited search timed out after {e.nodes_scanned} nodes")
            return self._result(False, start_time, nodes_scanned=e.nodes_scanned,
                                max_depth=self._max_depth, termination_reason="timeout")

        return self._result(True, start_time, moves, nodes_scanned=self._nodes,
                            min_depth=self._min_leaf or 0, max_depth=self._max_depth,
                            termination_reason="solution_found")

    def run_bounded(self, board: PuzzleState, limit: int) -> List[Move]:
        """Run one depth-limited episode on ``board``.

        The board is restored before this returns or raises.

        Raises:
            NoSolutionWithinBound: If no goal lies within ``limit`` moves.
                ``next_bound`` is ``limit + 1`` when some branch was cut at the
                limit and None when the whole reachable space was exhausted.
            SearchTimeout: If the deadline passes
        """
        self._reset()
        visited: Optional[Dict[str, int]] = None
        if self.config.use_visited:
            visited = {board.hash(): 0}

        moves = self._explore(board, PathNode(None, None, 0), limit, visited)
        if moves is None:
            raise NoSolutionWithinBound(
                limit,
                nodes_scanned=self._nodes,
                next_bound=limit + 1 if self._cutoff else None,
                max_depth=self._max_depth,
                min_depth=self._min_leaf,
            )
        return moves

    def _explore(self, board: PuzzleState, node: PathNode, limit: int,
                 visited: Optional[Dict[str, int]]) -> Optional[List[Move]]:
        self._nodes += 1
        if self._nodes % DEADLINE_CHECK_INTERVAL == 0:
            self._check_deadline(self._nodes)
        self._max_depth = max(self._max_depth, node.depth)

        if board.is_goal():
            return node.path() + [board.exit_move()]

        if node.depth >= limit:
            self._cutoff = True
            self._mark_leaf(node.depth)
            return None

        depth = node.depth + 1
        expanded = False
        for move in self._moves(board):
            with board.applied(move):
                if visited is not None:
                    key = board.hash()
                    seen = visited.get(key)
                    if seen is not None and seen <= depth:
                        continue
                    visited[key] = depth
                expanded = True
                found = self._explore(board, PathNode(node, move, depth), limit, visited)
            if found is not None:
                return found

        if not expanded:
            self._mark_leaf(node.depth)
        return None


class IterativeDeepeningSearcher(DepthLimitedSearcher):
    """Depth-limited search with limits 0, 1, 2, ... up to ``max_depth``."""

    name = "ids"

    def search(self, state: PuzzleState, max_depth: Optional[int] = None) -> SearchResult:
        """Find a solution with the fewest board moves.

        Args:
            state: Initial puzzle state
            max_depth: Largest limit to try; defaults to ``config.max_depth``

        Returns:
            SearchResult with node counts summed over all iterations
        """
        start_time = self._start_clock()
        max_depth = self.config.max_depth if max_depth is None else max_depth
        board = state.clone()
        total_nodes = 0
        deepest = 0
        iterations = 0

        logger.info(f"Starting iterative deepening up to depth {max_depth}")
        for limit in range(max_depth + 1):
            iterations += 1
            try:
                moves = self.run_bounded(board, limit)
            except NoSolutionWithinBound as e:
                total_nodes += e.nodes_scanned
                deepest = max(deepest, e.max_depth)
                logger.debug(f"Limit {limit}: no solution, {e.nodes_scanned} nodes")
                if e.next_bound is None:
                    return self._result(False, start_time, nodes_scanned=total_nodes,
                                        min_depth=e.min_depth or 0, max_depth=deepest,
                                        iterations=iterations,
                                        termination_reason="search_exhausted")
                continue
            except SearchTimeout as e:
                logger.warning(f"Iterative deepening timed out at limit {limit}")
                return self._result(False, start_time, nodes_scanned=total_nodes + e.nodes_scanned,
                                    max_depth=deepest, iterations=iterations,
                                    termination_reason="timeout")

            total_nodes += self._nodes
            return self._result(True, start_time, moves, nodes_scanned=total_nodes,
                                min_depth=self._min_leaf or 0,
                                max_depth=max(deepest, self._max_depth),
                                iterations=iterations, termination_reason="solution_found")

        return self._result(False, start_time, nodes_scanned=total_nodes, max_depth=deepest,
                            iterations=iterations, termination_reason="depth_limit")


def create_dls_searcher(config=None, heuristic=None) -> DepthLimitedSearcher:
    """Factory function to create a depth-limited searcher."""
    return DepthLimitedSearcher(config, heuristic)


def create_ids_searcher(config=None, heuristic=None) -> IterativeDeepeningSearcher:
    """Factory function to create an iterative-deepening searcher."""
    return IterativeDeepeningSearcher(config, heuristic)
