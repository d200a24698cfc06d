"""Cost-bounded depth-first search and IDA*."""

import logging
from typing import List, Optional, Set

from rush_hour.core.data_models import Move
from rush_hour.core.exceptions import NoSolutionWithinBound, SearchTimeout
from rush_hour.core.puzzle import PuzzleState
from rush_hour.search.base import BaseSearcher, PathNode, SearchResult
from rush_hour.search.uninformed import DEADLINE_CHECK_INTERVAL

logger = logging.getLogger(__name__)


class CostBoundedSearcher(BaseSearcher):
    """Depth-first search that expands a node only while depth + h <= bound.

    States already on the current path are skipped to avoid cycles. The
    shallowest leaf is the smallest depth at which a branch was pruned or
    had nothing left to expand.
    """

    name = "cost_bounded"

    def _reset(self) -> None:
        self._nodes = 0
        self._max_depth = 0
        self._min_leaf: Optional[int] = None
        self._next_bound: Optional[int] = None

    def search(self, state: PuzzleState, bound: int) -> SearchResult:
        """Run a single cost-bounded episode.

        Args:
            state: Initial puzzle state
            bound: Largest f = depth + h allowed for expansion

        Returns:
            SearchResult; "cutoff" if the bound was exhausted
        """
        start_time = self._start_clock()
        try:
            moves = self.run_bounded(state.clone(), bound)
        except NoSolutionWithinBound as e:
            return self._result(False, start_time, nodes_scanned=e.nodes_scanned,
                                min_depth=e.min_depth or 0, max_depth=e.max_depth,
                                termination_reason="cutoff")
        except SearchTimeout as e:
            return self._result(False, start_time, nodes_scanned=e.nodes_scanned,
                                max_depth=self._max_depth, termination_reason="timeout")
        return self._result(True, start_time, moves, nodes_scanned=self._nodes,
                            min_depth=self._min_leaf or 0, max_depth=self._max_depth,
                            termination_reason="solution_found")

    def run_bounded(self, board: PuzzleState, bound: int) -> List[Move]:
        """Run one episode on ``board``, restoring it before returning.

        Raises:
            NoSolutionWithinBound: With ``next_bound`` set to the smallest
                f-value that exceeded ``bound``, or None if nothing was pruned
            SearchTimeout: If the deadline passes
        """
        self._reset()
        on_path: Set[str] = {board.hash()}
        moves = self._explore(board, PathNode(None, None, 0), self.heuristic(board),
                              bound, on_path)
        if moves is None:
            raise NoSolutionWithinBound(bound, nodes_scanned=self._nodes,
                                        next_bound=self._next_bound,
                                        max_depth=self._max_depth,
                                        min_depth=self._min_leaf)
        return moves

    def _explore(self, board: PuzzleState, node: PathNode, h: int, bound: int,
                 on_path: Set[str]) -> Optional[List[Move]]:
        self._nodes += 1
        if self._nodes % DEADLINE_CHECK_INTERVAL == 0:
            self._check_deadline(self._nodes)
        self._max_depth = max(self._max_depth, node.depth)

        if board.is_goal():
            return node.path() + [board.exit_move()]

        f = node.depth + h
        if f > bound:
            if self._next_bound is None or f < self._next_bound:
                self._next_bound = f
            self._mark_leaf(node.depth)
            return None

        depth = node.depth + 1
        expanded = False
        for move in self._moves(board):
            with board.applied(move):
                key = board.hash()
                if key in on_path:
                    continue
                expanded = True
                on_path.add(key)
                try:
                    found = self._explore(board, PathNode(node, move, depth),
                                          self.heuristic(board), bound, on_path)
                finally:
                    on_path.discard(key)
            if found is not None:
                return found

        if not expanded:
            self._mark_leaf(node.depth)
        return None


class IDAStarSearcher(CostBoundedSearcher):
    """Iterative deepening on f = depth + h.

    The first bound is h(root); each later bound is the smallest f-value
    pruned by the previous iteration.
    """

    name = "ida_star"

    def search(self, state: PuzzleState, max_bound: Optional[int] = None) -> SearchResult:
        """Search with growing cost bounds.

        Args:
            state: Initial puzzle state
            max_bound: Give up once the bound exceeds this; defaults to
                ``config.max_depth``

        Returns:
            SearchResult with node counts summed over all iterations and
            depth statistics taken across them
        """
        start_time = self._start_clock()
        max_bound = self.config.max_depth if max_bound is None else max_bound
        board = state.clone()
        bound = self.heuristic(board)
        total_nodes = 0
        deepest = 0
        shallowest: Optional[int] = None
        iterations = 0

        def shallower(depth: Optional[int]) -> Optional[int]:
            if depth is None:
                return shallowest
            return depth if shallowest is None else min(shallowest, depth)

        logger.info(f"Starting IDA* with {self.heuristic.name} heuristic, initial bound {bound}")
        while bound <= max_bound:
            iterations += 1
            try:
                moves = self.run_bounded(board, bound)
            except NoSolutionWithinBound as e:
                total_nodes += e.nodes_scanned
                deepest = max(deepest, e.max_depth)
                shallowest = shallower(e.min_depth)
                logger.debug(f"Bound {bound}: no solution, {e.nodes_scanned} nodes, "
                             f"next bound {e.next_bound}")
                if e.next_bound is None:
                    return self._result(False, start_time, nodes_scanned=total_nodes,
                                        min_depth=shallowest or 0, max_depth=deepest,
                                        iterations=iterations,
                                        termination_reason="search_exhausted")
                bound = e.next_bound
                continue
            except SearchTimeout as e:
                logger.warning(f"IDA* timed out at bound {bound}")
                return self._result(False, start_time, nodes_scanned=total_nodes + e.nodes_scanned,
                                    min_depth=shallowest or 0, max_depth=deepest,
                                    iterations=iterations, termination_reason="timeout")

            total_nodes += self._nodes
            shallowest = shallower(self._min_leaf)
            return self._result(True, start_time, moves, nodes_scanned=total_nodes,
                                min_depth=shallowest or 0,
                                max_depth=max(deepest, self._max_depth),
                                iterations=iterations, termination_reason="solution_found")

        return self._result(False, start_time, nodes_scanned=total_nodes,
                            min_depth=shallowest or 0, max_depth=deepest,
                            iterations=iterations, termination_reason="depth_limit")


def create_ida_star_searcher(config=None, heuristic=None) -> IDAStarSearcher:
    """Factory function to create an IDA* searcher."""
    return IDAStarSearcher(config, heuristic)
