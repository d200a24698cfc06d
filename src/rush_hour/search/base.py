"""Shared search configuration, results and the searcher base class."""

import logging
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from rush_hour.core.data_models import Move, format_solution
from rush_hour.core.exceptions import SearchTimeout
from rush_hour.core.puzzle import PuzzleState
from rush_hour.search.heuristics import BaseHeuristic, create_heuristic

logger = logging.getLogger(__name__)

ALGORITHM_NAMES = ('dls', 'ids', 'ida_star', 'best_first', 'bidirectional', 'perceptron')
TIE_BREAKS = ('fifo', 'lifo')

# (state, depth, action, parent state hash) -> score; lower is expanded first
ScoreFunction = Callable[[PuzzleState, int, Optional[Move], Optional[str]], int]


@dataclass
class SearchConfig:
    """Configuration for all search algorithms."""
    heuristic: str = "composite"  # Heuristic used for informed scoring
    composite_members: Optional[List[str]] = None  # None selects the default members
    recursive_depth: int = 2  # Depth bound of the recursive unblock heuristic
    penalty: int = 1  # Per-obstruction penalty of the recursive unblock heuristic
    distinct_depth: int = 3  # Depth bound of the distinct-vehicles heuristic
    tie_break: str = "fifo"  # Order among equal scores in best-first frontiers
    randomize_moves: bool = False  # Shuffle move order on every expansion
    seed: Optional[int] = None  # Seed for move shuffling
    max_nodes: int = 0  # Cap on discovered states, 0 disables
    max_computation_time: Optional[float] = None  # Cooperative deadline in seconds
    max_depth: int = 50  # Largest limit/bound tried by iterative deepening
    use_visited: bool = True  # Per-episode duplicate pruning in depth-limited search

    def create_heuristic(self) -> BaseHeuristic:
        return create_heuristic(
            self.heuristic,
            members=self.composite_members,
            recursive_depth=self.recursive_depth,
            penalty=self.penalty,
            distinct_depth=self.distinct_depth,
        )

    @classmethod
    def from_config(cls, cfg: Any, algorithm: Optional[str] = None) -> 'SearchConfig':
        """Build a SearchConfig from a loaded DictConfig.

        Args:
            cfg: Configuration with ``search`` and ``heuristics`` sections
            algorithm: If given, ``search.<algorithm>`` entries override the
                shared search settings

        Returns:
            SearchConfig instance
        """
        search_cfg = cfg.get('search', {}) or {}
        heur_cfg = cfg.get('heuristics', {}) or {}
        config = cls()

        for key in ('heuristic', 'tie_break', 'randomize_moves', 'seed', 'max_nodes',
                    'max_computation_time', 'max_depth'):
            if key in search_cfg:
                setattr(config, key, search_cfg.get(key))

        if 'recursive_depth' in heur_cfg:
            config.recursive_depth = int(heur_cfg.recursive_depth)
        if 'penalty' in heur_cfg:
            config.penalty = int(heur_cfg.penalty)
        if 'distinct_depth' in heur_cfg:
            config.distinct_depth = int(heur_cfg.distinct_depth)
        members = heur_cfg.get('composite_members', None)
        if members:
            config.composite_members = [str(m) for m in members]

        dls_cfg = search_cfg.get('dls', {}) or {}
        if 'use_visited' in dls_cfg:
            config.use_visited = bool(dls_cfg.use_visited)

        if algorithm is not None:
            overrides = search_cfg.get(algorithm, {}) or {}
            for key, value in overrides.items():
                if hasattr(config, key):
                    setattr(config, key, value)

        return config


@dataclass
class SearchResult:
    """Result of a search run."""
    success: bool
    moves: List[Move] = field(default_factory=list)  # Ends with the exit action
    nodes_scanned: int = 0
    depth_ratio: float = 0.0  # Solution length over nodes scanned
    min_depth: int = 0
    max_depth: int = 0
    iterations: int = 1
    computation_time: float = 0.0
    termination_reason: str = "unknown"
    algorithm: str = ""
    heuristic_stats: Optional[Dict[str, Any]] = None

    @property
    def solution(self) -> Optional[str]:
        """Space-separated action tokens, or None if no solution was found."""
        if not self.success:
            return None
        return format_solution(self.moves)

    @property
    def solution_length(self) -> int:
        return len(self.moves)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            'success': self.success,
            'solution': self.solution,
            'nodes_scanned': self.nodes_scanned,
            'depth_ratio': self.depth_ratio,
            'min_depth': self.min_depth,
            'max_depth': self.max_depth,
            'iterations': self.iterations,
            'computation_time': self.computation_time,
            'termination_reason': self.termination_reason,
            'algorithm': self.algorithm,
        }


@dataclass
class PathNode:
    """Parent-pointer node used by the mutate-and-undo searches."""
    parent: Optional['PathNode']
    action: Optional[Move]
    depth: int

    def path(self) -> List[Move]:
        """Sequence of actions from the root to this node."""
        actions = []
        node = self
        while node.parent is not None:
            actions.append(node.action)
            node = node.parent
        return list(reversed(actions))


class BaseSearcher(ABC):
    """Base class holding configuration, heuristic, move order and deadline."""

    name: str = "base"

    def __init__(self, config: Optional[SearchConfig] = None,
                 heuristic: Optional[BaseHeuristic] = None):
        """Initialize searcher.

        Args:
            config: Search configuration parameters
            heuristic: Heuristic override; built from the config if omitted
        """
        self.config = config or SearchConfig()
        self.heuristic = heuristic or self.config.create_heuristic()
        self._rng = random.Random(self.config.seed) if self.config.randomize_moves else None
        self._deadline: Optional[float] = None
        self._min_leaf: Optional[int] = None

    @abstractmethod
    def search(self, state: PuzzleState, *args: Any, **kwargs: Any) -> Any:
        """Run the search from ``state``; the caller's state is left untouched."""
        pass

    def _start_clock(self) -> float:
        start_time = time.perf_counter()
        limit = self.config.max_computation_time
        self._deadline = start_time + limit if limit else None
        return start_time

    def _check_deadline(self, nodes_scanned: int) -> None:
        if self._deadline is not None and time.perf_counter() > self._deadline:
            raise SearchTimeout(nodes_scanned)

    def _moves(self, state: PuzzleState) -> List[Move]:
        return state.possible_moves(self._rng)

    def _mark_leaf(self, depth: int) -> None:
        """Record a branch ending at ``depth`` for the shallowest-leaf statistic."""
        if self._min_leaf is None or depth < self._min_leaf:
            self._min_leaf = depth

    def _result(self, success: bool, start_time: float, moves: Optional[List[Move]] = None,
                nodes_scanned: int = 0, min_depth: int = 0, max_depth: int = 0,
                iterations: int = 1, termination_reason: str = "unknown") -> SearchResult:
        moves = moves or []
        result = SearchResult(
            success=success,
            moves=moves,
            nodes_scanned=nodes_scanned,
            depth_ratio=len(moves) / nodes_scanned if success and nodes_scanned else 0.0,
            min_depth=min_depth,
            max_depth=max_depth,
            iterations=iterations,
            computation_time=time.perf_counter() - start_time,
            termination_reason=termination_reason,
            algorithm=self.name,
            heuristic_stats=self.heuristic.get_stats(),
        )
        if success:
            logger.info(f"{self.name}: solved in {len(moves)} actions, "
                        f"{nodes_scanned} nodes, {result.computation_time:.3f}s")
        else:
            logger.info(f"{self.name}: no solution ({termination_reason}), {nodes_scanned} nodes")
        return result
