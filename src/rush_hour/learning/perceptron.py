"""Structured-perceptron learning of per-action costs.

A reference solution is found once with breadth-first order. Best-first
search is then rerun with a score built from learned (state, action)
weights: a step costs one when its weight is negative. After each run that
is longer than the reference, the actions taken are discouraged and the
reference actions encouraged, until the lengths agree.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from rush_hour.core.data_models import Move, SolutionPair
from rush_hour.core.exceptions import NoConvergence
from rush_hour.core.puzzle import PuzzleState
from rush_hour.search.base import ScoreFunction, SearchConfig, SearchResult
from rush_hour.search.best_first import BestFirstSearcher, depth_score

logger = logging.getLogger(__name__)


@dataclass
class LearningConfig:
    """Configuration for the weight-learning loop.

    With ``tie_break="fifo"`` every score of the first weighted search is
    zero, so the search runs in breadth-first order and matches the reference
    length on the first iteration whatever the move order. Weights change
    only under ``tie_break="lifo"``, which expands the newest of the equally
    scored states first.
    """
    max_iterations: int = 25  # Searches after the reference before giving up
    tie_break: str = "fifo"
    randomize_moves: bool = False
    seed: Optional[int] = None
    max_nodes: int = 0  # Per-search node cap, 0 disables
    max_computation_time: Optional[float] = None  # Per-search deadline

    def search_config(self) -> SearchConfig:
        return SearchConfig(
            heuristic="blocking",
            tie_break=self.tie_break,
            randomize_moves=self.randomize_moves,
            seed=self.seed,
            max_nodes=self.max_nodes,
            max_computation_time=self.max_computation_time,
        )

    @classmethod
    def from_config(cls, cfg: Any) -> 'LearningConfig':
        """Build a LearningConfig from the ``learning`` and ``search`` sections."""
        config = cls()
        learning_cfg = cfg.get('learning', {}) or {}
        search_cfg = cfg.get('search', {}) or {}
        for key in ('randomize_moves', 'seed', 'max_nodes', 'max_computation_time'):
            if key in search_cfg:
                setattr(config, key, search_cfg.get(key))
        for key in ('max_iterations', 'tie_break', 'max_nodes', 'max_computation_time'):
            if key in learning_cfg:
                setattr(config, key, learning_cfg.get(key))
        return config


class WeightTable:
    """Integer weights keyed by (state hash, action token), default 0."""

    def __init__(self):
        self._weights: Dict[SolutionPair, int] = {}

    def __len__(self) -> int:
        return len(self._weights)

    def __contains__(self, pair: SolutionPair) -> bool:
        return pair in self._weights

    def weight(self, state_hash: str, token: str) -> int:
        return self._weights.get((state_hash, token), 0)

    def step_cost(self, parent_hash: Optional[str], move: Optional[Move]) -> int:
        """Cost of taking ``move`` from the state with ``parent_hash``.

        One if the pair is discouraged (negative weight), zero otherwise and
        for the root.
        """
        if parent_hash is None or move is None:
            return 0
        return 1 if self.weight(parent_hash, move.token) < 0 else 0

    def update(self, reference: Iterable[SolutionPair], observed: Iterable[SolutionPair]) -> None:
        """Perceptron update: discourage observed pairs, encourage reference pairs."""
        for pair in observed:
            self._weights[pair] = self._weights.get(pair, 0) - 1
        for pair in reference:
            self._weights[pair] = self._weights.get(pair, 0) + 1

    def items(self):
        return self._weights.items()


def solution_pairs(state: PuzzleState, moves: List[Move]) -> List[SolutionPair]:
    """(state hash, action token) pairs along a solution, excluding the exit action."""
    board = state.clone()
    pairs = []
    for move in moves[:-1]:
        pairs.append((board.hash(), move.token))
        board.apply_move(move, check=True)
    return pairs


@dataclass
class LearningResult:
    """Outcome of a converged learning run."""
    converged: bool
    iterations: int
    reference: SearchResult
    final: SearchResult
    history: List[int] = field(default_factory=list)  # Solution length per iteration


class WeightLearner:
    """Perceptron loop over best-first search with learned step costs."""

    def __init__(self, config: Optional[LearningConfig] = None,
                 weights: Optional[WeightTable] = None,
                 searcher: Optional[BestFirstSearcher] = None):
        """Initialize learner.

        Args:
            config: Learning configuration
            weights: Weight table to train; a fresh one by default
            searcher: Best-first searcher to run; built from the config by default
        """
        self.config = config or LearningConfig()
        self.weights = weights if weights is not None else WeightTable()
        self.searcher = searcher or BestFirstSearcher(self.config.search_config())

    def weighted_score(self) -> ScoreFunction:
        """Score: cumulative number of discouraged steps along the path."""
        path_cost: Dict[str, int] = {}

        def score(state: PuzzleState, depth: int, action: Optional[Move],
                  parent_hash: Optional[str]) -> int:
            cost = self.weights.step_cost(parent_hash, action)
            if parent_hash is not None:
                cost += path_cost.get(parent_hash, 0)
            path_cost[state.hash()] = cost
            return cost

        return score

    def learn(self, state: PuzzleState) -> LearningResult:
        """Train weights until the weighted search matches the reference length.

        Args:
            state: Initial puzzle state

        Returns:
            LearningResult of the converged run

        Raises:
            NoConvergence: If ``max_iterations`` searches pass without
                matching the reference length, or a search fails
        """
        reference = self.searcher.search(state, score=depth_score)
        if not reference.success:
            raise NoConvergence(0, [])
        reference_pairs = solution_pairs(state, reference.moves)
        target = len(reference.moves)
        logger.info(f"Reference solution has {target} actions")

        history: List[int] = []
        for iteration in range(1, self.config.max_iterations + 1):
            result = self.searcher.search(state, score=self.weighted_score())
            if not result.success:
                logger.warning(f"Weighted search failed ({result.termination_reason})")
                raise NoConvergence(iteration, history)
            history.append(len(result.moves))
            logger.debug(f"Iteration {iteration}: {len(result.moves)} actions")

            if len(result.moves) == target:
                logger.info(f"Converged after {iteration} iterations")
                return LearningResult(converged=True, iterations=iteration,
                                      reference=reference, final=result, history=history)

            self.weights.update(reference_pairs, solution_pairs(state, result.moves))

        logger.warning(f"No convergence after {self.config.max_iterations} iterations")
        raise NoConvergence(self.config.max_iterations, history)
