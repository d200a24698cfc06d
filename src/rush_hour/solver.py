"""Algorithm registry and the ``solve`` entry point."""

import concurrent.futures
import dataclasses
import logging
import time
from typing import Dict, Optional, Type

from rush_hour.config import get_config
from rush_hour.core.exceptions import UnknownAlgorithm
from rush_hour.core.puzzle import PuzzleState
from rush_hour.learning.perceptron import LearningConfig, WeightLearner
from rush_hour.search.base import ALGORITHM_NAMES, BaseSearcher, ScoreFunction, SearchConfig, SearchResult
from rush_hour.search.best_first import BestFirstSearcher
from rush_hour.search.bidirectional import BidirectionalSearcher
from rush_hour.search.heuristics import BaseHeuristic
from rush_hour.search.ida_star import IDAStarSearcher
from rush_hour.search.uninformed import DepthLimitedSearcher, IterativeDeepeningSearcher

logger = logging.getLogger(__name__)

ALGORITHMS: Dict[str, Type[BaseSearcher]] = {
    'dls': DepthLimitedSearcher,
    'ids': IterativeDeepeningSearcher,
    'ida_star': IDAStarSearcher,
    'best_first': BestFirstSearcher,
    'bidirectional': BidirectionalSearcher,
}

DEFAULT_ALGORITHM = "best_first"


def _check_algorithm(algorithm: str) -> None:
    if algorithm not in ALGORITHM_NAMES:
        raise UnknownAlgorithm(
            f"Unknown algorithm: {algorithm}. Available: {', '.join(ALGORITHM_NAMES)}"
        )


def search_config_for(algorithm: str) -> SearchConfig:
    """SearchConfig from the global configuration, or defaults if none is loaded."""
    cfg = get_config()
    if cfg is None:
        return SearchConfig()
    return SearchConfig.from_config(cfg, algorithm)


def create_searcher(algorithm: str,
                    config: Optional[SearchConfig] = None,
                    heuristic: Optional[BaseHeuristic] = None) -> BaseSearcher:
    """Factory function to create a searcher by algorithm name.

    Args:
        algorithm: One of the names in ``ALGORITHMS``
        config: Search configuration; taken from the global config if omitted
        heuristic: Heuristic override

    Returns:
        Searcher instance

    Raises:
        UnknownAlgorithm: If the name is not a search algorithm
    """
    if algorithm not in ALGORITHMS:
        raise UnknownAlgorithm(
            f"Unknown search algorithm: {algorithm}. Available: {', '.join(ALGORITHMS)}"
        )
    return ALGORITHMS[algorithm](config or search_config_for(algorithm), heuristic)


def _run(state: PuzzleState, algorithm: str, config: SearchConfig,
         score: Optional[ScoreFunction], limit: Optional[int]) -> SearchResult:
    if algorithm == 'perceptron':
        cfg = get_config()
        learning_config = LearningConfig.from_config(cfg) if cfg is not None else LearningConfig()
        if limit is not None:
            learning_config.max_iterations = limit
        if config.max_computation_time is not None and learning_config.max_computation_time is None:
            learning_config.max_computation_time = config.max_computation_time
        return WeightLearner(learning_config).learn(state).final

    searcher = create_searcher(algorithm, config)
    if algorithm == 'dls':
        return searcher.search(state, config.max_depth if limit is None else limit)
    if algorithm == 'best_first':
        return searcher.search(state, score=score)
    if algorithm == 'bidirectional':
        return searcher.search(state).bidirectional
    return searcher.search(state, limit)


def solve(level: str,
          algorithm: Optional[str] = None,
          score: Optional[ScoreFunction] = None,
          timeout: Optional[float] = None,
          config: Optional[SearchConfig] = None,
          limit: Optional[int] = None) -> SearchResult:
    """Solve a level with the selected algorithm under a wall-clock timeout.

    The search runs on a worker thread. If it has not finished after
    ``timeout`` seconds a failed result with termination reason "timeout" is
    returned without waiting for the worker; the searcher's own deadline
    makes it stop shortly afterwards.

    Args:
        level: 36-character level string
        algorithm: Algorithm name; defaults to ``solver.algorithm`` from the
            global configuration, else best-first
        score: Score function for best-first search
        timeout: Seconds to wait; defaults to ``solver.timeout_seconds``
        config: Search configuration; taken from the global config if omitted
        limit: Depth limit for dls, largest depth/bound for ids and ida_star,
            iteration cap for perceptron

    Returns:
        SearchResult

    Raises:
        MalformedLevel: If the level cannot be parsed
        UnknownAlgorithm: If the algorithm name is not registered
        NoConvergence: If perceptron learning does not converge
    """
    cfg = get_config()
    if algorithm is None:
        algorithm = cfg.solver.algorithm if cfg is not None and 'solver' in cfg else DEFAULT_ALGORITHM
    if timeout is None and cfg is not None and 'solver' in cfg:
        timeout = cfg.solver.get('timeout_seconds', None)
    _check_algorithm(algorithm)
    if score is not None and algorithm != 'best_first':
        raise ValueError(f"A score function is only accepted by best_first, not {algorithm}")

    state = PuzzleState(level)
    config = config or search_config_for(algorithm)
    if timeout is not None and config.max_computation_time is None:
        config = dataclasses.replace(config, max_computation_time=timeout)

    logger.info(f"Solving with {algorithm} (timeout {timeout})")
    start_time = time.perf_counter()
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(_run, state, algorithm, config, score, limit)
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        logger.warning(f"{algorithm} did not finish within {timeout}s")
        return SearchResult(
            success=False,
            computation_time=time.perf_counter() - start_time,
            termination_reason="timeout",
            algorithm=algorithm,
        )
    finally:
        executor.shutdown(wait=False)
