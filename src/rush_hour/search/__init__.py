"""Search algorithms and heuristics for Rush Hour."""

from .base import (
    ALGORITHM_NAMES, TIE_BREAKS, BaseSearcher, PathNode, ScoreFunction,
    SearchConfig, SearchResult,
)
from .heuristics import (
    BaseHeuristic, BlockingCountHeuristic, CompositeHeuristic,
    DistinctVehiclesHeuristic, ExitDistanceHeuristic, IndicatorHeuristic,
    RecursiveUnblockHeuristic, UnblockDistanceHeuristic, UnblockObstaclesHeuristic,
    create_heuristic, get_heuristic_names,
)
from .uninformed import DepthLimitedSearcher, IterativeDeepeningSearcher
from .ida_star import CostBoundedSearcher, IDAStarSearcher
from .best_first import BestFirstSearcher, Frontier, SearchNode, SearchTree, depth_score
from .bidirectional import BidirectionalResult, BidirectionalSearcher

__all__ = [
    'ALGORITHM_NAMES',
    'TIE_BREAKS',
    'BaseSearcher',
    'PathNode',
    'ScoreFunction',
    'SearchConfig',
    'SearchResult',
    'BaseHeuristic',
    'BlockingCountHeuristic',
    'CompositeHeuristic',
    'DistinctVehiclesHeuristic',
    'ExitDistanceHeuristic',
    'IndicatorHeuristic',
    'RecursiveUnblockHeuristic',
    'UnblockDistanceHeuristic',
    'UnblockObstaclesHeuristic',
    'create_heuristic',
    'get_heuristic_names',
    'DepthLimitedSearcher',
    'IterativeDeepeningSearcher',
    'CostBoundedSearcher',
    'IDAStarSearcher',
    'BestFirstSearcher',
    'Frontier',
    'SearchNode',
    'SearchTree',
    'depth_score',
    'BidirectionalResult',
    'BidirectionalSearcher',
]
