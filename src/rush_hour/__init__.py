"""Rush Hour solver.

Search algorithms (depth-limited, iterative deepening, IDA*, best-first,
bidirectional) and perceptron weight learning for the 6x6 Rush Hour puzzle.
"""

__version__ = "0.1.0"

from rush_hour.core import Move, PuzzleState, format_solution, parse_solution
from rush_hour.core.exceptions import (
    IllegalMove, MalformedLevel, NoConvergence, RushHourError, UnknownAlgorithm,
)
from rush_hour.search.base import SearchConfig, SearchResult
from rush_hour.solver import ALGORITHMS, create_searcher, solve

__all__ = [
    'Move',
    'PuzzleState',
    'format_solution',
    'parse_solution',
    'IllegalMove',
    'MalformedLevel',
    'NoConvergence',
    'RushHourError',
    'UnknownAlgorithm',
    'SearchConfig',
    'SearchResult',
    'ALGORITHMS',
    'create_searcher',
    'solve',
]
