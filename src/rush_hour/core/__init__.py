"""Board model for the Rush Hour solver."""

from .data_models import (
    BOARD_SIZE, EMPTY, EXIT_ROW, TARGET,
    Direction, Move, Orientation, Vehicle,
    format_solution, parse_solution,
)
from .exceptions import (
    RushHourError, MalformedLevel, IllegalMove, NoSolutionWithinBound,
    SearchTimeout, NoConvergence, UnknownAlgorithm, UnknownHeuristic,
)
from .puzzle import PuzzleState, opposite_move

__all__ = [
    'BOARD_SIZE',
    'EMPTY',
    'EXIT_ROW',
    'TARGET',
    'Direction',
    'Move',
    'Orientation',
    'Vehicle',
    'format_solution',
    'parse_solution',
    'RushHourError',
    'MalformedLevel',
    'IllegalMove',
    'NoSolutionWithinBound',
    'SearchTimeout',
    'NoConvergence',
    'UnknownAlgorithm',
    'UnknownHeuristic',
    'PuzzleState',
    'opposite_move',
]
