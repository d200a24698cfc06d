"""Exception hierarchy for the Rush Hour solver."""

from typing import List, Optional


class RushHourError(Exception):
    """Base exception class for Rush Hour errors."""
    pass


class MalformedLevel(RushHourError, ValueError):
    """Raised when a level string cannot be turned into a valid board."""
    pass


class IllegalMove(RushHourError):
    """Raised when a checked move would overlap a vehicle or leave the board."""
    pass


class NoSolutionWithinBound(RushHourError):
    """A bounded search exhausted its space without reaching the goal.

    This is a normal signal, not a failure: iterative wrappers catch it and
    retry with a larger bound.
    """

    def __init__(self, bound: int, nodes_scanned: int = 0,
                 next_bound: Optional[int] = None, max_depth: int = 0,
                 min_depth: Optional[int] = None):
        super().__init__(f"No solution within bound {bound}")
        self.bound = bound
        self.nodes_scanned = nodes_scanned
        self.next_bound = next_bound
        self.max_depth = max_depth
        self.min_depth = min_depth


class SearchTimeout(RushHourError):
    """Raised inside a search once its deadline has passed."""

    def __init__(self, nodes_scanned: int = 0):
        super().__init__("Search deadline exceeded")
        self.nodes_scanned = nodes_scanned


class NoConvergence(RushHourError):
    """The weight-learning loop did not reach the reference solution length."""

    def __init__(self, iterations: int, history: Optional[List[int]] = None):
        super().__init__(f"Weight learning did not converge after {iterations} iterations")
        self.iterations = iterations
        self.history = list(history or [])


class UnknownAlgorithm(RushHourError, KeyError):
    """Raised when an algorithm name is not registered."""
    pass


class UnknownHeuristic(RushHourError, KeyError):
    """Raised when a heuristic name is not registered."""
    pass
