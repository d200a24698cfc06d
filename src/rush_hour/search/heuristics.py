"""Heuristic evaluators for Rush Hour search.

Every evaluator maps a PuzzleState to a non-negative integer estimate of the
remaining work before the exit action. They are best-effort scores used for
move prioritization; only ``blocking`` and anything taking a minimum with it
are guaranteed admissible.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from rush_hour.core.data_models import BOARD_SIZE, EMPTY, EXIT_ROW, TARGET, Vehicle
from rush_hour.core.exceptions import UnknownHeuristic
from rush_hour.core.puzzle import PuzzleState

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]

# Cost charged for a vehicle that cannot leave the cell it has to vacate
UNESCAPABLE_COST = BOARD_SIZE


def escape_paths(state: PuzzleState, vehicle: Vehicle, row: int, col: int) -> List[List[Cell]]:
    """Cells a vehicle must sweep to stop covering the cell ``(row, col)``.

    The vehicle slides along its own axis. One list is returned per direction
    in which it fits on the board after the slide; a vehicle not covering the
    cell gets a single empty path. An obstacle lying on the same line as the
    vehicle it obstructs is handled the same way: it is charged the slide
    along that shared line that takes it off the cell.
    """
    if (row, col) not in vehicle.cells():
        return [[]]
    position = col if vehicle.horizontal else row
    start = vehicle.col if vehicle.horizontal else vehicle.row
    end = start + vehicle.length - 1

    def to_cell(i: int) -> Cell:
        return (vehicle.row, i) if vehicle.horizontal else (i, vehicle.col)

    paths: List[List[Cell]] = []
    # Backward (up or left): new end must be position - 1
    new_start = position - vehicle.length
    if new_start >= 0:
        paths.append([to_cell(i) for i in range(start - 1, new_start - 1, -1)])
    # Forward (down or right): new start must be position + 1
    new_end = position + vehicle.length
    if new_end < BOARD_SIZE:
        paths.append([to_cell(i) for i in range(end + 1, new_end + 1)])
    return paths


def exit_escape_paths(state: PuzzleState, label: str) -> List[List[Cell]]:
    """Escape paths that take a blocking vehicle off the exit row.

    A horizontal vehicle on the exit row can never leave it, so it has none.
    """
    vehicle = state.vehicles[label]
    if vehicle.horizontal:
        return []
    return escape_paths(state, vehicle, EXIT_ROW, vehicle.col)


def _occupants(state: PuzzleState, path: Sequence[Cell], exclude: str) -> List[Tuple[str, Cell]]:
    """Distinct vehicles on a path with the first cell each one covers, in path order."""
    found: List[Tuple[str, Cell]] = []
    seen: Set[str] = set()
    for r, c in path:
        item = state.cell(r, c)
        if item != EMPTY and item != exclude and item not in seen:
            seen.add(item)
            found.append((item, (r, c)))
    return found


class BaseHeuristic(ABC):
    """Abstract base class for heuristics."""

    def __init__(self, name: str):
        """Initialize heuristic.

        Args:
            name: Name of the heuristic
        """
        self.name = name
        self.computation_count = 0
        self.total_computation_time = 0.0

    @abstractmethod
    def compute(self, state: PuzzleState) -> int:
        """Compute heuristic value.

        Args:
            state: Puzzle state to evaluate

        Returns:
            Non-negative integer estimate
        """
        pass

    def __call__(self, state: PuzzleState) -> int:
        """Compute heuristic with timing and statistics."""
        start_time = time.perf_counter()
        value = self.compute(state)
        self.computation_count += 1
        self.total_computation_time += time.perf_counter() - start_time
        return value

    def get_stats(self) -> Dict[str, Any]:
        """Get computation statistics."""
        avg_time = (self.total_computation_time / self.computation_count
                    if self.computation_count > 0 else 0.0)

        return {
            'name': self.name,
            'computation_count': self.computation_count,
            'total_time': self.total_computation_time,
            'average_time': avg_time,
            'average_time_us': avg_time * 1000000
        }


class BlockingCountHeuristic(BaseHeuristic):
    """Number of vehicles between the target vehicle and the exit."""

    def __init__(self):
        super().__init__("blocking")

    def compute(self, state: PuzzleState) -> int:
        return len(state.blocking_vehicles())


class ExitDistanceHeuristic(BaseHeuristic):
    """Number of empty cells between the target vehicle and the exit."""

    def __init__(self):
        super().__init__("exit_distance")

    def compute(self, state: PuzzleState) -> int:
        path = state.grid[EXIT_ROW, state.target.end_col + 1:]
        return int((path == EMPTY).sum())


class RecursiveUnblockHeuristic(BaseHeuristic):
    """Recursive cost of clearing the exit row.

    Each blocking vehicle costs ``penalty`` plus the cheapest way to clear its
    own escape path, where every obstacle on that path is charged the same
    way one level deeper. Recursion stops after ``depth`` levels.
    """

    def __init__(self, depth: int = 2, penalty: int = 1):
        super().__init__("recursive_unblock")
        self.depth = depth
        self.penalty = penalty

    def compute(self, state: PuzzleState) -> int:
        if self.depth <= 0:
            return 0
        return sum(
            self.penalty + self._clear_cost(state, label, exit_escape_paths(state, label),
                                            self.depth - 1)
            for label in state.blocking_vehicles()
        )

    def _clear_cost(self, state: PuzzleState, label: str, paths: List[List[Cell]],
                    depth: int) -> int:
        if depth == 0:
            return 0
        if not paths:
            return UNESCAPABLE_COST
        costs = []
        for path in paths:
            costs.append(sum(
                self.penalty + self._clear_cost(
                    state, obstacle, escape_paths(state, state.vehicles[obstacle], *cell),
                    depth - 1)
                for obstacle, cell in _occupants(state, path, label)
            ))
        return min(costs)


class DistinctVehiclesHeuristic(BaseHeuristic):
    """Lower bound on the number of distinct vehicles that must move.

    Walks the blocking relation depth-first from the exit row. A vehicle is
    counted once even if it obstructs several paths; when a vehicle has more
    than one way out, the cheaper branch is kept.
    """

    def __init__(self, depth: int = 3):
        super().__init__("distinct_vehicles")
        self.depth = depth

    def compute(self, state: PuzzleState) -> int:
        visited: Set[str] = {TARGET}
        total = 0
        for label in state.blocking_vehicles():
            total += self._count(state, label, exit_escape_paths(state, label),
                                 visited, self.depth)
        return total

    def _count(self, state: PuzzleState, label: str, paths: List[List[Cell]],
               visited: Set[str], depth: int) -> int:
        if label in visited:
            return 0
        visited.add(label)
        if depth <= 1:
            return 1

        options = [_occupants(state, path, label) for path in paths]
        if not options or any(not obstacles for obstacles in options):
            return 1

        best: Optional[int] = None
        best_visited: Set[str] = visited
        for obstacles in options:
            branch_visited = set(visited)
            cost = sum(
                self._count(state, obstacle, escape_paths(state, state.vehicles[obstacle], *cell),
                            branch_visited, depth - 1)
                for obstacle, cell in obstacles
            )
            if best is None or cost < best:
                best, best_visited = cost, branch_visited
        visited.update(best_visited)
        return 1 + best


class UnblockDistanceHeuristic(BaseHeuristic):
    """Blocking vehicles plus how far each must slide to clear the exit row."""

    def __init__(self):
        super().__init__("unblock_distance")

    def compute(self, state: PuzzleState) -> int:
        total = 0
        for label in state.blocking_vehicles():
            paths = exit_escape_paths(state, label)
            total += 1 + (min(len(path) for path in paths) if paths else UNESCAPABLE_COST)
        return total


class UnblockObstaclesHeuristic(BaseHeuristic):
    """Like ``unblock_distance`` but also charges occupied cells on the escape path."""

    def __init__(self):
        super().__init__("unblock_obstacles")

    def compute(self, state: PuzzleState) -> int:
        total = 0
        for label in state.blocking_vehicles():
            paths = exit_escape_paths(state, label)
            if not paths:
                total += 1 + UNESCAPABLE_COST
                continue
            total += 1 + min(
                len(path) + sum(1 for r, c in path if state.cell(r, c) != EMPTY)
                for path in paths
            )
        return total


class IndicatorHeuristic(BaseHeuristic):
    """Adds the last-move indicators to another heuristic.

    One point if the last move left a new vehicle blocked and one point if it
    did not increase the number of free vehicles.
    """

    def __init__(self, base: BaseHeuristic):
        super().__init__(f"indicator_{base.name}")
        self.base = base

    def compute(self, state: PuzzleState) -> int:
        indicators = (1 if state.new_vehicle_blocked else 0) + (0 if state.freedom_increased else 1)
        return self.base.compute(state) + indicators


class CompositeHeuristic(BaseHeuristic):
    """Minimum over several member heuristics."""

    def __init__(self, members: Sequence[BaseHeuristic]):
        super().__init__("composite")
        if not members:
            raise ValueError("Composite heuristic needs at least one member")
        self.members = list(members)

    def compute(self, state: PuzzleState) -> int:
        return min(member.compute(state) for member in self.members)

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats['members'] = [member.name for member in self.members]
        return stats


DEFAULT_COMPOSITE_MEMBERS = [
    'blocking',
    'distinct_vehicles',
    'unblock_distance',
    'unblock_obstacles',
    'recursive_unblock',
]


def _recursive(recursive_depth: int = 2, penalty: int = 1, **_: Any) -> BaseHeuristic:
    return RecursiveUnblockHeuristic(depth=recursive_depth, penalty=penalty)


def _distinct(distinct_depth: int = 3, **_: Any) -> BaseHeuristic:
    return DistinctVehiclesHeuristic(depth=distinct_depth)


HEURISTICS: Dict[str, Callable[..., BaseHeuristic]] = {
    'blocking': lambda **_: BlockingCountHeuristic(),
    'exit_distance': lambda **_: ExitDistanceHeuristic(),
    'recursive_unblock': _recursive,
    'distinct_vehicles': _distinct,
    'unblock_distance': lambda **_: UnblockDistanceHeuristic(),
    'unblock_obstacles': lambda **_: UnblockObstaclesHeuristic(),
    'indicator_distinct_vehicles': lambda **kw: IndicatorHeuristic(_distinct(**kw)),
    'indicator_unblock_distance': lambda **_: IndicatorHeuristic(UnblockDistanceHeuristic()),
    'indicator_unblock_obstacles': lambda **_: IndicatorHeuristic(UnblockObstaclesHeuristic()),
}


def get_heuristic_names() -> List[str]:
    """Names accepted by ``create_heuristic``."""
    return list(HEURISTICS.keys()) + ['composite']


def create_heuristic(name: str,
                     members: Optional[Sequence[str]] = None,
                     recursive_depth: int = 2,
                     penalty: int = 1,
                     distinct_depth: int = 3) -> BaseHeuristic:
    """Factory function to create a heuristic by name.

    Args:
        name: Heuristic name (see ``get_heuristic_names``)
        members: Member names for the composite heuristic
        recursive_depth: Depth bound of the recursive unblock heuristic
        penalty: Per-obstruction penalty of the recursive unblock heuristic
        distinct_depth: Depth bound of the distinct-vehicles heuristic

    Returns:
        Heuristic instance

    Raises:
        UnknownHeuristic: If the name is not registered
    """
    options = dict(recursive_depth=recursive_depth, penalty=penalty,
                   distinct_depth=distinct_depth)
    if name == 'composite':
        member_names = list(members) if members else DEFAULT_COMPOSITE_MEMBERS
        if 'composite' in member_names:
            raise ValueError("Composite heuristic cannot contain itself")
        return CompositeHeuristic([create_heuristic(m, **options) for m in member_names])
    if name not in HEURISTICS:
        available = ", ".join(get_heuristic_names())
        raise UnknownHeuristic(f"Unknown heuristic: {name}. Available: {available}")
    return HEURISTICS[name](**options)
