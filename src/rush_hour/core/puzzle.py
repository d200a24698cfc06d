"""Puzzle state for the 6x6 Rush Hour board.

The board is a numpy character grid kept consistent with a registry of
vehicles. States are mutated in place by ``apply_move``; searches that keep
historical states clone first.
"""

import logging
import random
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from .data_models import (
    BOARD_SIZE, EMPTY, EXIT_ROW, TARGET,
    Direction, Move, Orientation, Vehicle,
)
from .exceptions import IllegalMove, MalformedLevel

logger = logging.getLogger(__name__)


def opposite_move(move: Move) -> Move:
    """Return the move that exactly undoes ``move``."""
    return move.opposite()


class PuzzleState:
    """Board grid plus vehicle registry.

    Attributes:
        grid: BOARD_SIZE x BOARD_SIZE array of single characters
        vehicles: Mapping from vehicle label to Vehicle, in reading order
        freedom_increased: True if the last applied move increased the
            number of vehicles able to move
        new_vehicle_blocked: True if the last applied move left some vehicle
            blocked that was free before it

    The two indicator flags are computed on first access after a move, so
    searches that never read them pay nothing for them.
    """

    def __init__(self, level: str):
        """Parse a level string.

        Args:
            level: Row-major string of BOARD_SIZE**2 characters, '.' for empty

        Raises:
            MalformedLevel: If the string length or vehicle geometry is invalid
        """
        expected = BOARD_SIZE * BOARD_SIZE
        if len(level) != expected:
            raise MalformedLevel(
                f"Level must have {expected} characters, got {len(level)}"
            )

        cells: Dict[str, List[tuple]] = {}
        for index, item in enumerate(level):
            if item == EMPTY:
                continue
            if item.isspace():
                raise MalformedLevel(f"Whitespace in level at index {index}")
            cells.setdefault(item, []).append(divmod(index, BOARD_SIZE))

        vehicles: Dict[str, Vehicle] = {}
        for label, positions in cells.items():
            vehicles[label] = self._build_vehicle(label, positions)

        target = vehicles.get(TARGET)
        if target is None:
            raise MalformedLevel(f"Level has no target vehicle '{TARGET}'")
        if not target.horizontal or target.row != EXIT_ROW:
            raise MalformedLevel(
                f"Target vehicle '{TARGET}' must be horizontal on row {EXIT_ROW}"
            )

        self.grid = np.array(list(level), dtype='<U1').reshape(BOARD_SIZE, BOARD_SIZE)
        self.vehicles = vehicles
        self._last_move: Optional[Move] = None
        self._indicators: Optional[Tuple[bool, bool]] = None

    @classmethod
    def from_level(cls, level: str) -> 'PuzzleState':
        return cls(level)

    @staticmethod
    def _build_vehicle(label: str, positions: List[tuple]) -> Vehicle:
        length = len(positions)
        if length not in (2, 3):
            raise MalformedLevel(
                f"Vehicle '{label}' has length {length}, expected 2 or 3"
            )

        rows = {r for r, _ in positions}
        cols = {c for _, c in positions}
        row, col = positions[0]
        if len(rows) == 1:
            orientation = Orientation.HORIZONTAL
            contiguous = sorted(cols) == list(range(col, col + length))
        elif len(cols) == 1:
            orientation = Orientation.VERTICAL
            contiguous = sorted(rows) == list(range(row, row + length))
        else:
            raise MalformedLevel(f"Vehicle '{label}' is not axis-aligned")

        if not contiguous:
            raise MalformedLevel(f"Vehicle '{label}' cells are not contiguous")

        return Vehicle(label=label, length=length, orientation=orientation,
                       row=row, col=col)

    def clone(self) -> 'PuzzleState':
        """Create an independent deep copy."""
        other = PuzzleState.__new__(PuzzleState)
        other.grid = self.grid.copy()
        other.vehicles = {label: v.copy() for label, v in self.vehicles.items()}
        other._last_move = self._last_move
        other._indicators = self._indicators
        return other

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def target(self) -> Vehicle:
        return self.vehicles[TARGET]

    def hash(self) -> str:
        """Canonical row-major string of the grid, used for deduplication."""
        return ''.join(self.grid.ravel().tolist())

    def cell(self, row: int, col: int) -> str:
        return str(self.grid[row, col])

    def is_goal(self) -> bool:
        """True if nothing stands between the target vehicle and the exit."""
        path = self.grid[EXIT_ROW, self.target.end_col + 1:]
        return not np.any(path != EMPTY)

    def blocking_vehicles(self) -> List[str]:
        """Labels of vehicles between the target and the exit, nearest first."""
        seen: List[str] = []
        for item in self.grid[EXIT_ROW, self.target.end_col + 1:].tolist():
            if item != EMPTY and item not in seen:
                seen.append(item)
        return seen

    def exit_move(self) -> Move:
        """Synthetic action that drives the target vehicle off the board."""
        return Move(TARGET, Direction.RIGHT, BOARD_SIZE - self.target.col)

    def _free_cell(self, row: int, col: int) -> bool:
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE and self.grid[row, col] == EMPTY

    def _leading_cell(self, vehicle: Vehicle, direction: Direction, step: int) -> tuple:
        """Cell the vehicle's leading edge enters after sliding ``step`` cells."""
        if direction is Direction.RIGHT:
            return vehicle.row, vehicle.end_col + step
        if direction is Direction.LEFT:
            return vehicle.row, vehicle.col - step
        if direction is Direction.DOWN:
            return vehicle.end_row + step, vehicle.col
        return vehicle.row - step, vehicle.col

    def is_legal(self, move: Move) -> bool:
        """Check that every cell the move sweeps through is empty and on the board."""
        vehicle = self.vehicles.get(move.vehicle)
        if vehicle is None or move.direction.orientation is not vehicle.orientation:
            return False
        if not 1 <= move.distance < BOARD_SIZE:
            return False
        return all(
            self._free_cell(*self._leading_cell(vehicle, move.direction, step))
            for step in range(1, move.distance + 1)
        )

    def is_blocked(self, label: str) -> bool:
        """True if the vehicle cannot slide a single cell in either direction."""
        vehicle = self.vehicles[label]
        return not any(
            self._free_cell(*self._leading_cell(vehicle, direction, 1))
            for direction in vehicle.directions()
        )

    def blocked_vehicles(self) -> Set[str]:
        return {label for label in self.vehicles if self.is_blocked(label)}

    def freedom_level(self) -> int:
        """Number of vehicles that can move."""
        return sum(1 for label in self.vehicles if not self.is_blocked(label))

    def distance(self, other: 'PuzzleState') -> int:
        """Number of vehicles whose anchor differs between the two states."""
        return sum(
            1 for label, vehicle in self.vehicles.items()
            if vehicle.anchor != other.vehicles[label].anchor
        )

    def possible_moves(self, rng: Optional[random.Random] = None) -> List[Move]:
        """Enumerate every legal move from this state.

        For each vehicle and each direction along its axis, distances are
        tried from 1 upwards and stop at the first blocked cell.

        Args:
            rng: If given, the returned list is shuffled with it

        Returns:
            List of legal moves
        """
        moves: List[Move] = []
        for label, vehicle in self.vehicles.items():
            for direction in vehicle.directions():
                for step in range(1, BOARD_SIZE):
                    if not self._free_cell(*self._leading_cell(vehicle, direction, step)):
                        break
                    moves.append(Move(label, direction, step))
        if rng is not None:
            rng.shuffle(moves)
        return moves

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _write(self, vehicle: Vehicle, value: str) -> None:
        if vehicle.horizontal:
            self.grid[vehicle.row, vehicle.col:vehicle.col + vehicle.length] = value
        else:
            self.grid[vehicle.row:vehicle.row + vehicle.length, vehicle.col] = value

    def apply_move(self, move: Move, check: bool = False) -> None:
        """Slide a vehicle in place.

        Args:
            move: Move to apply; must be legal unless ``check`` is set
            check: Validate the move first

        Raises:
            IllegalMove: If ``check`` is set and the move is not legal
        """
        if check and not self.is_legal(move):
            raise IllegalMove(f"Move {move.token} is not legal in state {self.hash()}")

        self._slide(move)
        self._last_move = move
        self._indicators = None

    def _slide(self, move: Move) -> None:
        vehicle = self.vehicles[move.vehicle]
        dr, dc = move.direction.delta
        self._write(vehicle, EMPTY)
        vehicle.row += dr * move.distance
        vehicle.col += dc * move.distance
        self._write(vehicle, vehicle.label)

    def _last_move_indicators(self) -> Tuple[bool, bool]:
        """(freedom increased, new vehicle blocked) for the last applied move."""
        if self._indicators is None:
            if self._last_move is None:
                self._indicators = (False, False)
            else:
                freedom_after = self.freedom_level()
                blocked_after = self.blocked_vehicles()
                self._slide(self._last_move.opposite())
                freedom_before = self.freedom_level()
                blocked_before = self.blocked_vehicles()
                self._slide(self._last_move)
                self._indicators = (freedom_before < freedom_after,
                                    not blocked_after <= blocked_before)
        return self._indicators

    @property
    def freedom_increased(self) -> bool:
        return self._last_move_indicators()[0]

    @property
    def new_vehicle_blocked(self) -> bool:
        return self._last_move_indicators()[1]

    @contextmanager
    def applied(self, move: Move) -> Iterator['PuzzleState']:
        """Apply ``move`` for the duration of the block and always undo it."""
        self.apply_move(move)
        try:
            yield self
        finally:
            self.apply_move(move.opposite())

    def replay(self, moves: Iterable[Move]) -> 'PuzzleState':
        """Apply a sequence of board moves with legality checks; returns self."""
        for move in moves:
            self.apply_move(move, check=True)
        return self

    def verify_solution(self, moves: List[Move]) -> bool:
        """Check that ``moves`` (ending with the exit action) solves this state."""
        if not moves:
            return False
        board = self.clone()
        try:
            board.replay(moves[:-1])
        except IllegalMove as e:
            logger.debug(f"Solution replay failed: {e}")
            return False
        return board.is_goal() and moves[-1] == board.exit_move()

    def render(self) -> str:
        """ASCII snapshot of the board."""
        return '\n'.join(' '.join(row) for row in self.grid.tolist())

    def __repr__(self) -> str:
        return f"PuzzleState({self.hash()!r})"
