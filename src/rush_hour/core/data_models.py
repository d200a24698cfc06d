"""Core data models for the Rush Hour solver."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple


BOARD_SIZE = 6
EXIT_ROW = 2
EMPTY = '.'
TARGET = 'X'


class Orientation(Enum):
    """Axis a vehicle slides along."""
    HORIZONTAL = 'H'
    VERTICAL = 'V'


class Direction(Enum):
    """Slide direction, encoded by its token character."""
    UP = 'U'
    DOWN = 'D'
    LEFT = 'L'
    RIGHT = 'R'

    @property
    def delta(self) -> Tuple[int, int]:
        """(row, col) step for one cell in this direction."""
        return _DELTAS[self]

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    @property
    def orientation(self) -> Orientation:
        if self in (Direction.LEFT, Direction.RIGHT):
            return Orientation.HORIZONTAL
        return Orientation.VERTICAL


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


@dataclass
class Vehicle:
    """A vehicle on the board.

    The anchor (row, col) is the top-most / left-most occupied cell. Vehicles
    are mutable: applying a move shifts the anchor in place.
    """

    label: str
    length: int
    orientation: Orientation
    row: int
    col: int

    @property
    def horizontal(self) -> bool:
        return self.orientation is Orientation.HORIZONTAL

    @property
    def anchor(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def end_row(self) -> int:
        """Row of the last occupied cell."""
        return self.row if self.horizontal else self.row + self.length - 1

    @property
    def end_col(self) -> int:
        """Column of the last occupied cell."""
        return self.col + self.length - 1 if self.horizontal else self.col

    def cells(self) -> List[Tuple[int, int]]:
        """All (row, col) cells this vehicle occupies."""
        if self.horizontal:
            return [(self.row, self.col + i) for i in range(self.length)]
        return [(self.row + i, self.col) for i in range(self.length)]

    def directions(self) -> Tuple[Direction, Direction]:
        """The two directions this vehicle can slide in."""
        if self.horizontal:
            return (Direction.LEFT, Direction.RIGHT)
        return (Direction.UP, Direction.DOWN)

    def copy(self) -> 'Vehicle':
        return Vehicle(self.label, self.length, self.orientation, self.row, self.col)


@dataclass(frozen=True)
class Move:
    """A single slide: vehicle label, direction and distance.

    Token form is three characters, e.g. ``AU2`` moves vehicle A up by two.
    """

    vehicle: str
    direction: Direction
    distance: int

    @classmethod
    def from_token(cls, token: str) -> 'Move':
        """Parse a 3-character action token.

        Raises:
            ValueError: If the token does not follow the action grammar
        """
        if len(token) != 3 or not token[2].isdigit():
            raise ValueError(f"Malformed action token: {token!r}")
        try:
            direction = Direction(token[1])
        except ValueError:
            raise ValueError(f"Unknown direction in action token: {token!r}") from None
        return cls(vehicle=token[0], direction=direction, distance=int(token[2]))

    @property
    def token(self) -> str:
        return f"{self.vehicle}{self.direction.value}{self.distance}"

    def opposite(self) -> 'Move':
        """The move that exactly undoes this one."""
        return Move(self.vehicle, self.direction.opposite, self.distance)

    def __str__(self) -> str:
        return self.token


def parse_solution(solution: str) -> List[Move]:
    """Split a space-separated solution string into moves."""
    return [Move.from_token(token) for token in solution.split()]


def format_solution(moves: Iterable[Move]) -> str:
    """Join moves into the space-separated token form."""
    return ' '.join(move.token for move in moves)


# Type aliases for clarity
Position = Tuple[int, int]
StateHash = str
SolutionPair = Tuple[StateHash, str]  # (state hash, action token)
