"""Shared fixtures for Rush Hour tests."""

import logging

import pytest

from rush_hour.config import reset_config
from rush_hour.core.puzzle import PuzzleState

# X already has a clear exit row
SOLVED_LEVEL = (
    "B....."
    "B....."
    "XX...."
    "......"
    "......"
    "......"
)

# Vertical A stands right in front of X; one slide clears it
ONE_BLOCKER_LEVEL = (
    "......"
    "......"
    "XXA..."
    "..A..."
    "......"
    "......"
)

# A can only leave downwards once B clears (5, 3)
TWO_MOVE_LEVEL = (
    "......"
    "......"
    "XX.A.."
    "...A.."
    "...A.."
    "...BB."
)

# Like the two-move level, but B is boxed in by C and D
THREE_MOVE_LEVEL = (
    "......"
    "......"
    "XX.A.."
    "...A.."
    "..CA.D"
    "..CBBD"
)

# Nothing on the board can move
UNSOLVABLE_LEVEL = (
    "..A..."
    "..A..."
    "XXA..."
    "..B..."
    "..B..."
    "..B..."
)


@pytest.fixture(autouse=True)
def clear_global_config():
    """Keep the global Hydra configuration from leaking between tests."""
    reset_config()
    yield
    reset_config()
    logging.getLogger("rush_hour").setLevel(logging.NOTSET)


@pytest.fixture
def solved_state():
    return PuzzleState(SOLVED_LEVEL)


@pytest.fixture
def one_blocker_state():
    return PuzzleState(ONE_BLOCKER_LEVEL)


@pytest.fixture
def two_move_state():
    return PuzzleState(TWO_MOVE_LEVEL)


@pytest.fixture
def three_move_state():
    return PuzzleState(THREE_MOVE_LEVEL)


@pytest.fixture
def unsolvable_state():
    return PuzzleState(UNSOLVABLE_LEVEL)


@pytest.fixture
def solved_level():
    return SOLVED_LEVEL


@pytest.fixture
def three_move_level():
    return THREE_MOVE_LEVEL
