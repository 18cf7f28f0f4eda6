import pytest

from pacgraph.core.console import LogLevel, set_log_level
from pacgraph.maze.grid import Grid

# Two 2x2 rooms joined by a corridor of four cells; junctions at (2, 2) and (7, 2).
TWO_ROOMS = [
    "##########",
    "#..####..#",
    "#........#",
    "##########",
]

# Same rooms, five corridor cells between the junctions at (2, 2) and (8, 2).
LONG_CORRIDOR = [
    "###########",
    "#..#####..#",
    "#.........#",
    "###########",
]

# A single straight corridor with a dead end at each side: (1, 1) and (5, 1).
CORRIDOR = [
    "#######",
    "#.....#",
    "#######",
]

# Loops, a wrapping row (row 3) and a dead end at (6, 5).
LOOPS = [
    "#########",
    "#...#...#",
    "#.#.#.#.#",
    ".........",
    "#.###.#.#",
    "#...#..##",
    "#########",
]

OPEN_ROOM = [
    "...",
    "...",
    "...",
]


@pytest.fixture(autouse=True)
def quiet_console():
    set_log_level(LogLevel.ERROR)
    yield
    set_log_level(LogLevel.WARNING)


@pytest.fixture
def two_rooms() -> Grid:
    return Grid.from_rows(TWO_ROOMS)


@pytest.fixture
def long_corridor() -> Grid:
    return Grid.from_rows(LONG_CORRIDOR)


@pytest.fixture
def corridor() -> Grid:
    return Grid.from_rows(CORRIDOR)


@pytest.fixture
def loops() -> Grid:
    return Grid.from_rows(LOOPS)


@pytest.fixture
def open_room() -> Grid:
    return Grid.from_rows(OPEN_ROOM)


@pytest.fixture
def two_rooms_rows() -> list:
    return list(TWO_ROOMS)


@pytest.fixture
def corridor_rows() -> list:
    return list(CORRIDOR)
