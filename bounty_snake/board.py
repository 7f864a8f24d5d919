"""
Board representation for the search engine.

Positions are 1-based with y growing downward, so "up" means y - 1.
The grid is a fixed-size numpy array of Tile values, sized once per turn.
"""

import enum
import typing

import numpy as np

# Constants
LEFT = 'left'
RIGHT = 'right'
DOWN = 'down'
UP = 'up'


class Position(typing.NamedTuple):
    x: int
    y: int


class Tile(enum.IntEnum):
    EMPTY = 0
    FOOD = 1
    HEAD = 2
    BODY = 3
    TAIL = 4      # tail that will vacate next turn
    VISITED = 5   # flood fill scratch mark


TILE_SYMBOLS = {
    Tile.EMPTY: '.',
    Tile.FOOD: 'O',
    Tile.HEAD: '@',
    Tile.BODY: '#',
    Tile.TAIL: '*',
    Tile.VISITED: '1',
}


class Grid:
    """
    Rectangular tile grid indexed by 1-based Position.
    """

    def __init__(self, width: int, height: int, cells: np.ndarray = None):
        if width < 1 or height < 1:
            raise ValueError(f"Invalid board dimensions {width}x{height}")
        self.width = width
        self.height = height
        if cells is None:
            cells = np.full((height, width), Tile.EMPTY, dtype=np.int8)
        self.cells = cells

    def __getitem__(self, pos: Position) -> Tile:
        return Tile(int(self.cells[pos.y - 1, pos.x - 1]))

    def __setitem__(self, pos: Position, tile: Tile):
        self.cells[pos.y - 1, pos.x - 1] = tile

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self.cells, other.cells)

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, pos: Position) -> bool:
        return 1 <= pos.x <= self.width and 1 <= pos.y <= self.height

    def copy(self) -> 'Grid':
        return Grid(self.width, self.height, self.cells.copy())

    def positions_of(self, tile: Tile) -> typing.List[Position]:
        """All positions holding `tile`, scanned row by row (y, then x)."""
        ys, xs = np.nonzero(self.cells == tile)
        return [Position(int(x) + 1, int(y) + 1) for y, x in zip(ys, xs)]

    def render(self) -> str:
        """ASCII picture of the grid, one row per line."""
        return "\n".join(
            "".join(TILE_SYMBOLS[Tile(int(v))] for v in row)
            for row in self.cells
        )


class SnakeState:
    """
    A snake's body (head first) and health.
    """

    def __init__(self, body: typing.List[Position], health: int, snake_id: str = ''):
        if not body:
            raise ValueError(f"Snake {snake_id!r} has an empty body")
        self.body = list(body)
        self.health = health
        self.id = snake_id

    def __repr__(self):
        return f"SnakeState(id={self.id!r}, health={self.health}, body={self.body})"

    @property
    def head(self) -> Position:
        return self.body[0]

    @property
    def neck(self) -> Position:
        """Second segment, or the head itself for a one-segment snake."""
        return self.body[1] if len(self.body) > 1 else self.body[0]

    @property
    def tail(self) -> Position:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)

    def has_stacked_tail(self) -> bool:
        """True if the tail sits on the segment before it (just grew, won't shrink)."""
        return len(self.body) > 1 and self.body[-1] == self.body[-2]

    def copy(self) -> 'SnakeState':
        return SnakeState(self.body, self.health, self.id)


class GameState:
    """The acting player ("me") and its single opponent ("enemy")."""

    def __init__(self, me: SnakeState, enemy: SnakeState):
        self.me = me
        self.enemy = enemy

    def __repr__(self):
        return f"GameState(me={self.me!r}, enemy={self.enemy!r})"

    def copy(self) -> 'GameState':
        return GameState(self.me.copy(), self.enemy.copy())


def build_grid(width: int, height: int, food: typing.Iterable[Position],
               bodies: typing.Iterable[typing.Sequence[Position]]) -> Grid:
    """
    Build the tile grid from raw positions.

    Food is placed first. For each snake the head always overwrites, body
    segments never overwrite a head, and the tail never overwrites a head or
    body. A stacked tail therefore stays BODY.
    """
    grid = Grid(width, height)

    for pos in food:
        grid[pos] = Tile.FOOD

    for body in bodies:
        length = len(body)
        for i, pos in enumerate(body):
            if i == 0:
                grid[pos] = Tile.HEAD
            elif i == length - 1:
                if grid[pos] not in (Tile.HEAD, Tile.BODY):
                    grid[pos] = Tile.TAIL
            elif grid[pos] != Tile.HEAD:
                grid[pos] = Tile.BODY

    return grid


def direction(src: Position, dst: Position) -> typing.Optional[str]:
    """Direction of the single step from src to dst, or None if not adjacent."""
    if dst.x == src.x + 1 and dst.y == src.y:
        return RIGHT
    elif dst.x == src.x - 1 and dst.y == src.y:
        return LEFT
    elif dst.x == src.x and dst.y == src.y + 1:
        return DOWN
    elif dst.x == src.x and dst.y == src.y - 1:
        return UP
    return None


def manhattan_distance(pos1: Position, pos2: Position) -> int:
    """Calculate Manhattan distance between two positions."""
    return abs(pos1.x - pos2.x) + abs(pos1.y - pos2.y)
