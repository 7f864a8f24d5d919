import typing
from collections import deque

from bounty_snake.board import Grid, Position, Tile
from bounty_snake.config import SearchConfig

SAFE_TILES = (Tile.EMPTY, Tile.FOOD, Tile.TAIL)
FLOOD_FILL_TILES = (Tile.EMPTY, Tile.FOOD)


def is_safe_square(tile: Tile, config: SearchConfig, failsafe: bool = False) -> bool:
    """True if a snake may move onto a tile holding `tile`."""
    if failsafe:
        return True
    if config.head_on_neck_detection and tile == Tile.HEAD:
        return True
    return tile in SAFE_TILES


def neighbours(pos: Position, grid: Grid, config: SearchConfig,
               failsafe: bool = False) -> typing.List[Position]:
    """
    Orthogonal neighbours of `pos` that are safe to move onto.

    Order is always north, south, east, west. With `failsafe` every in-bounds
    neighbour is returned regardless of its content.
    """
    candidates = [
        Position(pos.x, pos.y - 1),
        Position(pos.x, pos.y + 1),
        Position(pos.x + 1, pos.y),
        Position(pos.x - 1, pos.y),
    ]
    return [
        candidate for candidate in candidates
        if grid.in_bounds(candidate) and is_safe_square(grid[candidate], config, failsafe)
    ]


def flood_fill(start: Position, grid: Grid, budget: int) -> int:
    """
    Count open tiles reachable from `start`, stopping once `budget` is reached.

    Visited tiles are overwritten with Tile.VISITED, so always pass a copy.
    """
    if budget <= 0 or not grid.in_bounds(start) or grid[start] not in FLOOD_FILL_TILES:
        return 0

    grid[start] = Tile.VISITED
    queue = deque([start])
    count = 1

    while queue and count < budget:
        x, y = queue.popleft()

        for nxt in (Position(x, y - 1), Position(x, y + 1), Position(x + 1, y), Position(x - 1, y)):
            if count >= budget:
                break
            if not grid.in_bounds(nxt) or grid[nxt] not in FLOOD_FILL_TILES:
                continue
            grid[nxt] = Tile.VISITED
            queue.append(nxt)
            count += 1

    return count
