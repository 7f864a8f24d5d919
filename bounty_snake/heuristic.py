"""
Board evaluation from the acting player's point of view.

Decisive outcomes return the WIN / LOSS / DRAW sentinels. Everything else is
an accumulation of weighted terms (trap detection, food seeking, aggression
towards the enemy's likely next head square, edge avoidance) scaled by how
much of the board is reachable from my head.
"""

import logging
import typing

from bounty_snake.board import GameState, Grid, Position, SnakeState, Tile, direction, manhattan_distance
from bounty_snake.config import DRAW, EDGE_PENALTY, LOSS, MIN_ORDINARY_SCORE, TRAP_PENALTY, WIN, SearchConfig
from bounty_snake.survival_lookahead import flood_fill, neighbours

logger = logging.getLogger(__name__)

AGGRESSIVE_WEIGHT = 100
SMALL_SNAKE_LENGTH = 4


def is_head_on_head(state: GameState) -> bool:
    return state.me.head == state.enemy.head


def is_head_on_neck(state: GameState) -> bool:
    """Both heads sit on the other snake's neck (the snakes swapped squares)."""
    me, enemy = state.me, state.enemy
    if me.length < 2 or enemy.length < 2:
        return False
    return me.head == enemy.body[1] and enemy.head == me.body[1]


def hits_own_body(snake: SnakeState) -> bool:
    rest = snake.body[1:]
    # Segments still stacked under the head (fresh spawn) haven't moved out yet
    while rest and rest[0] == snake.head:
        rest = rest[1:]
    return snake.head in rest


def body_collisions(state: GameState) -> typing.Tuple[bool, bool]:
    """
    Returns (i_collided, enemy_collided).

    A head collides when it lands on any segment of the other snake or on one
    of its own segments past the head.
    """
    me, enemy = state.me, state.enemy
    me_collided = me.head in enemy.body or hits_own_body(me)
    enemy_collided = enemy.head in me.body or hits_own_body(enemy)
    return me_collided, enemy_collided


def length_outcome(me: SnakeState, enemy: SnakeState) -> int:
    """Sentinel for a collision decided by body length."""
    if me.length > enemy.length:
        return WIN
    elif me.length < enemy.length:
        return LOSS
    # Nobody claims the bounty on a draw, but it still beats losing.
    return DRAW


def accessible_squares(grid: Grid, snake: SnakeState, food_count: int) -> int:
    """Flood fill from the snake's head on a scratch copy of the grid."""
    floodfill_grid = grid.copy()
    floodfill_grid[snake.head] = Tile.EMPTY
    budget = 2 * snake.length + food_count
    return flood_fill(snake.head, floodfill_grid, budget)


def food_weight(my_health: int, my_length: int, food_count: int, config: SearchConfig) -> int:
    if food_count <= config.low_food:
        return 200 - 2 * my_health
    if my_health <= config.hunger_health or my_length < SMALL_SNAKE_LENGTH:
        return 100 - my_health
    return 0


def evaluate(grid: Grid, state: GameState, my_moves: typing.Sequence[Position],
             enemy_moves: typing.Sequence[Position], config: SearchConfig) -> float:
    """
    Score a board/state pair for me.

    Args:
        grid: Board to evaluate
        state: Both snakes as they stand on `grid`
        my_moves: My legal moves from this position
        enemy_moves: The enemy's legal moves from this position
        config: Search constants

    Returns:
        Signed score, higher is better for me
    """
    me, enemy = state.me, state.enemy
    score = 0

    if config.head_on_neck_detection and is_head_on_neck(state):
        logger.debug("Head-on-neck collision")
        return length_outcome(me, enemy)

    if is_head_on_head(state):
        outcome = length_outcome(me, enemy)
        logger.debug("Head-on-head collision, outcome %s", outcome)
        if outcome == WIN and not config.head_on_neck_detection:
            score += WIN
        else:
            return outcome

    if config.head_on_neck_detection:
        # A head-on-neck attack the enemy doesn't mirror can leave either head
        # inside a body, since the moves were generated against the old board.
        me_collided, enemy_collided = body_collisions(state)
        if me_collided and enemy_collided:
            logger.debug("Both snakes ran into a body")
            return DRAW
        elif me_collided:
            logger.debug("I ran into a body")
            return LOSS
        elif enemy_collided:
            logger.debug("Enemy ran into a body")
            score += WIN

    if not my_moves:
        logger.debug("I am trapped")
        return LOSS
    if me.health <= 0:
        logger.debug("I am out of health")
        return LOSS

    food = grid.positions_of(Tile.FOOD)

    # Flood fill alone would always avoid food, since eating costs one square.
    accessible = accessible_squares(grid, me, len(food))
    percent_accessible = accessible / grid.size
    if accessible <= me.length:
        logger.debug("Possible trap: %d squares reachable for length %d", accessible, me.length)
        # Floored so a trap still ranks above LOSS on large boards
        return max(-TRAP_PENALTY * (1 / percent_accessible), MIN_ORDINARY_SCORE)

    if not enemy_moves:
        logger.debug("Enemy is trapped")
        score += WIN
    if enemy.health <= 0:
        logger.debug("Enemy is out of health")
        score += WIN

    if accessible_squares(grid, enemy, len(food)) <= enemy.length:
        logger.debug("Enemy might be trapped")
        score += TRAP_PENALTY

    weight = food_weight(me.health, me.length, len(food), config)
    if weight > 0:
        for i, item in enumerate(food, start=1):
            # i keeps equidistant food from scoring identically
            score -= manhattan_distance(me.head, item) * weight + i

    aggressive_weight = AGGRESSIVE_WEIGHT
    if len(food) <= config.low_food:
        aggressive_weight = me.health
    enemy_last_direction = direction(enemy.neck, enemy.head)
    for square in neighbours(enemy.head, grid, config):
        dist = manhattan_distance(me.head, square)
        if direction(enemy.head, square) == enemy_last_direction:
            score -= dist * 2 * aggressive_weight
        else:
            score -= dist * aggressive_weight

    if me.head.x in (1, grid.width) or me.head.y in (1, grid.height):
        score -= EDGE_PENALTY

    logger.debug("Raw score %s, percent accessible %.3f", score, percent_accessible)
    if score < 0:
        score = max(score * (1 / percent_accessible), MIN_ORDINARY_SCORE)
    elif score > 0:
        score = score * percent_accessible

    return score
