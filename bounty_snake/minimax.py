"""
Alpha-Beta Search for Battlesnake

This module implements adversarial search with:
- Alternating plies: even depths are my move (maximizing), odd depths the enemy's (minimizing)
- Simultaneous turn resolution: the enemy's moves are generated against the board
  as it stood before my move of the same turn
- Alpha-beta pruning with fixed move order (north, south, east, west)
"""

import logging
import typing

from bounty_snake.board import GameState, Grid, Position, Tile, direction
from bounty_snake.config import SearchConfig
from bounty_snake.heuristic import body_collisions, evaluate, is_head_on_head, is_head_on_neck
from bounty_snake.survival_lookahead import neighbours

logger = logging.getLogger(__name__)


def apply_move(grid: Grid, state: GameState, move: Position, is_me: bool,
               food_grid: Grid = None) -> typing.Tuple[Grid, GameState, bool]:
    """
    Apply one snake's move to copies of the grid and state.

    Args:
        grid: Current board (not modified)
        state: Current state (not modified)
        move: Square the snake's head moves onto
        is_me: True to move me, False to move the enemy
        food_grid: Board used to decide whether the move eats food, defaults to `grid`

    Returns:
        (new_grid, new_state, ate_food)
    """
    new_grid = grid.copy()
    new_state = state.copy()
    snake = new_state.me if is_me else new_state.enemy
    food_grid = grid if food_grid is None else food_grid

    eating = food_grid[move] == Tile.FOOD
    if eating:
        snake.health = 100
    else:
        snake.health -= 1

    # The tail only leaves the board if the snake isn't growing
    length = snake.length
    if not snake.has_stacked_tail():
        new_grid[snake.tail] = Tile.EMPTY
    snake.body.pop()

    if length > 1:
        new_grid[snake.body[0]] = Tile.BODY
    snake.body.insert(0, move)
    new_grid[move] = Tile.HEAD

    if eating:
        snake.body.append(snake.body[-1])

    if snake.tail != snake.head:
        new_grid[snake.tail] = Tile.BODY if snake.has_stacked_tail() else Tile.TAIL

    return new_grid, new_state, eating


class AlphaBetaSearch:
    """
    Depth-limited alpha-beta search over simulated board states.
    """

    def __init__(self, config: SearchConfig = None):
        self.config = config or SearchConfig()
        self.nodes_evaluated = 0
        self.deepest_ply = 0

    def is_collision(self, state: GameState, depth: int) -> bool:
        """Collisions only count once both players have moved for the turn."""
        if depth % 2 != 0:
            return False
        if is_head_on_head(state):
            return True
        if self.config.head_on_neck_detection:
            return is_head_on_neck(state) or any(body_collisions(state))
        return False

    def alphabeta(self, grid: Grid, state: GameState, depth: int, alpha: float, beta: float,
                  alpha_move: typing.Optional[Position], beta_move: typing.Optional[Position],
                  maximizing: bool, prev_grid: typing.Optional[Grid],
                  prev_enemy_moves: typing.Sequence[Position]
                  ) -> typing.Tuple[float, typing.Optional[Position]]:
        """
        Alpha-beta pruning over alternating plies.

        Args:
            grid: Current board
            state: Current state
            depth: Plies applied so far (0 = root)
            alpha: Best score found for me so far
            beta: Worst score the enemy can force so far
            alpha_move: Move that produced alpha
            beta_move: Move that produced beta
            maximizing: True on my ply
            prev_grid: Board before my move this turn (enemy ply only)
            prev_enemy_moves: Enemy moves generated on prev_grid (enemy ply only)

        Returns:
            (score, move) - move is None at leaves
        """
        self.nodes_evaluated += 1
        self.deepest_ply = max(self.deepest_ply, depth)
        config = self.config
        me, enemy = state.me, state.enemy

        my_moves = neighbours(me.head, grid, config)
        if maximizing:
            enemy_moves = neighbours(enemy.head, grid, config)
            moves = my_moves
        else:
            enemy_moves = prev_enemy_moves
            moves = enemy_moves

        if depth == config.max_depth:
            logger.debug("Reached max depth %d", depth)
            return evaluate(grid, state, my_moves, enemy_moves, config), None
        if not moves or me.health <= 0 or enemy.health <= 0 or self.is_collision(state, depth):
            logger.debug("Reached endgame state at depth %d", depth)
            return evaluate(grid, state, my_moves, enemy_moves, config), None

        if maximizing:
            for move in moves:
                new_grid, new_state, _ = apply_move(grid, state, move, True)
                new_alpha, _ = self.alphabeta(new_grid, new_state, depth + 1, alpha, beta,
                                              alpha_move, beta_move, False, grid, enemy_moves)
                if new_alpha > alpha:
                    alpha = new_alpha
                    alpha_move = move
                if beta <= alpha:
                    break
            return alpha, alpha_move
        else:
            for move in moves:
                new_grid, new_state, _ = apply_move(grid, state, move, False, food_grid=prev_grid)
                new_beta, _ = self.alphabeta(new_grid, new_state, depth + 1, alpha, beta,
                                             alpha_move, beta_move, True, None, [])
                if new_beta < beta:
                    beta = new_beta
                    beta_move = move
                if beta <= alpha:
                    break
            return beta, beta_move

    def search(self, grid: Grid, state: GameState) -> typing.Tuple[float, typing.Optional[Position]]:
        """Run the root search. Returns (score, best square for my head)."""
        self.nodes_evaluated = 0
        self.deepest_ply = 0
        logger.debug("Searching from board:\n%s", grid.render())
        return self.alphabeta(grid, state, 0, -float('inf'), float('inf'), None, None, True, None, [])


def choose_move(grid: Grid, state: GameState,
                config: SearchConfig = None) -> typing.Tuple[typing.Optional[str], float]:
    """
    Main entry point for the search.

    Returns:
        (direction, score) - direction is None when I have no legal move
    """
    search = AlphaBetaSearch(config)
    score, best = search.search(grid, state)
    logger.debug("Search visited %d nodes, deepest ply %d", search.nodes_evaluated, search.deepest_ply)
    if best is None:
        return None, score
    return direction(state.me.head, best), score
