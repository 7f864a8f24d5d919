# Welcome to
# __________         __    __  .__                               __
# \______   \_____ _/  |__/  |_|  |   ____   ______ ____ _____  |  | __ ____
#  |    |  _/\__  \\   __\   __\  | _/ __ \ /  ___//    \\__  \ |  |/ // __ \
#  |    |   \ / __ \|  |  |  | |  |_\  ___/ \___ \|   |  \/ __ \|    <\  ___/
#  |________/(______/__|  |__| |____/\_____>______>___|__(______/__|__\\_____>
#
# Request handlers for the bounty snake. Each turn the game state is turned
# into our own grid and handed to the alpha-beta search in minimax.py.
# For more info see docs.battlesnake.com

import logging
import os
import random
import typing

from bounty_snake.board import GameState, Grid, Position, SnakeState, UP, build_grid, direction
from bounty_snake.config import SearchConfig
from bounty_snake.minimax import choose_move
from bounty_snake.survival_lookahead import neighbours

X = 'x'
Y = 'y'

TAUNTS = [
    "You are better at only one thing. Dying.",
    "Your snake is a little ssssssssssssucky.",
    "You are impossible to underestimate.",
    "You ninnyhammer.",
    "May your foot be itchy and arms short.",
    "Tech yourself before you wreck yourself",
    "Hey Dad, can you do THIS?",
    "Justin Bieber? Sorry, I ate him.",
]

SEARCH_CONFIG = SearchConfig.from_env()


# info is called when you create your Battlesnake on play.battlesnake.com
# and controls your Battlesnake's appearance
def info() -> typing.Dict:
    print("INFO")

    return {
        "apiversion": "1",
        "author": "bounty-hunter",
        "color": "#B8860B",
        "head": "evil",
        "tail": "bolt",
    }


# start is called when your Battlesnake begins a game
def start(game_state: typing.Dict):
    print(f"GAME START {game_state.get('game', {}).get('id', '')}")


# end is called when your Battlesnake finishes a game
def end(game_state: typing.Dict):
    print("GAME OVER\n")


def taunt() -> str:
    return random.choice(TAUNTS)


def to_position(point: typing.Dict, width: int, height: int) -> Position:
    """
    Convert an API point (0-based, y growing upward) to a grid Position
    (1-based, y growing downward).
    """
    x, y = point[X], point[Y]
    if not (0 <= x < width and 0 <= y < height):
        raise ValueError(f"Point {point} is outside the {width}x{height} board")
    return Position(x + 1, height - y)


def payload_to_state(game_state: typing.Dict) -> typing.Tuple[Grid, GameState]:
    """
    Build the grid and the two-snake state from a v1 game state payload.
    """
    board = game_state['board']
    width, height = board['width'], board['height']
    my_id = game_state['you']['id']

    snakes = board['snakes']
    if len(snakes) != 2:
        raise ValueError(f"Expected exactly two snakes, got {len(snakes)}")

    states = {}
    for snake in snakes:
        body = [to_position(seg, width, height) for seg in snake['body']]
        states[snake['id']] = SnakeState(body, snake['health'], snake['id'])

    if my_id not in states:
        raise ValueError(f"Snake {my_id!r} is not on the board")
    enemy_id = next(snake_id for snake_id in states if snake_id != my_id)
    state = GameState(states[my_id], states[enemy_id])

    food = [to_position(item, width, height) for item in board['food']]
    grid = build_grid(width, height, food, [state.me.body, state.enemy.body])
    return grid, state


def fallback_move(grid: Grid, state: GameState, config: SearchConfig) -> str:
    """Any in-bounds move when the search found nothing safe."""
    options = neighbours(state.me.head, grid, config, failsafe=True)
    if options:
        return direction(state.me.head, options[0])
    return UP


def decide(game_state: typing.Dict, config: SearchConfig = None) -> typing.Tuple[str, float]:
    """Pick a direction for the snake in `game_state`. Returns (direction, score)."""
    config = config or SEARCH_CONFIG
    grid, state = payload_to_state(game_state)
    best_move, score = choose_move(grid, state, config)
    if best_move is None:
        print(f"MOVE {game_state.get('turn', '?')}: No safe moves detected! Picking emergency move")
        return fallback_move(grid, state, config), score
    return best_move, score


def emergency_move(game_state: typing.Dict) -> typing.Dict:
    """
    Answer for a turn the search couldn't handle. Reads only the board size,
    food, every snake's body and my head, then prefers a safe square over
    any in-bounds square.
    """
    try:
        board = game_state['board']
        width, height = board['width'], board['height']
        head = to_position(game_state['you']['body'][0], width, height)
        food = [to_position(item, width, height) for item in board['food']]
        bodies = [[to_position(seg, width, height) for seg in snake['body']] for snake in board['snakes']]
    except (KeyError, IndexError, TypeError, ValueError):
        print("MOVE: Unreadable board, moving up")
        return {"move": UP}

    grid = build_grid(width, height, food, bodies)
    options = (neighbours(head, grid, SEARCH_CONFIG)
               or neighbours(head, grid, SEARCH_CONFIG, failsafe=True))
    if not options:
        return {"move": UP}
    return {"move": direction(head, options[0])}


# move is called on every turn and returns your next move
# Valid moves are "up", "down", "left", or "right"
def move(game_state: typing.Dict) -> typing.Dict:
    next_move, score = decide(game_state)

    print(f"MOVE {game_state.get('turn', '?')}: {next_move} | Score: {score:.0f} | "
          f"Depth: {SEARCH_CONFIG.max_depth} | Health: {game_state['you']['health']}")

    return {"move": next_move, "shout": taunt()}


# Start server when `python -m bounty_snake.main` is run
if __name__ == "__main__":
    from bounty_snake.server import run_server

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    run_server({"info": info, "start": start, "move": move, "end": end, "fallback": emergency_move})
