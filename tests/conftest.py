import typing

from bounty_snake.board import GameState, Grid, Position, SnakeState, build_grid


def make_board(me: typing.List[typing.Tuple[int, int]],
               enemy: typing.List[typing.Tuple[int, int]],
               food: typing.Sequence[typing.Tuple[int, int]] = (),
               width: int = 7, height: int = 7,
               me_health: int = 100, enemy_health: int = 100) -> typing.Tuple[Grid, GameState]:
    """Grid and state from plain (x, y) tuples in grid coordinates."""
    state = GameState(
        SnakeState([Position(*p) for p in me], me_health, 'me'),
        SnakeState([Position(*p) for p in enemy], enemy_health, 'enemy'),
    )
    grid = build_grid(width, height, [Position(*p) for p in food], [state.me.body, state.enemy.body])
    return grid, state


def api_point(pos: typing.Tuple[int, int], height: int) -> typing.Dict:
    """Grid coordinates back to API coordinates (0-based, y up)."""
    return {'x': pos[0] - 1, 'y': height - pos[1]}


def make_payload(me, enemy, food=(), width=7, height=7, me_health=100, enemy_health=100, turn=1):
    def snake(snake_id, body, health):
        points = [api_point(p, height) for p in body]
        return {'id': snake_id, 'name': snake_id, 'health': health, 'body': points,
                'head': points[0], 'length': len(points)}

    you = snake('me', me, me_health)
    return {
        'game': {'id': 'test-game'},
        'turn': turn,
        'board': {
            'width': width,
            'height': height,
            'food': [api_point(p, height) for p in food],
            'snakes': [you, snake('enemy', enemy, enemy_health)],
        },
        'you': you,
    }
