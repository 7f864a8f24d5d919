import pytest

from conftest import make_board

from bounty_snake.board import Position
from bounty_snake.config import DRAW, EDGE_PENALTY, LOSS, MIN_ORDINARY_SCORE, TRAP_PENALTY, WIN, SearchConfig
from bounty_snake.heuristic import body_collisions, evaluate, food_weight, is_head_on_neck
from bounty_snake.survival_lookahead import neighbours

CONFIG = SearchConfig()
HON = SearchConfig(head_on_neck_detection=True)


def moves_for(grid, state, config=CONFIG):
    return (neighbours(state.me.head, grid, config),
            neighbours(state.enemy.head, grid, config))


def test_sentinels_are_ordered():
    assert LOSS < DRAW < WIN
    assert DRAW == LOSS + 1


def test_head_on_head_equal_length_is_draw():
    grid, state = make_board([(3, 3), (3, 4)], [(3, 3), (3, 2)])
    assert evaluate(grid, state, [Position(2, 3)], [Position(4, 3)], CONFIG) == DRAW


def test_head_on_head_shorter_loses():
    grid, state = make_board([(3, 3), (3, 4)], [(3, 3), (3, 2), (3, 1)])
    assert evaluate(grid, state, [Position(2, 3)], [Position(4, 3)], CONFIG) == LOSS


def test_head_on_head_win_is_composable_without_head_on_neck():
    grid, state = make_board([(4, 4), (4, 5), (4, 6)], [(4, 4), (4, 3)])
    score = evaluate(grid, state, [Position(3, 4)], [Position(5, 4)], CONFIG)

    # WIN minus the aggression term, scaled by 6 reachable squares of 49
    assert score == pytest.approx((WIN - 300) * 6 / 49)
    assert 0 < score < WIN


def test_head_on_head_win_returns_immediately_with_head_on_neck():
    grid, state = make_board([(4, 4), (4, 5), (4, 6)], [(4, 4), (4, 3)])
    assert evaluate(grid, state, [Position(3, 4)], [Position(5, 4)], HON) == WIN


def test_head_on_neck_swap():
    grid, state = make_board([(3, 3), (3, 4), (3, 5)], [(3, 4), (3, 3)])

    assert is_head_on_neck(state)
    assert evaluate(grid, state, [Position(2, 3)], [Position(4, 4)], HON) == WIN

    grid, state = make_board([(3, 3), (3, 4)], [(3, 4), (3, 3)])
    assert evaluate(grid, state, [Position(2, 3)], [Position(4, 4)], HON) == DRAW


def test_body_collisions():
    _, state = make_board([(3, 3), (3, 4)], [(4, 2), (4, 3), (3, 3), (2, 3)])
    assert body_collisions(state) == (True, False)
    _, state = make_board([(3, 3), (3, 4), (3, 5)], [(3, 4), (4, 4), (5, 4)])
    assert body_collisions(state) == (False, True)


def test_fresh_stacked_snakes_are_not_collisions():
    _, state = make_board([(2, 2), (2, 2), (2, 2)], [(6, 6), (6, 6), (6, 6)])
    assert body_collisions(state) == (False, False)

    _, state = make_board([(2, 1), (2, 2), (2, 2)], [(6, 6), (6, 6), (6, 6)])
    assert body_collisions(state) == (False, False)

    _, state = make_board([(2, 3), (2, 2), (1, 2), (1, 3), (2, 3)], [(6, 6), (6, 6), (6, 6)])
    assert body_collisions(state) == (True, False)


def test_i_run_into_a_body():
    grid, state = make_board([(3, 3), (3, 4)], [(4, 2), (4, 3), (3, 3), (2, 3)])
    assert evaluate(grid, state, [Position(2, 3)], [Position(5, 2)], HON) == LOSS


def test_both_run_into_a_body_is_draw():
    me = [(3, 3), (3, 4), (3, 5)]
    enemy = [(3, 5), (4, 5), (4, 4), (4, 3), (3, 3)]
    grid, state = make_board(me, enemy)

    assert not is_head_on_neck(state)
    assert body_collisions(state) == (True, True)
    assert evaluate(grid, state, [Position(2, 3)], [Position(2, 5)], HON) == DRAW


def test_head_on_neck_swap_equal_length_is_draw():
    grid, state = make_board([(3, 3), (3, 4), (3, 5)], [(3, 4), (3, 3), (2, 3)])
    assert evaluate(grid, state, [Position(4, 3)], [Position(4, 4)], HON) == DRAW


def test_trapped_or_starved_loses():
    grid, state = make_board([(2, 2), (2, 3), (2, 4)], [(5, 5), (5, 4)], width=5, height=5)
    assert evaluate(grid, state, [], [Position(4, 5)], CONFIG) == LOSS

    grid, state = make_board([(2, 2), (2, 3), (2, 4)], [(5, 5), (5, 4)], width=5, height=5, me_health=0)
    my_moves, enemy_moves = moves_for(grid, state)
    assert evaluate(grid, state, my_moves, enemy_moves, CONFIG) == LOSS


def test_encircled_snake_scores_below_trap_threshold():
    me = [(1, 3), (2, 3), (2, 2), (2, 1), (3, 1)]
    enemy = [(4, 4), (3, 4), (2, 4), (1, 4)]
    grid, state = make_board(me, enemy)
    my_moves, enemy_moves = moves_for(grid, state)

    score = evaluate(grid, state, my_moves, enemy_moves, CONFIG)

    # Head plus (1, 2) and (1, 1) are all that's left
    assert score == pytest.approx(-TRAP_PENALTY * 49 / 3)
    assert score < -TRAP_PENALTY


def test_trap_score_stays_above_loss_on_large_boards():
    # Chasing my own tail leaves one reachable square out of 361
    grid, state = make_board([(1, 1), (2, 1), (2, 2), (1, 2)], [(10, 10), (10, 11), (10, 12)],
                             width=19, height=19)
    my_moves, enemy_moves = moves_for(grid, state)
    assert my_moves == [Position(1, 2)]

    score = evaluate(grid, state, my_moves, enemy_moves, CONFIG)
    assert score == MIN_ORDINARY_SCORE
    assert DRAW < score < -TRAP_PENALTY


def test_aggression_and_scaling():
    grid, state = make_board([(2, 2), (2, 3), (2, 4)], [(5, 5), (5, 4)], width=5, height=5,
                             me_health=90, enemy_health=90)
    my_moves, enemy_moves = moves_for(grid, state)

    # Two enemy head targets, both 5 away, weighted by my health (food is scarce).
    # 6 of 25 squares reachable.
    assert evaluate(grid, state, my_moves, enemy_moves, CONFIG) == pytest.approx(-900 / 0.24)


def test_edge_penalty():
    grid, state = make_board([(1, 2), (1, 3), (1, 4)], [(5, 5), (5, 4)], width=5, height=5,
                             me_health=90, enemy_health=90)
    my_moves, enemy_moves = moves_for(grid, state)

    expected = (-1080 - EDGE_PENALTY) / 0.24
    assert evaluate(grid, state, my_moves, enemy_moves, CONFIG) == pytest.approx(expected)


def test_food_term():
    grid, state = make_board([(2, 2), (2, 3), (2, 4)], [(5, 5), (5, 4)], food=[(4, 1)],
                             width=5, height=5, me_health=90, enemy_health=90)
    my_moves, enemy_moves = moves_for(grid, state)

    # Food weight 200 - 2 * 90 = 20, distance 3, index 1
    expected = (-900 - (3 * 20 + 1)) / (7 / 25)
    assert evaluate(grid, state, my_moves, enemy_moves, CONFIG) == pytest.approx(expected)


def test_trapped_enemy_is_a_bonus():
    grid, state = make_board([(2, 2), (2, 3), (2, 4)], [(5, 5), (5, 4)], width=5, height=5,
                             me_health=90, enemy_health=90)
    my_moves, _ = moves_for(grid, state)

    score = evaluate(grid, state, my_moves, [], CONFIG)
    assert score == pytest.approx((WIN - 900) * 0.24)


def test_food_weight():
    assert food_weight(90, 10, 3, CONFIG) == 20
    assert food_weight(30, 10, 20, CONFIG) == 70
    assert food_weight(90, 3, 20, CONFIG) == 10
    assert food_weight(90, 10, 20, CONFIG) == 0
