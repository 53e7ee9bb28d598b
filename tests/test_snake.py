from __future__ import annotations

import random

from games.snake import SnakeGame, change_direction, init_snake, spawn_food, update_snake
from systems.entities import Position
from systems.intents import Intent
from systems.snapshot import Tone


def test_initial_snake_is_three_cells_heading_up(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)

    assert state.body == [Position(5, 5), Position(5, 6), Position(5, 7)]
    assert state.direction == (0, -1)
    assert state.food not in state.body


def test_reverse_intent_is_rejected(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)

    assert change_direction(state, 0, 1) is False
    assert state.direction == (0, -1)


def test_back_to_back_opposite_intents_keep_first_turn(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)

    assert change_direction(state, -1, 0) is True
    assert change_direction(state, 1, 0) is False
    assert state.direction == (-1, 0)


def test_malformed_direction_is_ignored(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)

    assert change_direction(state, 1, 1) is False
    assert change_direction(state, 0, 0) is False
    assert state.direction == (0, -1)


def test_eating_grows_by_one_and_scores(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)
    state.food = Position(5, 4)

    update_snake(state, rng)

    assert len(state.body) == 4
    assert state.body[0] == Position(5, 4)
    assert state.score == 10
    assert state.high_score == 10
    assert state.food not in state.body


def test_moving_without_food_keeps_length(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)
    state.food = Position(1, 1)

    update_snake(state, rng)

    assert len(state.body) == 3
    assert state.body == [Position(5, 4), Position(5, 5), Position(5, 6)]
    assert state.score == 0


def test_wall_hit_ends_game_and_commits_high_score(rng: random.Random) -> None:
    state = init_snake(10, 10, high_score=20, rng=rng)
    state.body = [Position(3, 0), Position(3, 1), Position(3, 2)]
    state.food = Position(8, 8)
    state.score = 30

    update_snake(state, rng)

    assert state.game_over is True
    assert state.high_score == 30


def test_running_into_current_tail_is_fatal(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)
    state.body = [Position(2, 2), Position(3, 2), Position(3, 3), Position(2, 3)]
    state.direction = (0, 1)
    state.food = Position(8, 8)

    update_snake(state, rng)

    assert state.game_over is True
    assert len(state.body) == 4


def test_paused_snake_does_not_move(rng: random.Random) -> None:
    state = init_snake(10, 10, rng=rng)
    state.paused = True
    before = list(state.body)

    update_snake(state, rng)

    assert state.body == before


def test_food_falls_back_to_scan_on_crowded_board() -> None:
    # 5x5 board has a 3x3 interior; leave exactly one interior cell free
    interior = [Position(x, y) for y in range(1, 4) for x in range(1, 4)]
    body = [p for p in interior if p != Position(3, 3)]

    food = spawn_food(5, 5, body, random.Random(0), attempts=0)

    assert food == Position(3, 3)


def test_food_never_lands_on_body_over_many_ticks() -> None:
    rng = random.Random(99)
    state = init_snake(12, 12, rng=rng)
    turns = [(1, 0), (0, 1), (-1, 0), (0, -1)]

    for tick in range(400):
        if state.game_over:
            state = init_snake(12, 12, rng=rng)
        if tick % 5 == 0:
            change_direction(state, *rng.choice(turns))
        update_snake(state, rng)
        assert state.food not in state.body


def test_engine_routes_intents_and_saves_once_on_game_over(store, rng: random.Random) -> None:
    game = SnakeGame(store, 80, 36, rng=rng)
    game.start()

    assert game.state.width == 37
    assert game.state.height == 24
    assert game.handle_intent(Intent.MOVE_DOWN) is False
    assert game.handle_intent(Intent.FIRE) is False
    assert game.handle_intent(Intent.MOVE_LEFT) is True

    game.state.body[0] = Position(0, game.state.body[0].y)
    game.state.score = 40
    for _ in range(3):
        game.update()

    assert game.state.game_over is True
    assert store.calls.count(("save_aux", ("snake", 40))) == 1
    assert store.load().snake_high_score == 40
    snap = game.snapshot()
    assert snap.status.tone is Tone.DANGER
    assert snap.cell_width == 2


def test_restart_seeds_high_score_from_store(store, rng: random.Random) -> None:
    store.save_aux("snake", 70)
    game = SnakeGame(store, 80, 36, rng=rng)
    game.start()
    game.state.score = 10

    assert game.handle_intent(Intent.RESTART) is True
    assert game.state.score == 0
    assert game.state.high_score == 70


def test_full_interior_yields_no_food() -> None:
    body = [Position(x, y) for y in range(1, 4) for x in range(1, 4)]

    assert spawn_food(5, 5, body, random.Random(0)) is None


def test_eating_the_last_free_cell_ends_the_run(rng: random.Random) -> None:
    # 4x4 board: the interior is the 2x2 block from (1, 1) to (2, 2)
    state = init_snake(4, 4, rng=rng)
    state.body = [Position(2, 1), Position(2, 2), Position(1, 2)]
    state.direction = (-1, 0)
    state.food = Position(1, 1)

    update_snake(state, rng)

    assert len(state.body) == 4
    assert state.food is None
    assert state.game_over is True
    assert state.high_score == 10


def test_restart_mid_run_keeps_unsaved_high_score(store, rng: random.Random) -> None:
    game = SnakeGame(store, 80, 36, rng=rng)
    game.start()
    for _ in range(3):
        head = game.state.body[0]
        game.state.food = Position(head.x, head.y - 1)
        game.update()
    assert game.state.high_score == 30

    assert game.handle_intent(Intent.RESTART) is True

    assert game.state.score == 0
    assert game.state.high_score == 30
    assert store.load().snake_high_score == 30
