from __future__ import annotations

import random

from games.flappy import FlappyGame, apply_gravity, init_flappy, jump, pipe_blocks, spawn_pipe, update_flappy
from systems.entities import Pipe
from systems.intents import Intent
from systems.snapshot import Tone


def test_bird_starts_mid_height_in_left_quarter() -> None:
    state = init_flappy(40, 20)

    assert state.bird_x == 10
    assert state.bird_y == 10.0
    assert state.velocity == 0.0


def test_gravity_accelerates_then_clamps() -> None:
    assert apply_gravity(5.0, 0.0) == (5.15, 0.15)
    assert apply_gravity(5.0, 1.2) == (6.2, 1.2)


def test_jump_sets_upward_velocity() -> None:
    state = init_flappy(40, 20)

    assert jump(state) is True
    assert state.velocity == -0.8


def test_jump_is_inert_while_paused_or_over() -> None:
    state = init_flappy(40, 20)
    state.paused = True
    assert jump(state) is False
    state.paused = False
    state.game_over = True
    assert jump(state) is False
    assert state.velocity == 0.0


def test_passing_a_pipe_scores_exactly_once() -> None:
    rng = random.Random(0)
    state = init_flappy(40, 20)
    # tick_count starts at 1 so no extra pipe spawns during the run
    state.tick_count = 1
    pipe = Pipe(x=11.0, gap_y=7, gap_height=6)
    state.pipes = [pipe]

    for _ in range(40):
        state.velocity = -0.15  # hold the bird level
        update_flappy(state, rng)
        assert state.game_over is False

    assert pipe.passed is True
    assert state.score == 1
    assert state.high_score == 1
    assert state.pipes == []


def test_pipe_outside_the_gap_is_fatal() -> None:
    rng = random.Random(0)
    state = init_flappy(40, 20)
    state.tick_count = 1
    state.pipes = [Pipe(x=11.0, gap_y=2, gap_height=6)]

    update_flappy(state, rng)

    assert state.game_over is True


def test_pipe_occupies_two_columns() -> None:
    pipe = Pipe(x=9.5, gap_y=2, gap_height=6)

    assert pipe_blocks(pipe, 9, 10.0) is True
    assert pipe_blocks(pipe, 10, 10.0) is True
    assert pipe_blocks(pipe, 11, 10.0) is False
    assert pipe_blocks(pipe, 10, 4.0) is False


def test_falling_off_the_bottom_ends_run() -> None:
    state = init_flappy(40, 20)
    state.tick_count = 1
    state.bird_y = 19.5
    state.velocity = 1.0

    update_flappy(state, random.Random(0))

    assert state.game_over is True


def test_flying_off_the_top_ends_run() -> None:
    state = init_flappy(40, 20)
    state.tick_count = 1
    state.bird_y = 0.2
    state.velocity = -0.8

    update_flappy(state, random.Random(0))

    assert state.game_over is True


def test_spawned_gaps_respect_margins() -> None:
    rng = random.Random(3)
    state = init_flappy(40, 20)

    for _ in range(200):
        pipe = spawn_pipe(state, rng)
        assert pipe.gap_y >= 2
        assert pipe.gap_y + pipe.gap_height <= state.height - 2
        assert pipe.x == 40.0


def test_first_tick_spawns_a_pipe() -> None:
    state = init_flappy(40, 20)

    update_flappy(state, random.Random(0))

    assert len(state.pipes) == 1
    assert state.pipes[0].x == 39.5


def test_engine_saves_high_score_once_and_restarts(store, rng: random.Random) -> None:
    game = FlappyGame(store, 80, 36, rng=rng)
    game.start()

    assert (game.state.width, game.state.height) == (74, 26)
    assert game.handle_intent(Intent.RESTART) is False
    assert game.handle_intent(Intent.JUMP) is True

    game.state.score = 5
    game.state.high_score = 5
    game.state.bird_y = 30.0
    game.update()
    game.update()

    assert game.state.game_over is True
    assert store.calls.count(("save_aux", ("flappy", 5))) == 1
    assert game.snapshot().status.tone is Tone.DANGER
    assert game.handle_intent(Intent.RESTART) is True
    assert game.state.high_score == 5
    assert game.state.score == 0
