from __future__ import annotations

import random

import pytest

from games import GAME_REGISTRY
from leaderboard import high_score_rows
from progress import ProgressRecord
from systems.intents import Intent
from systems.snapshot import Snapshot, Tone
from systems.theme import THEMES, get_theme, next_theme_index


def test_registry_holds_the_four_games() -> None:
    assert set(GAME_REGISTRY) == {"space_invaders", "snake", "flappy", "2048"}
    for key, cls in GAME_REGISTRY.items():
        assert cls.name == key


@pytest.mark.parametrize("key", ["space_invaders", "snake", "flappy", "2048"])
def test_every_game_draws_a_snapshot(store, key: str) -> None:
    game = GAME_REGISTRY[key](store, 80, 36, rng=random.Random(5))
    game.start()
    for _ in range(10):
        game.update()

    snap = game.snapshot()

    assert isinstance(snap, Snapshot)
    assert snap.title
    assert snap.sprites
    assert snap.status.tone in (Tone.NEUTRAL, Tone.DANGER)
    assert "score" in snap.stats and "high_score" in snap.stats
    theme = get_theme(0)
    for sprite in snap.sprites:
        assert len(theme.rgb(sprite.color)) == 3


@pytest.mark.parametrize("key", ["snake", "flappy", "2048"])
def test_autosave_only_while_running(store, key: str) -> None:
    game = GAME_REGISTRY[key](store, 80, 36, rng=random.Random(5))
    game.autosave()
    assert store.calls == []

    game.start()
    game.autosave()
    assert len(store.calls) == 1

    game.handle_intent(Intent.TOGGLE_PAUSE)
    calls = len(store.calls)
    game.autosave()
    assert len(store.calls) == calls


def test_stop_saves_unfinished_run(store) -> None:
    game = GAME_REGISTRY["space_invaders"](store, 80, 36, rng=random.Random(5))
    game.start()
    game.state.score = 60

    game.stop()

    assert game.active is False
    assert store.load().score == 60


def test_leaderboard_lists_every_game() -> None:
    record = ProgressRecord(high_score=900, snake_high_score=40, flappy_high_score=3, twenty_forty_eight_high_score=2048)

    assert high_score_rows(record) == [
        ("Space Invaders", 900),
        ("Snake", 40),
        ("Flappy Bird", 3),
        ("2048", 2048),
    ]


def test_theme_cycle_wraps() -> None:
    last = len(THEMES) - 1
    assert next_theme_index(last) == 0
    assert get_theme(0).rgb("no_such_tag") == get_theme(0).rgb("text")
