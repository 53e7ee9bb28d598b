from __future__ import annotations

import pygame
import pytest

from systems.controls import intent_for_key
from systems.intents import DIRECTIONS, Intent


@pytest.mark.parametrize(
    "key, intent",
    [
        (pygame.K_LEFT, Intent.MOVE_LEFT),
        (pygame.K_a, Intent.MOVE_LEFT),
        (pygame.K_d, Intent.MOVE_RIGHT),
        (pygame.K_UP, Intent.MOVE_UP),
        (pygame.K_s, Intent.MOVE_DOWN),
        (pygame.K_SPACE, Intent.FIRE),
        (pygame.K_p, Intent.TOGGLE_PAUSE),
        (pygame.K_r, Intent.RESTART),
        (pygame.K_n, Intent.NEW_GAME),
        (pygame.K_q, Intent.QUIT_TO_MENU),
        (pygame.K_ESCAPE, Intent.QUIT_TO_MENU),
    ],
)
def test_default_keymap(key, intent) -> None:
    assert intent_for_key(key) is intent
    assert intent_for_key(key, "snake") is intent


def test_flappy_maps_jump_keys() -> None:
    assert intent_for_key(pygame.K_SPACE, "flappy") is Intent.JUMP
    assert intent_for_key(pygame.K_UP, "flappy") is Intent.JUMP
    assert intent_for_key(pygame.K_p, "flappy") is Intent.TOGGLE_PAUSE


def test_unmapped_key_has_no_intent() -> None:
    assert intent_for_key(pygame.K_F5) is None


def test_directions_are_unit_vectors() -> None:
    assert all(abs(dx) + abs(dy) == 1 for dx, dy in DIRECTIONS.values())
