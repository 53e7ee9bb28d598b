from __future__ import annotations
from typing import Dict, Optional
import pygame

from systems.intents import Intent

# Arrow keys and WASD both steer
DEFAULT_KEYMAP: Dict[int, Intent] = {
    pygame.K_LEFT: Intent.MOVE_LEFT,
    pygame.K_a: Intent.MOVE_LEFT,
    pygame.K_RIGHT: Intent.MOVE_RIGHT,
    pygame.K_d: Intent.MOVE_RIGHT,
    pygame.K_UP: Intent.MOVE_UP,
    pygame.K_w: Intent.MOVE_UP,
    pygame.K_DOWN: Intent.MOVE_DOWN,
    pygame.K_s: Intent.MOVE_DOWN,
    pygame.K_SPACE: Intent.FIRE,
    pygame.K_p: Intent.TOGGLE_PAUSE,
    pygame.K_r: Intent.RESTART,
    pygame.K_n: Intent.NEW_GAME,
    pygame.K_q: Intent.QUIT_TO_MENU,
    pygame.K_ESCAPE: Intent.QUIT_TO_MENU,
}

GAME_OVERRIDES: Dict[str, Dict[int, Intent]] = {
    "flappy": {
        pygame.K_SPACE: Intent.JUMP,
        pygame.K_UP: Intent.JUMP,
        pygame.K_w: Intent.JUMP,
    },
}

def intent_for_key(key: int, game: str = "") -> Optional[Intent]:
    override = GAME_OVERRIDES.get(game, {})
    if key in override:
        return override[key]
    return DEFAULT_KEYMAP.get(key)
