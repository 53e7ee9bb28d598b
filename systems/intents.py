from __future__ import annotations
from enum import Enum

class Intent(str, Enum):
    """Abstract player actions; engines never see raw key codes."""
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    FIRE = "fire"
    JUMP = "jump"
    TOGGLE_PAUSE = "toggle_pause"
    RESTART = "restart"
    NEW_GAME = "new_game"
    QUIT_TO_MENU = "quit_to_menu"

DIRECTIONS = {
    Intent.MOVE_LEFT: (-1, 0),
    Intent.MOVE_RIGHT: (1, 0),
    Intent.MOVE_UP: (0, -1),
    Intent.MOVE_DOWN: (0, 1),
}
