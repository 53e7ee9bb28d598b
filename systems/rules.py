from dataclasses import dataclass, field
from typing import Dict, Any

@dataclass
class GameRuleSet:
    name: str
    data: Dict[str, Any] = field(default_factory=dict)

DEFAULT_RULES = {
    "space_invaders": GameRuleSet(
        name="space_invaders",
        data={
            "lives": 3,
            "bullet_limit": 3,
            "board_width": (40, 60),
            "board_height": (16, 22),
            "enemy_spacing": 5,
            "shield_health": 4,
            "ufo_values": (50, 100, 150, 300),
            "anim_every": 10,
            "ufo_every": 3,
            "enemy_bullet_every": 3,
            "enemy_shoot_every": 8,
            "min_move_interval": 3,
        },
    ),
    "snake": GameRuleSet(
        name="snake",
        data={"min_size": (10, 10), "food_attempts": 100},
    ),
    "flappy": GameRuleSet(
        name="flappy",
        data={
            "gravity": 0.15,
            "jump": -0.8,
            "max_fall": 1.2,
            "pipe_speed": 0.5,
            "pipe_every": 60,
            "gap_height": 6,
            "gap_margin": 2,
            "offscreen_x": -4,
        },
    ),
    "2048": GameRuleSet(
        name="2048",
        data={"size": 4, "win_tile": 2048, "four_chance": 0.1},
    ),
}

def get_rules(game: str) -> GameRuleSet:
    return DEFAULT_RULES.get(game, GameRuleSet(name=game))
