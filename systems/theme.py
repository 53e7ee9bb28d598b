from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Tuple

from systems.snapshot import Tone

RGB = Tuple[int, int, int]

def hex_to_rgb(value: str) -> RGB:
    value = value.lstrip("#")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

@dataclass
class Theme:
    name: str
    colors: Dict[str, str] = field(default_factory=dict)

    def rgb(self, tag: str) -> RGB:
        """Resolve a colour tag from a snapshot; unknown tags fall back to text."""
        if tag.startswith("tile_"):
            return hex_to_rgb(TILE_COLORS.get(tag, "#FF0000"))
        return hex_to_rgb(self.colors.get(tag, self.colors["text"]))

    def tone(self, tone: Tone) -> RGB:
        return self.rgb(TONE_TAGS[tone])

TONE_TAGS = {
    Tone.NEUTRAL: "text_muted",
    Tone.WARNING: "warning",
    Tone.DANGER: "danger",
    Tone.SUCCESS: "success",
}

# 2048 tiles keep the same palette whatever the theme
TILE_COLORS = {
    "tile_2": "#555555",
    "tile_4": "#555577",
    "tile_8": "#555599",
    "tile_16": "#5555BB",
    "tile_32": "#5555DD",
    "tile_64": "#5555FF",
    "tile_128": "#7755FF",
    "tile_256": "#9955FF",
    "tile_512": "#BB55FF",
    "tile_1024": "#DD55FF",
    "tile_2048": "#FF5500",
}

def _palette(background, border, text, muted, highlight, success, danger, warning,
             player, accent, enemy, enemy_alt, bullet, food, obstacle) -> Dict[str, str]:
    return {
        "background": background,
        "border": border,
        "text": text,
        "text_muted": muted,
        "text_highlight": highlight,
        "success": success,
        "danger": danger,
        "warning": warning,
        "player": player,
        "player_accent": accent,
        "enemy": enemy,
        "enemy_alt": enemy_alt,
        "enemy_elite": highlight,
        "ufo": danger,
        "bullet": bullet,
        "enemy_bullet": danger,
        "explosion": warning,
        "shield": obstacle,
        "food": food,
        "obstacle": obstacle,
    }

THEMES = [
    Theme("Matrix", _palette("#000000", "#00FF00", "#00FF00", "#006600", "#88FF88", "#00FF00", "#FF0000",
                             "#FFFF00", "#00FF00", "#004400", "#00CC00", "#009900", "#00FF00", "#00FF00",
                             "#008800")),
    Theme("Retro Amber", _palette("#1A0F00", "#FF9900", "#FFBB33", "#996600", "#FFDD88", "#FF9900", "#FF3300",
                                  "#FFCC00", "#FF9900", "#663300", "#FFAA00", "#CC8800", "#FFCC00", "#FF6600",
                                  "#AA6600")),
    Theme("Cyberpunk", _palette("#0D0221", "#FF00FF", "#00FFFF", "#0088AA", "#FF88FF", "#00FF88", "#FF0066",
                                "#FFFF00", "#00FFFF", "#004466", "#FF00FF", "#FF66FF", "#00FFFF", "#FF00FF",
                                "#8800AA")),
    Theme("Classic", _palette("#000000", "#FFFFFF", "#FFFFFF", "#888888", "#FFFFFF", "#00FF00", "#FF0000",
                              "#FFFF00", "#00FF00", "#004400", "#FFFFFF", "#AAAAAA", "#FFFFFF", "#FF0000",
                              "#666666")),
]

def get_theme(index: int) -> Theme:
    return THEMES[index % len(THEMES)]

def next_theme_index(index: int) -> int:
    return (index + 1) % len(THEMES)
