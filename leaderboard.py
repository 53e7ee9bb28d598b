from __future__ import annotations
from typing import List, Tuple
import pygame
from progress import ProgressRecord
from settings import Settings
from systems.scoring import format_score
from systems.theme import Theme

GAME_LABELS = [
    ("Space Invaders", "high_score"),
    ("Snake", "snake_high_score"),
    ("Flappy Bird", "flappy_high_score"),
    ("2048", "twenty_forty_eight_high_score"),
]

def high_score_rows(record: ProgressRecord) -> List[Tuple[str, int]]:
    return [(label, getattr(record, attr)) for label, attr in GAME_LABELS]

class LeaderboardView:
    def __init__(self, screen: pygame.Surface, cfg: Settings, font: pygame.font.Font, store):
        self.screen = screen
        self.cfg = cfg
        self.font = font
        self.store = store
        self.rows: List[Tuple[str, int]] = []

    def refresh(self) -> None:
        self.rows = high_score_rows(self.store.load())

    def draw(self, theme: Theme) -> None:
        self.screen.fill(theme.rgb("background"))
        title = self.font.render("HIGH SCORES", True, theme.rgb("text_highlight"))
        self.screen.blit(title, (self.cfg.width // 2 - title.get_width() // 2, 60))
        for idx, (label, score) in enumerate(self.rows, start=1):
            line = self.font.render(f"{idx:02d}. {label:<16} {format_score(score)}", True, theme.rgb("text"))
            self.screen.blit(line, (self.cfg.width // 2 - 180, 100 + idx * 36))
        hint = self.font.render("any key - back", True, theme.rgb("text_muted"))
        self.screen.blit(hint, (self.cfg.width // 2 - hint.get_width() // 2, self.cfg.height - 60))
