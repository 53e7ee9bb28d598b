from __future__ import annotations
import random
import pygame
from settings import Settings, ensure_directories, init_pygame_window
from games import GAME_REGISTRY, BaseGame
from leaderboard import LeaderboardView
from progress import create_progress_store
from async_helper import stop_async_loop
from systems.controls import intent_for_key
from systems.intents import Intent
from systems.snapshot import Snapshot
from systems.theme import get_theme, next_theme_index

TICK_EVENT = pygame.USEREVENT + 1
AUTOSAVE_EVENT = pygame.USEREVENT + 2

MENU_OPTIONS = ["space_invaders", "snake", "flappy", "2048", "leaderboard", "theme", "quit"]
MENU_LABELS = {
    "space_invaders": "Space Invaders",
    "snake": "Snake",
    "flappy": "Flappy Bird",
    "2048": "2048",
    "leaderboard": "High Scores",
    "theme": "Theme",
    "quit": "Quit",
}

# Glyph rows used above the board (title, stats, spacer)
HUD_TOP = 3

class ArcadeApp:
    def __init__(self, cfg: Settings | None = None):
        ensure_directories()
        pygame.init()
        self.cfg = cfg or Settings()
        self.screen = init_pygame_window(self.cfg)
        self.font = pygame.font.SysFont(self.cfg.font_name, self.cfg.font_size)
        self.menu_font = pygame.font.SysFont(self.cfg.font_name, 28)
        self.store = create_progress_store(self.cfg)
        self.rng = random.Random(self.cfg.seed)
        self.state = "menu"
        self.menu_index = 0
        self.active_game: BaseGame | None = None
        self.theme_index = self.cfg.theme_index
        self.tick_count = 0
        self.running = True
        self.leaderboard = LeaderboardView(self.screen, self.cfg, self.menu_font, self.store)
        self.menu_button_rects: list[tuple[str, pygame.Rect]] = []
        self.glyph_cache: dict[tuple[str, tuple[int, int, int]], pygame.Surface] = {}

    @property
    def theme(self):
        return get_theme(self.theme_index)

    def cleanup(self):
        """Save an unfinished run and release the store before exit."""
        if self.active_game:
            self.active_game.stop()
            self.active_game = None
        self.store.close()
        stop_async_loop()
        pygame.quit()

    def run(self) -> None:
        pygame.time.set_timer(TICK_EVENT, self.cfg.tick_ms)
        pygame.time.set_timer(AUTOSAVE_EVENT, self.cfg.autosave_ms)
        try:
            while self.running:
                for event in [pygame.event.wait(), *pygame.event.get()]:
                    self.handle_event(event)
        finally:
            self.cleanup()

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == TICK_EVENT:
            self.tick()
        elif event.type == AUTOSAVE_EVENT:
            if self.state == "game" and self.active_game:
                self.active_game.autosave()
        elif self.state == "menu":
            self.handle_menu_event(event)
        elif self.state == "game" and self.active_game:
            self.handle_game_event(event)
        elif self.state == "leaderboard":
            if event.type in (pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN):
                self.state = "menu"

    def tick(self) -> None:
        if self.state == "game" and self.active_game:
            self.tick_count += 1
            divisor = self.cfg.snake_tick_divisor if self.active_game.name == "snake" else 1
            if self.tick_count % divisor == 0:
                self.active_game.update()
        self.draw()
        pygame.display.flip()

    # ----- Game -----
    def start_game(self, key: str) -> None:
        GameClass = GAME_REGISTRY[key]
        self.active_game = GameClass(self.store, self.cfg.term_cols, self.cfg.term_rows, rng=self.rng)
        self.active_game.start()
        self.tick_count = 0
        self.state = "game"

    def back_to_menu(self) -> None:
        if self.active_game:
            self.active_game.stop()
        self.active_game = None
        self.state = "menu"

    def handle_game_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        intent = intent_for_key(event.key, self.active_game.name)
        if intent is None:
            return
        if intent is Intent.QUIT_TO_MENU:
            self.back_to_menu()
            return
        self.active_game.handle_intent(intent)

    # ----- Menu -----
    def choose(self, option: str) -> None:
        if option == "leaderboard":
            self.leaderboard.refresh()
            self.state = "leaderboard"
        elif option == "theme":
            self.theme_index = next_theme_index(self.theme_index)
        elif option == "quit":
            self.running = False
        else:
            self.start_game(option)

    def handle_menu_event(self, event: pygame.event.Event) -> None:
        if not self.menu_button_rects:
            self.build_menu_buttons()

        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_UP, pygame.K_w):
                self.menu_index = (self.menu_index - 1) % len(MENU_OPTIONS)
            elif event.key in (pygame.K_DOWN, pygame.K_s):
                self.menu_index = (self.menu_index + 1) % len(MENU_OPTIONS)
            elif event.key in (pygame.K_RETURN, pygame.K_SPACE):
                self.choose(MENU_OPTIONS[self.menu_index])
            elif event.key == pygame.K_t:
                self.theme_index = next_theme_index(self.theme_index)
            elif event.key in (pygame.K_q, pygame.K_ESCAPE):
                self.running = False
        elif event.type == pygame.MOUSEMOTION:
            for idx, (option, rect) in enumerate(self.menu_button_rects):
                if rect.collidepoint(*event.pos):
                    self.menu_index = idx
                    break
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for option, rect in self.menu_button_rects:
                if rect.collidepoint(*event.pos):
                    self.choose(option)
                    break

    def build_menu_buttons(self) -> None:
        self.menu_button_rects.clear()
        base_y = 160
        spacing = 60
        button_width = 360
        for idx, option in enumerate(MENU_OPTIONS):
            x = self.cfg.width // 2 - button_width // 2
            y = base_y + idx * spacing
            self.menu_button_rects.append((option, pygame.Rect(x, y, button_width, 46)))

    def draw_menu(self) -> None:
        theme = self.theme
        self.screen.fill(theme.rgb("background"))
        title = self.menu_font.render("R E T R O   A R C A D E", True, theme.rgb("text_highlight"))
        self.screen.blit(title, (self.cfg.width // 2 - title.get_width() // 2, 70))

        self.build_menu_buttons()
        for idx, (option, rect) in enumerate(self.menu_button_rects):
            label = MENU_LABELS[option]
            if option == "theme":
                label = f"Theme: {theme.name}"
            selected = idx == self.menu_index
            border = theme.rgb("text_highlight") if selected else theme.rgb("border")
            pygame.draw.rect(self.screen, border, rect, width=2, border_radius=6)
            text_surf = self.menu_font.render(label, True, theme.rgb("text_highlight" if selected else "text"))
            tx = rect.x + (rect.width - text_surf.get_width()) // 2
            ty = rect.y + (rect.height - text_surf.get_height()) // 2
            self.screen.blit(text_surf, (tx, ty))

    # ----- Drawing -----
    def draw(self) -> None:
        if self.state == "menu":
            self.draw_menu()
        elif self.state == "game" and self.active_game:
            self.draw_snapshot(self.active_game.snapshot())
        elif self.state == "leaderboard":
            self.leaderboard.draw(self.theme)

    def glyph(self, ch: str, color: tuple[int, int, int]) -> pygame.Surface:
        key = (ch, color)
        surf = self.glyph_cache.get(key)
        if surf is None:
            surf = self.font.render(ch, True, color)
            self.glyph_cache[key] = surf
        return surf

    def put_text(self, col: int, row: int, text: str, color: tuple[int, int, int]) -> None:
        for i, ch in enumerate(text):
            if ch != " ":
                self.screen.blit(self.glyph(ch, color), ((col + i) * self.cfg.cell_w, row * self.cfg.cell_h))

    def put_centered(self, row: int, text: str, color: tuple[int, int, int]) -> None:
        self.put_text(max(0, (self.cfg.term_cols - len(text)) // 2), row, text, color)

    def draw_snapshot(self, snap: Snapshot) -> None:
        theme = self.theme
        cw, ch = self.cfg.cell_w, self.cfg.cell_h
        self.screen.fill(theme.rgb("background"))

        self.put_centered(0, snap.title, theme.rgb("text_highlight"))
        stats = f"SCORE {snap.stats.get('score', 0):05d}    HI {snap.stats.get('high_score', 0):05d}"
        if "lives" in snap.stats:
            stats += "    " + "♥" * max(0, snap.stats["lives"]) + f"    LEVEL {snap.stats.get('level', 1)}"
        self.put_centered(1, stats, theme.rgb("text"))

        board_cols = snap.width * snap.cell_width
        ox = max(1, (self.cfg.term_cols - board_cols) // 2)
        oy = HUD_TOP
        frame = pygame.Rect((ox - 1) * cw + cw // 2, (oy - 1) * ch + ch // 2, (board_cols + 1) * cw, (snap.height + 1) * ch)
        pygame.draw.rect(self.screen, theme.rgb("border"), frame, width=1)

        for sprite in snap.sprites:
            color = theme.rgb(sprite.color)
            for i, glyph in enumerate(sprite.glyph):
                col = sprite.x * snap.cell_width + i
                if 0 <= col < board_cols and 0 <= sprite.y < snap.height and glyph != " ":
                    self.screen.blit(self.glyph(glyph, color), ((ox + col) * cw, (oy + sprite.y) * ch))

        self.put_centered(oy + snap.height + 1, snap.status.text, theme.tone(snap.status.tone))

def main() -> None:
    ArcadeApp().run()

if __name__ == "__main__":
    main()
