from dataclasses import dataclass, field
from pathlib import Path
import os
from dotenv import load_dotenv
import pygame

BASE_DIR = Path(__file__).resolve().parent

# Load environment variables from .env file
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("ARCADE_DATA_DIR", str(BASE_DIR / "data")))
SAVE_DB_PATH = DATA_DIR / "game_save.db"

@dataclass
class DatabaseConfig:
    """Optional Postgres connection used for progress instead of the local SQLite file."""
    host: str = os.getenv("DB_HOST", "")
    port: int = int(os.getenv("DB_PORT", "5432"))
    database: str = os.getenv("DB_NAME", "")
    user: str = os.getenv("DB_USER", "")
    password: str = os.getenv("DB_PASSWORD", "")
    # A full connection string wins over the individual fields
    connection_string: str = os.getenv("DATABASE_URL", "")

    @property
    def is_configured(self) -> bool:
        """Check if database is configured (either via connection string or individual params)."""
        return bool(self.connection_string or (self.host and self.database and self.user))

def _env_seed() -> int | None:
    raw = os.getenv("ARCADE_SEED", "")
    return int(raw) if raw.strip() else None

@dataclass
class Settings:
    width: int = 960
    height: int = 720
    fullscreen: bool = False
    title: str = "Retro Arcade"
    key_repeat_delay: int = 120
    key_repeat_interval: int = 30

    # Timing (milliseconds). Gameplay speed is tied to the tick, not to wall time.
    tick_ms: int = 33
    snake_tick_divisor: int = 3
    autosave_ms: int = 30_000

    # Glyph grid: the window is treated as a terminal of term_cols x term_rows cells
    cell_w: int = 12
    cell_h: int = 20
    font_name: str = "dejavusansmono"
    font_size: int = 18

    theme_index: int = 0
    seed: int | None = None

    db: DatabaseConfig = field(default_factory=DatabaseConfig)
    save_path: Path = SAVE_DB_PATH

    def __post_init__(self):
        if self.seed is None:
            self.seed = _env_seed()

    @property
    def screen_size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def term_cols(self) -> int:
        return self.width // self.cell_w

    @property
    def term_rows(self) -> int:
        return self.height // self.cell_h

def ensure_directories() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)

def init_pygame_window(cfg: Settings) -> pygame.Surface:
    pygame.display.set_caption(cfg.title)
    flags = pygame.FULLSCREEN if cfg.fullscreen else 0
    size = (0, 0) if cfg.fullscreen else cfg.screen_size
    screen = pygame.display.set_mode(size, flags)
    if cfg.fullscreen:
        cfg.width, cfg.height = screen.get_size()
    # Held arrow keys keep steering / moving the ship
    pygame.key.set_repeat(cfg.key_repeat_delay, cfg.key_repeat_interval)
    return screen
