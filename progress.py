from __future__ import annotations
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, TYPE_CHECKING
from settings import SAVE_DB_PATH

if TYPE_CHECKING:
    from settings import Settings

SCHEMA = """
CREATE TABLE IF NOT EXISTS game_save (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    high_score INTEGER NOT NULL DEFAULT 0,
    current_level INTEGER NOT NULL DEFAULT 1,
    current_score INTEGER NOT NULL DEFAULT 0,
    lives INTEGER NOT NULL DEFAULT 3,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

# Per-game high score columns, added to older save files on first open
AUX_COLUMNS = {
    "snake": "snake_high_score",
    "flappy": "flappy_high_score",
    "2048": "twenty_forty_eight_high_score",
}

@dataclass
class ProgressRecord:
    high_score: int = 0
    level: int = 1
    score: int = 0
    lives: int = 3
    snake_high_score: int = 0
    flappy_high_score: int = 0
    twenty_forty_eight_high_score: int = 0

    def aux_high_score(self, game_id: str) -> int:
        return getattr(self, aux_column(game_id))

    @property
    def can_resume(self) -> bool:
        return self.lives > 0

def aux_column(game_id: str) -> str:
    try:
        return AUX_COLUMNS[game_id]
    except KeyError:
        raise ValueError(f"No auxiliary high score for game {game_id!r}") from None

def _migrate(conn: sqlite3.Connection) -> None:
    existing = {row[1] for row in conn.execute("PRAGMA table_info(game_save)")}
    for column in AUX_COLUMNS.values():
        if column not in existing:
            conn.execute(f"ALTER TABLE game_save ADD COLUMN {column} INTEGER DEFAULT 0")

class SQLiteProgressStore:
    """Single-row save file: one record for the whole arcade, keyed by id = 1."""

    def __init__(self, path: Path | str = SAVE_DB_PATH):
        self.path = Path(path)

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        try:
            with conn:
                conn.executescript(SCHEMA)
                _migrate(conn)
                conn.execute("INSERT OR IGNORE INTO game_save (id) VALUES (1)")
                yield conn
        finally:
            conn.close()

    def load(self) -> ProgressRecord:
        columns = ", ".join(["high_score", "current_level", "current_score", "lives", *AUX_COLUMNS.values()])
        try:
            with self._session() as conn:
                row = conn.execute(f"SELECT {columns} FROM game_save WHERE id = 1").fetchone()
        except (sqlite3.Error, OSError) as e:
            print(f"❌ Failed to load progress: {e}")
            return ProgressRecord()
        if not row:
            return ProgressRecord()
        high_score, level, score, lives, snake_hi, flappy_hi, tfe_hi = row
        return ProgressRecord(
            high_score=high_score,
            level=level,
            score=score,
            lives=lives,
            snake_high_score=snake_hi or 0,
            flappy_high_score=flappy_hi or 0,
            twenty_forty_eight_high_score=tfe_hi or 0,
        )

    def save(self, high_score: int, level: int, score: int, lives: int) -> bool:
        return self._write(
            """
            UPDATE game_save
            SET high_score = ?, current_level = ?, current_score = ?, lives = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = 1
            """,
            (high_score, level, score, lives),
        )

    def save_aux(self, game_id: str, high_score: int) -> bool:
        column = aux_column(game_id)
        return self._write(f"UPDATE game_save SET {column} = ? WHERE id = 1", (high_score,))

    def reset(self) -> bool:
        """Drop the resumable run; every high score survives."""
        return self._write(
            """
            UPDATE game_save
            SET current_level = 1, current_score = 0, lives = 0, updated_at = CURRENT_TIMESTAMP
            WHERE id = 1
            """,
            (),
        )

    def close(self) -> None:
        ...

    def _write(self, query: str, params: tuple) -> bool:
        try:
            with self._session() as conn:
                conn.execute(query, params)
        except (sqlite3.Error, OSError) as e:
            print(f"❌ Failed to save progress: {e}")
            return False
        return True

def create_progress_store(cfg: Settings):
    """Postgres when configured and reachable, otherwise the local save file."""
    if cfg.db.is_configured:
        from database import PostgresProgressStore
        store = PostgresProgressStore(cfg.db)
        if store.open():
            return store
        print("⚠️  Falling back to local save file")
    return SQLiteProgressStore(cfg.save_path)
