from __future__ import annotations
import asyncio
import concurrent.futures
import asyncpg
from typing import Optional
from settings import DatabaseConfig
from progress import AUX_COLUMNS, ProgressRecord, aux_column
from async_helper import run_async

SCHEMA = """
    CREATE TABLE IF NOT EXISTS game_save (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        high_score INTEGER NOT NULL DEFAULT 0,
        current_level INTEGER NOT NULL DEFAULT 1,
        current_score INTEGER NOT NULL DEFAULT 0,
        lives INTEGER NOT NULL DEFAULT 3,
        updated_at TIMESTAMP NOT NULL DEFAULT NOW()
    );
    ALTER TABLE game_save ADD COLUMN IF NOT EXISTS snake_high_score INTEGER DEFAULT 0;
    ALTER TABLE game_save ADD COLUMN IF NOT EXISTS flappy_high_score INTEGER DEFAULT 0;
    ALTER TABLE game_save ADD COLUMN IF NOT EXISTS twenty_forty_eight_high_score INTEGER DEFAULT 0;
    INSERT INTO game_save (id) VALUES (1) ON CONFLICT (id) DO NOTHING;
"""

# Errors a lost or misconfigured server can raise; none of them may stop a game.
# run_async waits on a concurrent future, whose TimeoutError is its own class before 3.11.
DB_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
    concurrent.futures.TimeoutError,
    RuntimeError,
)

class DatabaseManager:
    """Async progress storage for Neon/Postgres with connection pooling."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """Create connection pool."""
        if not self.config.is_configured:
            print("⚠️  Database not configured - skipping connection")
            return

        try:
            if self.config.connection_string:
                self.pool = await asyncpg.create_pool(
                    self.config.connection_string,
                    min_size=1,
                    max_size=4,
                    command_timeout=10
                )
            else:
                self.pool = await asyncpg.create_pool(
                    host=self.config.host,
                    port=self.config.port,
                    database=self.config.database,
                    user=self.config.user,
                    password=self.config.password,
                    min_size=1,
                    max_size=4,
                    command_timeout=10
                )
            print("✅ Database connected successfully")
        except DB_ERRORS as e:
            print(f"❌ Database connection failed: {e}")
            self.pool = None

    async def disconnect(self) -> None:
        """Close connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            print("🔌 Database disconnected")

    async def execute(self, query: str, *args) -> str:
        """Execute a query that doesn't return rows (INSERT, UPDATE, DELETE)."""
        if not self.pool:
            raise RuntimeError("Database not connected")
        async with self.pool.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetchrow(self, query: str, *args) -> Optional[asyncpg.Record]:
        """Fetch a single row."""
        if not self.pool:
            raise RuntimeError("Database not connected")
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    # ========== PROGRESS ==========

    async def load_progress(self) -> ProgressRecord:
        columns = ", ".join(["high_score", "current_level", "current_score", "lives", *AUX_COLUMNS.values()])
        row = await self.fetchrow(f"SELECT {columns} FROM game_save WHERE id = 1")
        if not row:
            return ProgressRecord()
        return ProgressRecord(
            high_score=row["high_score"],
            level=row["current_level"],
            score=row["current_score"],
            lives=row["lives"],
            snake_high_score=row["snake_high_score"] or 0,
            flappy_high_score=row["flappy_high_score"] or 0,
            twenty_forty_eight_high_score=row["twenty_forty_eight_high_score"] or 0,
        )

    async def save_progress(self, high_score: int, level: int, score: int, lives: int) -> None:
        query = """
            UPDATE game_save
            SET high_score = $1, current_level = $2, current_score = $3, lives = $4,
                updated_at = NOW()
            WHERE id = 1
        """
        await self.execute(query, high_score, level, score, lives)

    async def save_aux_high_score(self, game_id: str, high_score: int) -> None:
        column = aux_column(game_id)
        await self.execute(f"UPDATE game_save SET {column} = $1 WHERE id = 1", high_score)

    async def reset_progress(self) -> None:
        query = """
            UPDATE game_save
            SET current_level = 1, current_score = 0, lives = 0, updated_at = NOW()
            WHERE id = 1
        """
        await self.execute(query)

    # ========== DATABASE INITIALIZATION ==========

    async def init_schema(self) -> None:
        """Create the save table and add any missing per-game columns."""
        if not self.pool:
            return
        async with self.pool.acquire() as conn:
            await conn.execute(SCHEMA)
        print("📊 Database schema initialized")

class PostgresProgressStore:
    """Blocking facade over DatabaseManager with the same contract as the SQLite store."""

    def __init__(self, config: DatabaseConfig, manager: DatabaseManager | None = None):
        self.manager = manager or DatabaseManager(config)

    def open(self) -> bool:
        try:
            run_async(self.manager.connect())
            if self.manager.pool is None:
                return False
            run_async(self.manager.init_schema())
        except DB_ERRORS as e:
            print(f"❌ Database setup failed: {e}")
            return False
        return True

    def close(self) -> None:
        try:
            run_async(self.manager.disconnect())
        except DB_ERRORS as e:
            print(f"❌ Database disconnect failed: {e}")

    def load(self) -> ProgressRecord:
        try:
            return run_async(self.manager.load_progress())
        except DB_ERRORS as e:
            print(f"❌ Failed to load progress: {e}")
            return ProgressRecord()

    def save(self, high_score: int, level: int, score: int, lives: int) -> bool:
        return self._call(self.manager.save_progress(high_score, level, score, lives))

    def save_aux(self, game_id: str, high_score: int) -> bool:
        aux_column(game_id)
        return self._call(self.manager.save_aux_high_score(game_id, high_score))

    def reset(self) -> bool:
        return self._call(self.manager.reset_progress())

    def _call(self, coro) -> bool:
        try:
            run_async(coro)
        except DB_ERRORS as e:
            print(f"❌ Failed to save progress: {e}")
            return False
        return True
