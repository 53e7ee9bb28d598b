from __future__ import annotations

import os
import random

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from progress import SQLiteProgressStore


class RecordingStore(SQLiteProgressStore):
    """SQLite store that also remembers every write, so tests can count them."""

    def __init__(self, path):
        super().__init__(path)
        self.calls: list[tuple[str, tuple]] = []

    def save(self, high_score: int, level: int, score: int, lives: int) -> bool:
        self.calls.append(("save", (high_score, level, score, lives)))
        return super().save(high_score, level, score, lives)

    def save_aux(self, game_id: str, high_score: int) -> bool:
        self.calls.append(("save_aux", (game_id, high_score)))
        return super().save_aux(game_id, high_score)

    def reset(self) -> bool:
        self.calls.append(("reset", ()))
        return super().reset()


@pytest.fixture()
def store(tmp_path) -> RecordingStore:
    return RecordingStore(tmp_path / "game_save.db")


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)
