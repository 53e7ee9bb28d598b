from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List
from . import BaseGame, register_game
from progress import ProgressRecord
from systems.intents import DIRECTIONS, Intent
from systems.rules import get_rules
from systems.scoring import ScoreEvent, best, merge_score
from systems.snapshot import Snapshot, Sprite, Status, Tone

RULES = get_rules("2048").data
SIZE = RULES["size"]
WIN_TILE = RULES["win_tile"]

Grid = List[List[int]]

@dataclass
class TwentyFortyEightState:
    grid: Grid
    score: int = 0
    high_score: int = 0
    game_over: bool = False
    won: bool = False
    paused: bool = False
    width: int = 40
    height: int = 4

def empty_grid() -> Grid:
    return [[0 for _ in range(SIZE)] for _ in range(SIZE)]

def init_board(width: int, height: int, high_score: int = 0, rng: random.Random | None = None) -> TwentyFortyEightState:
    rng = rng or random.Random()
    state = TwentyFortyEightState(grid=empty_grid(), high_score=high_score, width=width, height=height)
    add_random_tile(state, rng)
    add_random_tile(state, rng)
    return state

def add_random_tile(state: TwentyFortyEightState, rng: random.Random) -> bool:
    empty = [(r, c) for r in range(SIZE) for c in range(SIZE) if state.grid[r][c] == 0]
    if not empty:
        return False
    r, c = rng.choice(empty)
    state.grid[r][c] = 4 if rng.random() < RULES["four_chance"] else 2
    return True

def slide_line(values: List[int]) -> tuple[List[int], int, bool]:
    """Slide one row/column toward index 0.

    Returns the new line, the points gained and whether a 2048 tile appeared.
    Each tile merges at most once: ``[2, 2, 4, 0]`` becomes ``[4, 4, 0, 0]``.
    """
    tiles = [v for v in values if v != 0]
    merged: List[int] = []
    gained = 0
    reached = False
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            value = tiles[i] * 2
            merged.append(value)
            gained += merge_score(ScoreEvent(merged_value=value))
            reached = reached or value == WIN_TILE
            i += 2
        else:
            merged.append(tiles[i])
            i += 1
    merged.extend([0] * (len(values) - len(merged)))
    return merged, gained, reached

def _lines(dr: int, dc: int) -> List[List[tuple[int, int]]]:
    """Cell coordinates of every line, ordered from the wall the tiles move toward."""
    if dc != 0:
        cols = list(range(SIZE - 1, -1, -1)) if dc == 1 else list(range(SIZE))
        return [[(r, c) for c in cols] for r in range(SIZE)]
    rows = list(range(SIZE - 1, -1, -1)) if dr == 1 else list(range(SIZE))
    return [[(r, c) for r in rows] for c in range(SIZE)]

def move(state: TwentyFortyEightState, dr: int, dc: int, rng: random.Random) -> bool:
    """Slide the whole board. Nothing changes unless some tile actually moves or merges."""
    if state.game_over or abs(dr) + abs(dc) != 1:
        return False

    new_grid = empty_grid()
    gained = 0
    reached = False
    moved = False
    for cells in _lines(dr, dc):
        before = [state.grid[r][c] for r, c in cells]
        after, points, hit = slide_line(before)
        gained += points
        reached = reached or hit
        if after != before:
            moved = True
        for (r, c), value in zip(cells, after):
            new_grid[r][c] = value

    if not moved:
        return False

    state.grid = new_grid
    state.score += gained
    if reached:
        state.won = True
    add_random_tile(state, rng)
    state.high_score = best(state.high_score, state.score)
    state.game_over = is_stuck(state.grid)
    return True

def is_stuck(grid: Grid) -> bool:
    for r in range(SIZE):
        for c in range(SIZE):
            if grid[r][c] == 0:
                return False
            if c + 1 < SIZE and grid[r][c] == grid[r][c + 1]:
                return False
            if r + 1 < SIZE and grid[r][c] == grid[r + 1][c]:
                return False
    return True

@register_game("2048")
class TwentyFortyEightGame(BaseGame):
    title = "2 0 4 8"

    @classmethod
    def board_size(cls, term_cols: int, term_rows: int) -> tuple[int, int]:
        return term_cols - 6, SIZE

    def new_state(self, record: ProgressRecord) -> TwentyFortyEightState:
        width, height = self.board_size(self.term_cols, self.term_rows)
        return init_board(width, height, record.twenty_forty_eight_high_score, self.rng)

    def on_intent(self, intent: Intent) -> bool:
        if intent is Intent.RESTART:
            if not self.state.game_over:
                return False
            self.reset()
            return True
        if self.state.game_over or self.state.paused:
            return False
        if intent in DIRECTIONS:
            dc, dr = DIRECTIONS[intent]
            return move(self.state, dr, dc, self.rng)
        return False

    def snapshot(self) -> Snapshot:
        state = self.state
        sprites = []
        # Each tile is a 6-wide cell: "  2048" right-aligned, one row per grid row
        for r in range(SIZE):
            for c in range(SIZE):
                value = state.grid[r][c]
                glyph = f"{value:>5} " if value else "    · "
                color = f"tile_{value}" if value else "text_muted"
                sprites.append(Sprite(c * 6, r, glyph, color))

        if state.game_over:
            status = Status(f"☠ GAME OVER - SCORE: {state.score} │ R=Restart │ Q=Menu", Tone.DANGER)
        elif state.paused:
            status = Status("⏸ PAUSED - P=Continue", Tone.WARNING)
        elif state.won:
            status = Status("🎉 YOU REACHED 2048! │ ARROWS CONTINUE │ Q=Menu", Tone.SUCCESS)
        else:
            status = Status("ARROWS TO SLIDE │ P PAUSE │ Q MENU", Tone.NEUTRAL)

        return Snapshot(
            title=self.title,
            width=SIZE * 6,
            height=SIZE,
            sprites=tuple(sprites),
            stats={"score": state.score, "high_score": state.high_score},
            status=status,
        )
