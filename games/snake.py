from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional
from . import BaseGame, register_game
from progress import ProgressRecord
from systems.collision import point_in_grid
from systems.entities import Position
from systems.intents import DIRECTIONS, Intent
from systems.rules import get_rules
from systems.scoring import ScoreEvent, best, snake_score
from systems.snapshot import Snapshot, Sprite, Status, Tone

RULES = get_rules("snake").data

@dataclass
class SnakeState:
    body: list[Position]          # body[0] is the head
    direction: tuple[int, int]
    food: Optional[Position]      # None once the board is full
    score: int = 0
    high_score: int = 0
    game_over: bool = False
    paused: bool = False
    width: int = 20
    height: int = 20
    fruits_eaten: int = 0

def init_snake(width: int, height: int, high_score: int = 0, rng: random.Random | None = None) -> SnakeState:
    rng = rng or random.Random()
    cx, cy = width // 2, height // 2
    # Three cells stacked vertically, heading up
    body = [Position(cx, cy), Position(cx, cy + 1), Position(cx, cy + 2)]
    return SnakeState(
        body=body,
        direction=(0, -1),
        food=spawn_food(width, height, body, rng),
        high_score=high_score,
        width=width,
        height=height,
    )

def spawn_food(width: int, height: int, body: list[Position], rng: random.Random,
               attempts: int = RULES["food_attempts"]) -> Optional[Position]:
    """Pick a free interior cell: random tries first, then a scan so a crowded board still resolves.

    Returns None when every interior cell is taken.
    """
    occupied = {segment.as_tuple() for segment in body}
    if width > 2 and height > 2:
        for _ in range(attempts):
            x = rng.randrange(1, width - 1)
            y = rng.randrange(1, height - 1)
            if (x, y) not in occupied:
                return Position(x, y)

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if (x, y) not in occupied:
                return Position(x, y)
    return None

def update_snake(state: SnakeState, rng: random.Random) -> None:
    if state.game_over or state.paused:
        return

    head = state.body[0]
    dx, dy = state.direction
    new_head = Position(head.x + dx, head.y + dy)

    if not point_in_grid(new_head.as_tuple(), (state.width, state.height)):
        _end(state)
        return

    # Compared against every segment, the tail included, even though the tail
    # would move away this tick.
    if new_head in state.body:
        _end(state)
        return

    state.body.insert(0, new_head)
    if new_head == state.food:
        state.fruits_eaten += 1
        state.score += snake_score(ScoreEvent(fruits_eaten=1))
        state.high_score = best(state.high_score, state.score)
        state.food = spawn_food(state.width, state.height, state.body, rng)
        if state.food is None:
            _end(state)
    else:
        state.body.pop()

def _end(state: SnakeState) -> None:
    state.game_over = True
    state.high_score = best(state.high_score, state.score)

def change_direction(state: SnakeState, dx: int, dy: int) -> bool:
    """Steer immediately; a straight reversal onto the neck is refused."""
    if abs(dx) + abs(dy) != 1:
        return False
    cx, cy = state.direction
    if cx + dx == 0 and cy + dy == 0:
        return False
    state.direction = (dx, dy)
    return True

@register_game("snake")
class SnakeGame(BaseGame):
    title = "S N A K E"

    @classmethod
    def board_size(cls, term_cols: int, term_rows: int) -> tuple[int, int]:
        min_w, min_h = RULES["min_size"]
        # The host draws every logical column two glyphs wide
        return max(min_w, (term_cols - 6) // 2), max(min_h, term_rows - 12)

    def new_state(self, record: ProgressRecord) -> SnakeState:
        width, height = self.board_size(self.term_cols, self.term_rows)
        return init_snake(width, height, record.snake_high_score, self.rng)

    def on_intent(self, intent: Intent) -> bool:
        if intent is Intent.RESTART:
            # Keep a high score earned since the last save
            if self.in_progress:
                self.save_progress()
            self.reset()
            return True
        if self.state.game_over or self.state.paused:
            return False
        if intent in DIRECTIONS:
            return change_direction(self.state, *DIRECTIONS[intent])
        return False

    def step(self) -> None:
        update_snake(self.state, self.rng)

    def snapshot(self) -> Snapshot:
        state = self.state
        sprites = []
        if state.food is not None:
            sprites.append(Sprite(state.food.x, state.food.y, "❤", "food"))
        for idx, segment in enumerate(state.body):
            if idx == 0:
                sprites.append(Sprite(segment.x, segment.y, "O", "player"))
            else:
                sprites.append(Sprite(segment.x, segment.y, "•", "player_accent"))

        if state.game_over:
            status = Status(f"☠ GAME OVER - SCORE: {state.score} │ R=Restart │ Q=Menu", Tone.DANGER)
        elif state.paused:
            status = Status("⏸ PAUSED - P=Continue", Tone.WARNING)
        else:
            status = Status("ARROWS move │ P PAUSE │ Q MENU", Tone.NEUTRAL)

        return Snapshot(
            title=self.title,
            width=state.width,
            height=state.height,
            sprites=tuple(sprites),
            stats={"score": state.score, "high_score": state.high_score},
            status=status,
            cell_width=2,
        )
