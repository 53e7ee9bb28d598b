from __future__ import annotations
import math
import random
from dataclasses import dataclass, field
from typing import List
from . import BaseGame, register_game
from progress import ProgressRecord
from systems.entities import Pipe
from systems.intents import Intent
from systems.rules import get_rules
from systems.scoring import ScoreEvent, best, flappy_score
from systems.snapshot import Snapshot, Sprite, Status, Tone

RULES = get_rules("flappy").data

@dataclass
class FlappyState:
    bird_y: float
    velocity: float = 0.0
    pipes: List[Pipe] = field(default_factory=list)
    score: int = 0
    high_score: int = 0
    game_over: bool = False
    paused: bool = False
    width: int = 60
    height: int = 20
    tick_count: int = 0

    @property
    def bird_x(self) -> int:
        return self.width // 4

def init_flappy(width: int, height: int, high_score: int = 0) -> FlappyState:
    return FlappyState(bird_y=float(height // 2), high_score=high_score, width=width, height=int(height))

def apply_gravity(y: float, velocity: float) -> tuple[float, float]:
    """One fixed step of fall: accelerate, clamp to terminal speed, then move."""
    velocity = min(velocity + RULES["gravity"], RULES["max_fall"])
    y += velocity
    return round(y, 4), round(velocity, 4)

def jump(state: FlappyState) -> bool:
    if state.game_over or state.paused:
        return False
    state.velocity = RULES["jump"]
    return True

def spawn_pipe(state: FlappyState, rng: random.Random) -> Pipe:
    gap_height = RULES["gap_height"]
    margin = RULES["gap_margin"]
    low = margin
    high = max(low, state.height - gap_height - margin)
    pipe = Pipe(x=float(state.width), gap_y=rng.randint(low, high), gap_height=gap_height)
    state.pipes.append(pipe)
    return pipe

def pipe_blocks(pipe: Pipe, bird_x: int, bird_y: float) -> bool:
    # A pipe is drawn in columns floor(x) and floor(x) + 1
    px = math.floor(pipe.x)
    if bird_x not in (px, px + 1):
        return False
    return bird_y < pipe.gap_y or bird_y >= pipe.gap_y + pipe.gap_height

def update_flappy(state: FlappyState, rng: random.Random) -> None:
    if state.game_over or state.paused:
        return

    state.tick_count += 1
    state.bird_y, state.velocity = apply_gravity(state.bird_y, state.velocity)

    # Offset by one tick so the first pipe shows up right away
    if state.tick_count % RULES["pipe_every"] == 1:
        spawn_pipe(state, rng)

    bird_x = state.bird_x
    kept: List[Pipe] = []
    for pipe in state.pipes:
        pipe.x -= RULES["pipe_speed"]
        if pipe.x < RULES["offscreen_x"]:
            continue
        kept.append(pipe)

        if not pipe.passed and pipe.x < bird_x:
            pipe.passed = True
            state.score += flappy_score(ScoreEvent(pipes_passed=1))
            state.high_score = best(state.high_score, state.score)

        if pipe_blocks(pipe, bird_x, state.bird_y):
            state.game_over = True
    state.pipes = kept

    if state.bird_y < 0 or state.bird_y >= state.height:
        state.game_over = True

@register_game("flappy")
class FlappyGame(BaseGame):
    title = "FLAPPY BIRD"

    @classmethod
    def board_size(cls, term_cols: int, term_rows: int) -> tuple[int, int]:
        return term_cols - 6, max(10, term_rows - 10)

    def new_state(self, record: ProgressRecord) -> FlappyState:
        width, height = self.board_size(self.term_cols, self.term_rows)
        return init_flappy(width, height, record.flappy_high_score)

    def on_intent(self, intent: Intent) -> bool:
        if intent is Intent.RESTART:
            if not self.state.game_over:
                return False
            self.reset()
            return True
        if intent in (Intent.JUMP, Intent.FIRE):
            return jump(self.state)
        return False

    def step(self) -> None:
        update_flappy(self.state, self.rng)

    def snapshot(self) -> Snapshot:
        state = self.state
        sprites = []
        for pipe in state.pipes:
            px = math.floor(pipe.x)
            for y in range(state.height):
                if pipe.gap_y <= y < pipe.gap_y + pipe.gap_height:
                    continue
                for x in (px, px + 1):
                    if 0 <= x < state.width:
                        sprites.append(Sprite(x, y, "║", "obstacle"))
        by = math.floor(state.bird_y)
        if 0 <= by < state.height:
            sprites.append(Sprite(state.bird_x, by, "O", "warning"))

        if state.game_over:
            status = Status(f"☠ GAME OVER - SCORE: {state.score} │ R=Restart │ Q=Menu", Tone.DANGER)
        elif state.paused:
            status = Status("⏸ PAUSED - P=Continue", Tone.WARNING)
        else:
            status = Status("SPACE/UP to JUMP │ P PAUSE │ Q MENU", Tone.NEUTRAL)

        return Snapshot(
            title=self.title,
            width=state.width,
            height=state.height,
            sprites=tuple(sprites),
            stats={"score": state.score, "high_score": state.high_score},
            status=status,
        )
