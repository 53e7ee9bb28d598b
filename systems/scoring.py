from __future__ import annotations
from dataclasses import dataclass

@dataclass
class ScoreEvent:
    fruits_eaten: int = 0
    pipes_passed: int = 0
    merged_value: int = 0
    level: int = 1

SNAKE_FOOD_REWARD = 10

def snake_score(event: ScoreEvent) -> int:
    return event.fruits_eaten * SNAKE_FOOD_REWARD

def flappy_score(event: ScoreEvent) -> int:
    return event.pipes_passed

def merge_score(event: ScoreEvent) -> int:
    # 2048 awards the value of the tile produced by the merge
    return event.merged_value

def level_bonus(event: ScoreEvent) -> int:
    return 100 * event.level

def best(high_score: int, score: int) -> int:
    return score if score > high_score else high_score

FORMAT_SUFFIX = {0: "", 1: " pt", 2: " pts"}

def format_score(score: int) -> str:
    suffix = FORMAT_SUFFIX[min(len(FORMAT_SUFFIX) - 1, score if score < 3 else 2)]
    return f"{score}{suffix}"
