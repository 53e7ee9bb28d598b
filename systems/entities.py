from __future__ import annotations
from dataclasses import dataclass

@dataclass
class Position:
    x: int
    y: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

@dataclass
class Entity:
    """Anything drawn as a glyph: ship, invader, bullet, food."""
    pos: Position
    glyph: str
    color: str

@dataclass
class Shield:
    pos: Position
    health: int = 4

@dataclass
class UFO:
    pos: Position
    active: bool = False
    points: int = 0

@dataclass
class Explosion:
    pos: Position
    frame: int = 0

@dataclass
class Pipe:
    x: float
    gap_y: int          # top row of the gap
    gap_height: int
    passed: bool = False
