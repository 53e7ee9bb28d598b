from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

class Tone(str, Enum):
    NEUTRAL = "neutral"
    WARNING = "warning"
    DANGER = "danger"
    SUCCESS = "success"

@dataclass(frozen=True)
class Sprite:
    x: int
    y: int
    glyph: str
    color: str

@dataclass(frozen=True)
class Status:
    text: str
    tone: Tone = Tone.NEUTRAL

@dataclass(frozen=True)
class Snapshot:
    """Read-only projection of an engine's state for the renderer."""
    title: str
    width: int
    height: int
    sprites: Tuple[Sprite, ...]
    stats: Dict[str, int] = field(default_factory=dict)
    status: Status = Status("")
    # Host draws each logical column this many glyph cells wide
    cell_width: int = 1
