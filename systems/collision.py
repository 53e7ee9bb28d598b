from __future__ import annotations
from typing import Tuple

Point = Tuple[int, int]

def point_in_grid(point: Point, grid_size: Tuple[int, int]) -> bool:
    x, y = point
    width, height = grid_size
    return 0 <= x < width and 0 <= y < height

def hits_span(x: int, left: int, width: int) -> bool:
    """True if column x falls inside [left, left + width)."""
    return left <= x < left + width

def hits_around(x: int, center: int, radius: int) -> bool:
    """True if column x is within radius columns of center (inclusive)."""
    return center - radius <= x <= center + radius
