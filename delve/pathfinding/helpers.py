"""World/grid coordinate helpers shared by the search and the simplifier.

World space is continuous pixels; every grid cell spans ``TILE_SIZE`` world
units on each axis and a waypoint sits at the centre of its tile.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

from ..dungeon.grid import Grid
from ..dungeon.tiles import TILE_SIZE

WorldPoint = Tuple[float, float]
GridPoint = Tuple[int, int]

# Line-of-sight sampling step in world units
SIGHT_STEP = TILE_SIZE / 4


def world_to_grid(point: WorldPoint) -> GridPoint:
    return (int(point[0] // TILE_SIZE), int(point[1] // TILE_SIZE))


def grid_to_world(point: GridPoint) -> WorldPoint:
    half = TILE_SIZE / 2
    return (point[0] * TILE_SIZE + half, point[1] * TILE_SIZE + half)


def has_line_of_sight(from_world: WorldPoint, to_world: WorldPoint, grid: Grid) -> bool:
    """Walk the segment in quarter-tile steps; every sampled cell must be walkable.

    Both endpoints are always sampled, so a blocked endpoint means no sight.
    """
    x0, y0 = from_world
    x1, y1 = to_world
    length = math.hypot(x1 - x0, y1 - y0)
    steps = max(1, int(math.ceil(length / SIGHT_STEP)))
    for i in range(steps + 1):
        t = i / steps
        gx, gy = world_to_grid((x0 + (x1 - x0) * t, y0 + (y1 - y0) * t))
        if not grid.is_walkable(gx, gy):
            return False
    return True


def find_nearest_walkable_position(target_world: WorldPoint, grid: Grid, max_radius: int = 5) -> Optional[WorldPoint]:
    """Tile centre of the closest walkable cell around ``target_world``.

    Searches square rings of growing radius (ring order: top row, bottom row,
    then the side columns, each left to right / top to bottom). Returns None
    when nothing within ``max_radius`` rings is walkable.
    """
    cx, cy = world_to_grid(target_world)
    if grid.is_walkable(cx, cy):
        return grid_to_world((cx, cy))
    for r in range(1, max_radius + 1):
        for gx, gy in _ring(cx, cy, r):
            if grid.is_walkable(gx, gy):
                return grid_to_world((gx, gy))
    return None


def _ring(cx: int, cy: int, r: int):
    for x in range(cx - r, cx + r + 1):
        yield x, cy - r
        yield x, cy + r
    for y in range(cy - r + 1, cy + r):
        yield cx - r, y
        yield cx + r, y


__all__ = [
    "WorldPoint",
    "GridPoint",
    "world_to_grid",
    "grid_to_world",
    "has_line_of_sight",
    "find_nearest_walkable_position",
]
