"""Region discovery and connectivity validation.

Flood fills over walkable cells, the closest-pair heuristic used to stitch
cave regions together, and the checks callers run before trusting a
generated dungeon.
"""
from __future__ import annotations

import math
from collections import deque
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from .cells import Coord2D
from .grid import EIGHT_WAY, ORTHOGONAL, Grid

if TYPE_CHECKING:
    from .dungeon import Dungeon
    from .rooms import Room

Region = List[Coord2D]


def find_regions(grid: Grid, diagonal: bool = True) -> List[Region]:
    """Return one coordinate list per maximal connected component of walkable cells.

    Explicit-stack fill, scanned x-major, so region order and in-region order
    are reproducible.
    """
    dirs = EIGHT_WAY if diagonal else ORTHOGONAL
    w, h = grid.width, grid.height
    visited = [[False] * h for _ in range(w)]
    regions: List[Region] = []
    for x in range(w):
        for y in range(h):
            if visited[x][y] or not grid.is_walkable(x, y):
                continue
            regions.append(_flood_fill(grid, x, y, visited, dirs))
    return regions


def _flood_fill(grid: Grid, sx: int, sy: int, visited, dirs) -> Region:
    region: Region = []
    stack = [(sx, sy)]
    while stack:
        x, y = stack.pop()
        if visited[x][y] or not grid.is_walkable(x, y):
            continue
        visited[x][y] = True
        region.append((x, y))
        for dx, dy in dirs:
            nx, ny = x + dx, y + dy
            if grid.in_bounds(nx, ny) and not visited[nx][ny] and grid.is_walkable(nx, ny):
                stack.append((nx, ny))
    return region


def closest_pair(region_a: Region, region_b: Region) -> Tuple[Coord2D, Coord2D]:
    """Exhaustive scan for the pair of cells (one per region) with minimum Euclidean distance."""
    if not region_a or not region_b:
        raise ValueError("closest_pair needs two non-empty regions")
    best = (region_a[0], region_b[0])
    best_dist = math.dist(region_a[0], region_b[0])
    for p in region_a:
        for q in region_b:
            d = math.dist(p, q)
            if d < best_dist:
                best_dist = d
                best = (p, q)
    return best


def has_walkable_tiles(grid: Grid) -> bool:
    return any(c.walkable for _x, _y, c in grid.iter_cells())


def reachable_from(grid: Grid, start: Optional[Coord2D], diagonal: bool = False) -> Set[Coord2D]:
    """BFS over walkable cells from ``start``; empty when start is missing or blocked."""
    if start is None or not grid.is_walkable(*start):
        return set()
    dirs = EIGHT_WAY if diagonal else ORTHOGONAL
    q = deque([start])
    seen = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in dirs:
            nxt = (x + dx, y + dy)
            if nxt not in seen and grid.is_walkable(*nxt):
                seen.add(nxt)
                q.append(nxt)
    return seen


def unreachable_rooms(dungeon: "Dungeon") -> List["Room"]:
    if not dungeon.rooms:
        return []
    seen = reachable_from(dungeon.grid, dungeon.rooms[0].center)
    return [r for r in dungeon.rooms if r.center not in seen]


def validate_dungeon(dungeon: "Dungeon") -> bool:
    """True when the dungeon has start/end markers, open tiles and a route between the markers."""
    if dungeon.start_position is None or dungeon.end_position is None:
        return False
    if not has_walkable_tiles(dungeon.grid):
        return False
    # Cave regions are joined diagonally too, so test with the 8-neighbourhood
    seen = reachable_from(dungeon.grid, dungeon.start_position, diagonal=True)
    return dungeon.end_position in seen


__all__ = [
    "Region",
    "find_regions",
    "closest_pair",
    "has_walkable_tiles",
    "reachable_from",
    "unreachable_rooms",
    "validate_dungeon",
]
