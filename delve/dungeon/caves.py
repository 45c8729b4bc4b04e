"""Cellular-automata cave generation.

Seeds the interior with random walls, smooths it with the 4-5 rule, then
stitches the surviving open regions into one walkable network with straight
L-shaped corridors between the closest cells of consecutive regions.
"""
from __future__ import annotations

import random
from typing import List, Tuple

from .config import CaveConfig
from .connectivity import Region, closest_pair, find_regions
from .grid import EIGHT_WAY, Grid
from .tiles import FLOOR, WALL
from .tunnels import carve_corridor

# A cell turns to wall when more than this many of its 8 neighbours are wall
WALL_NEIGHBOR_THRESHOLD = 4


def seed_noise(config: CaveConfig, rng) -> Grid:
    grid = Grid(config.width, config.height, fill=WALL)
    for x in range(config.width):
        for y in range(config.height):
            if x in (0, config.width - 1) or y in (0, config.height - 1):
                continue
            if rng.random() >= config.wall_probability:
                grid.set_kind(x, y, FLOOR)
    return grid


def count_wall_neighbors(grid: Grid, x: int, y: int) -> int:
    """Walls among the 8 neighbours; cells off the grid count as wall."""
    walls = 0
    for dx, dy in EIGHT_WAY:
        cell = grid.get(x + dx, y + dy)
        if cell is None or cell.kind == WALL:
            walls += 1
    return walls


def smooth(grid: Grid) -> Grid:
    """One automaton step. Reads only ``grid`` and returns a new grid."""
    nxt = Grid(grid.width, grid.height, fill=WALL)
    for x in range(grid.width):
        for y in range(grid.height):
            if count_wall_neighbors(grid, x, y) <= WALL_NEIGHBOR_THRESHOLD:
                nxt.set_kind(x, y, FLOOR)
    return nxt


def connect_regions(grid: Grid, regions: List[Region]) -> int:
    """Join each region to the next one in the list; returns corridors carved."""
    carved = 0
    for a, b in zip(regions, regions[1:]):
        (x1, y1), (x2, y2) = closest_pair(a, b)
        carve_corridor(grid, x1, y1, x2, y2)
        carved += 1
    return carved


def generate_cave_grid(config: CaveConfig, rng=None) -> Tuple[Grid, List[Region], int]:
    """Build the cave grid.

    Returns (grid, retained_regions, regions_found). Retained regions hold at
    least ``config.min_region_size`` cells and are sorted largest first; the
    list is empty when the automaton closed everything off.
    """
    if rng is None:
        rng = random
    grid = seed_noise(config, rng)
    for _ in range(config.iterations):
        grid = smooth(grid)
    found = find_regions(grid)
    retained = [r for r in found if len(r) >= config.min_region_size]
    retained.sort(key=len, reverse=True)
    connect_regions(grid, retained)
    return grid, retained, len(found)


__all__ = ["seed_noise", "count_wall_neighbors", "smooth", "connect_regions", "generate_cave_grid"]
