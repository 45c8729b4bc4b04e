"""A* search over the walkable cells of a :class:`~delve.dungeon.grid.Grid`.

Every call is self-contained: per-node costs and parents live in
dictionaries local to the search, the heap holds ``(f, h, seq, coord)``
entries and stale entries are skipped on pop. The grid is only read, so
concurrent searches over one grid are safe.

Failures are values, not exceptions: an endpoint off the grid or inside a
wall yields ``INVALID_ENDPOINT`` and an exhausted open set yields
``UNREACHABLE_GOAL``; both come back as an empty path.
"""
from __future__ import annotations

import heapq
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from ..dungeon.grid import DIAGONAL, ORTHOGONAL, Grid
from ..logging_utils import get_logger
from .helpers import GridPoint, WorldPoint, grid_to_world, world_to_grid

log = get_logger("delve.pathfinding")

Heuristic = Callable[[GridPoint, GridPoint], float]

DIAGONAL_COST = math.sqrt(2)


class PathStatus:
    FOUND = "found"
    UNREACHABLE_GOAL = "unreachable_goal"
    INVALID_ENDPOINT = "invalid_endpoint"


@dataclass
class PathResult:
    path: List[GridPoint] = field(default_factory=list)
    status: str = PathStatus.UNREACHABLE_GOAL
    expanded: int = 0
    cost: float = 0.0

    def __bool__(self):
        return self.status == PathStatus.FOUND

    def world_path(self) -> List[WorldPoint]:
        return [grid_to_world(p) for p in self.path]

    def to_dict(self):
        return {
            "path": [list(p) for p in self.path],
            "status": self.status,
            "expanded": self.expanded,
            "cost": self.cost,
        }


def manhattan(a: GridPoint, b: GridPoint) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def euclidean(a: GridPoint, b: GridPoint) -> float:
    return math.dist(a, b)


def search(
    start: GridPoint,
    goal: GridPoint,
    grid: Grid,
    diagonal_allowed: bool = False,
    heuristic: Optional[Heuristic] = None,
    on_path: Optional[Callable[[PathResult], None]] = None,
) -> PathResult:
    """Run A* between two grid cells and report how it went.

    Step cost is 1 orthogonally and sqrt(2) diagonally. The default heuristic
    is Manhattan for 4-way movement and Euclidean for 8-way, both admissible
    for those costs. Ties on f go to the lower h, then to the earlier push.
    """
    result = _search(start, goal, grid, diagonal_allowed, heuristic)
    log.debug(
        event="path_search",
        start=start,
        goal=goal,
        status=result.status,
        expanded=result.expanded,
        length=len(result.path),
    )
    if on_path is not None:
        on_path(result)
    return result


def _search(start, goal, grid, diagonal_allowed, heuristic) -> PathResult:
    start = (int(start[0]), int(start[1]))
    goal = (int(goal[0]), int(goal[1]))
    if not grid.is_walkable(*start) or not grid.is_walkable(*goal):
        return PathResult(status=PathStatus.INVALID_ENDPOINT)
    if heuristic is None:
        heuristic = euclidean if diagonal_allowed else manhattan
    steps = [(d, 1.0) for d in ORTHOGONAL]
    if diagonal_allowed:
        steps += [(d, DIAGONAL_COST) for d in DIAGONAL]

    g_cost: Dict[GridPoint, float] = {start: 0.0}
    parent: Dict[GridPoint, GridPoint] = {}
    closed: Set[GridPoint] = set()
    h0 = heuristic(start, goal)
    seq = 0
    open_heap = [(h0, h0, seq, start)]
    expanded = 0
    while open_heap:
        _f, _h, _seq, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        closed.add(current)
        expanded += 1
        if current == goal:
            return PathResult(_reconstruct(parent, current), PathStatus.FOUND, expanded, g_cost[current])
        cx, cy = current
        base = g_cost[current]
        for (dx, dy), step_cost in steps:
            nxt = (cx + dx, cy + dy)
            if nxt in closed or not grid.is_walkable(*nxt):
                continue
            tentative = base + step_cost
            if tentative < g_cost.get(nxt, math.inf):
                g_cost[nxt] = tentative
                parent[nxt] = current
                h = heuristic(nxt, goal)
                seq += 1
                heapq.heappush(open_heap, (tentative + h, h, seq, nxt))
    return PathResult(status=PathStatus.UNREACHABLE_GOAL, expanded=expanded)


def _reconstruct(parent: Dict[GridPoint, GridPoint], node: GridPoint) -> List[GridPoint]:
    path = [node]
    while node in parent:
        node = parent[node]
        path.append(node)
    path.reverse()
    return path


def find_path_grid(
    start: GridPoint,
    goal: GridPoint,
    grid: Grid,
    diagonal_allowed: bool = False,
    heuristic: Optional[Heuristic] = None,
) -> List[GridPoint]:
    return search(start, goal, grid, diagonal_allowed, heuristic).path


def find_path(
    start_world: WorldPoint,
    goal_world: WorldPoint,
    grid: Grid,
    diagonal_allowed: bool = False,
    heuristic: Optional[Heuristic] = None,
    on_path: Optional[Callable[[PathResult], None]] = None,
) -> List[WorldPoint]:
    """World-space waypoints (tile centres) from start to goal, or ``[]`` when there is no route."""
    result = search(world_to_grid(start_world), world_to_grid(goal_world), grid, diagonal_allowed, heuristic, on_path)
    return result.world_path()


__all__ = [
    "PathStatus",
    "PathResult",
    "manhattan",
    "euclidean",
    "search",
    "find_path",
    "find_path_grid",
]
