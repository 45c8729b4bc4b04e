import math
from typing import List, Optional, Sequence

from ..dungeon.grid import Grid
from .helpers import WorldPoint, has_line_of_sight


def _direction(a: WorldPoint, b: WorldPoint):
    dx, dy = b[0] - a[0], b[1] - a[1]
    length = math.hypot(dx, dy)
    if length == 0:
        return None
    return (dx / length, dy / length)


def _collinear(prev: WorldPoint, cur: WorldPoint, nxt: WorldPoint, tolerance: float) -> bool:
    d1 = _direction(prev, cur)
    d2 = _direction(cur, nxt)
    # Repeated points carry no direction
    if d1 is None or d2 is None:
        return True
    return d1[0] * d2[0] + d1[1] * d2[1] >= tolerance


def _simplify_once(path: Sequence[WorldPoint], grid: Optional[Grid], tolerance: float) -> List[WorldPoint]:
    out = [path[0]]
    for i in range(1, len(path) - 1):
        cur, nxt = path[i], path[i + 1]
        if _collinear(out[-1], cur, nxt, tolerance) and (grid is None or has_line_of_sight(out[-1], nxt, grid)):
            continue
        out.append(cur)
    out.append(path[-1])
    return out


def simplify_path(path: Sequence[WorldPoint], grid: Optional[Grid] = None, tolerance: float = 0.99) -> List[WorldPoint]:
    """Drop interior waypoints that lie on a straight run.

    A point survives when the heading into it (from the last kept point) and
    the heading out of it (to the next raw point) differ, i.e. their dot
    product is below ``tolerance``. When ``grid`` is given a point is only
    dropped if the shortcut it creates keeps line of sight. Passes repeat
    until nothing more can be dropped, so simplifying twice changes nothing.
    """
    current = list(path)
    if len(current) < 3:
        return current
    while True:
        nxt = _simplify_once(current, grid, tolerance)
        if len(nxt) == len(current):
            return nxt
        current = nxt


__all__ = ["simplify_path"]
