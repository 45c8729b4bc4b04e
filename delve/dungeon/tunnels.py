from typing import List, Tuple

from .config import DungeonConfig
from .grid import ORTHOGONAL, Grid
from .rooms import Room
from .tiles import DOOR, FLOOR

Edge = Tuple[int, int, bool]


def connect_rooms(grid: Grid, rooms: List[Room], rng, config: DungeonConfig) -> List[Edge]:
    """Connect every room to the first one, then add a few short extra links.

    The spanning structure is grown Prim-style: on each step the closest
    (connected, unconnected) pair by centroid distance gets a corridor. Scan
    order is the room list order and the comparison is strict, so ties go to
    the earliest pair and a fixed seed always yields the same layout.

    Returns the carved edges as ``(room_a_id, room_b_id, is_extra)``.
    """
    edges: List[Edge] = []
    if len(rooms) <= 1:
        return edges
    connected = [rooms[0]]
    unconnected = list(rooms[1:])
    while unconnected:
        best = None
        best_dist = float("inf")
        for a in connected:
            for b in unconnected:
                d = a.distance_to(b)
                if d < best_dist:
                    best_dist = d
                    best = (a, b)
        a, b = best
        create_corridor(grid, a, b, rng)
        edges.append((a.id, b.id, False))
        connected.append(b)
        unconnected.remove(b)
    edges.extend(_add_extra_connections(grid, rooms, rng, config))
    return edges


def _add_extra_connections(grid: Grid, rooms: List[Room], rng, config: DungeonConfig) -> List[Edge]:
    extra: List[Edge] = []
    for _ in range(max(1, len(rooms) // 4)):
        a = rooms[rng.randrange(len(rooms))]
        b = rooms[rng.randrange(len(rooms))]
        if a is not b and a.distance_to(b) < config.extra_connection_distance:
            create_corridor(grid, a, b, rng)
            extra.append((a.id, b.id, True))
    return extra


def create_corridor(grid: Grid, a: Room, b: Room, rng) -> int:
    """Carve an L-shaped corridor between the facing points of two rooms.

    Orientation (horizontal leg first or vertical leg first) is a coin flip per
    corridor. Both endpoints are recorded as connection points.
    """
    start = a.closest_point_to(b)
    end = b.closest_point_to(a)
    horizontal_first = rng.randrange(2) == 0
    carved = carve_corridor(grid, start[0], start[1], end[0], end[1], horizontal_first=horizontal_first)
    a.add_connection(start)
    b.add_connection(end)
    return carved


def carve_corridor(grid: Grid, x1: int, y1: int, x2: int, y2: int, horizontal_first: bool = True, kind: str = FLOOR) -> int:
    """Carve an L-shaped walkable path from (x1,y1) to (x2,y2).

    Horizontal-first: run along row ``y1`` across the x-span, then down column
    ``x2`` across the y-span. Vertical-first: run along column ``x1`` then row
    ``y2``. Cells that are already walkable are left alone so room floor keeps
    its room id; out-of-bounds cells are skipped. Returns the number of cells
    converted.
    """
    if horizontal_first:
        carved = _carve_line(grid, x1, y1, x2, y1, kind)
        carved += _carve_line(grid, x2, y1, x2, y2, kind)
    else:
        carved = _carve_line(grid, x1, y1, x1, y2, kind)
        carved += _carve_line(grid, x1, y2, x2, y2, kind)
    return carved


def _carve_line(grid: Grid, x1: int, y1: int, x2: int, y2: int, kind: str) -> int:
    carved = 0
    if y1 == y2:
        cells = ((x, y1) for x in range(min(x1, x2), max(x1, x2) + 1))
    else:
        cells = ((x1, y) for y in range(min(y1, y2), max(y1, y2) + 1))
    for x, y in cells:
        if grid.in_bounds(x, y) and not grid.is_walkable(x, y):
            grid.set_kind(x, y, kind)
            carved += 1
    return carved


def place_doors(grid: Grid, rooms: List[Room]) -> int:
    """Turn room boundary cells that open onto outside walkable space into doors."""
    created = 0
    for room in rooms:
        for x, y in room.perimeter():
            cell = grid.get(x, y)
            if cell is None or not cell.walkable or cell.kind == DOOR:
                continue
            for dx, dy in ORTHOGONAL:
                nx, ny = x + dx, y + dy
                if room.contains(nx, ny):
                    continue
                if grid.is_walkable(nx, ny):
                    grid.set_kind(x, y, DOOR, room_id=cell.room_id)
                    created += 1
                    break
    return created


__all__ = ["connect_rooms", "create_corridor", "carve_corridor", "place_doors"]
