import random

import pytest

from delve.dungeon.config import DungeonConfig
from delve.dungeon.connectivity import reachable_from
from delve.dungeon.grid import Grid
from delve.dungeon.rooms import Room, carve_rooms
from delve.dungeon.tiles import CORRIDOR, DOOR, FLOOR, WALL
from delve.dungeon.tunnels import carve_corridor, connect_rooms, create_corridor, place_doors


@pytest.mark.parametrize("horizontal_first", [True, False])
@pytest.mark.parametrize("a,b", [((1, 1), (8, 6)), ((8, 6), (1, 1)), ((2, 7), (7, 2)), ((3, 3), (3, 8))])
def test_corridor_connects_endpoints_in_both_orders(horizontal_first, a, b):
    g = Grid(10, 10)
    carved = carve_corridor(g, a[0], a[1], b[0], b[1], horizontal_first=horizontal_first)
    assert carved == abs(a[0] - b[0]) + abs(a[1] - b[1]) + 1
    assert b in reachable_from(g, a)


def test_horizontal_first_uses_start_row_then_end_column():
    g = Grid(10, 10)
    carve_corridor(g, 1, 1, 5, 4, horizontal_first=True)
    assert all(g.kind_at(x, 1) == FLOOR for x in range(1, 6))
    assert all(g.kind_at(5, y) == FLOOR for y in range(1, 5))
    assert g.kind_at(1, 4) == WALL


def test_vertical_first_uses_start_column_then_end_row():
    g = Grid(10, 10)
    carve_corridor(g, 1, 1, 5, 4, horizontal_first=False)
    assert all(g.kind_at(1, y) == FLOOR for y in range(1, 5))
    assert all(g.kind_at(x, 4) == FLOOR for x in range(1, 6))
    assert g.kind_at(5, 1) == WALL


def test_corridor_keeps_existing_floor_and_skips_out_of_bounds():
    g = Grid(6, 6)
    g.set_kind(2, 2, FLOOR, room_id=4)
    carved = carve_corridor(g, 0, 2, 8, 2)
    # x = 0..5 in bounds, (2, 2) already open
    assert carved == 5
    assert g.get(2, 2).room_id == 4


def test_corridor_kind_is_configurable():
    g = Grid(5, 5)
    carve_corridor(g, 0, 0, 4, 0, kind=CORRIDOR)
    assert g.count(CORRIDOR) == 5


def test_create_corridor_records_connection_points():
    g = Grid(20, 10)
    a = Room(1, 1, 4, 4, id=0)
    b = Room(10, 2, 4, 4, id=1)
    carve_rooms(g, [a, b])
    create_corridor(g, a, b, random.Random(0))
    assert a.connection_points == [(4, 4)]
    assert b.connection_points == [(10, 3)]
    assert b.center in reachable_from(g, a.center)


def test_connect_rooms_spans_every_room():
    cfg = DungeonConfig(width=40, height=40)
    rooms = [Room(2, 2, 4, 4, id=0), Room(20, 3, 5, 4, id=1), Room(4, 25, 6, 5, id=2), Room(28, 28, 4, 6, id=3)]
    g = Grid(40, 40)
    carve_rooms(g, rooms)
    edges = connect_rooms(g, rooms, random.Random(5), cfg)
    spanning = [e for e in edges if not e[2]]
    assert len(spanning) == len(rooms) - 1
    seen = reachable_from(g, rooms[0].center)
    assert all(r.center in seen for r in rooms)


def test_connect_rooms_prefers_nearest_pair():
    cfg = DungeonConfig(extra_connection_distance=0.0)
    rooms = [Room(1, 1, 3, 3, id=0), Room(30, 1, 3, 3, id=1), Room(8, 1, 3, 3, id=2)]
    g = Grid(40, 10)
    carve_rooms(g, rooms)
    edges = connect_rooms(g, rooms, random.Random(1), cfg)
    # room 2 is closest to room 0, then room 1 is closest to room 2
    assert edges == [(0, 2, False), (2, 1, False)]


def test_single_room_has_no_edges():
    g = Grid(10, 10)
    assert connect_rooms(g, [Room(1, 1, 3, 3)], random.Random(1), DungeonConfig()) == []


def test_doors_only_on_room_perimeter():
    g = Grid(20, 10)
    a = Room(1, 1, 4, 4, id=0)
    b = Room(10, 2, 4, 4, id=1)
    carve_rooms(g, [a, b])
    carve_corridor(g, 4, 3, 10, 3)
    made = place_doors(g, [a, b])
    assert made == 2
    assert g.kind_at(4, 3) == DOOR and g.get(4, 3).room_id == 0
    assert g.kind_at(10, 3) == DOOR and g.get(10, 3).room_id == 1
    perimeter = set(a.perimeter()) | set(b.perimeter())
    for x, y, cell in g.iter_cells():
        if cell.kind == DOOR:
            assert (x, y) in perimeter
    # Second pass is a no-op
    assert place_doors(g, [a, b]) == 0
