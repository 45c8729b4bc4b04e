import random

import pytest

from delve.dungeon.config import DungeonConfig
from delve.dungeon.grid import Grid
from delve.dungeon.rooms import Room, carve_rooms, fallback_room, place_rooms
from delve.dungeon.tiles import FLOOR
from tests.dungeon_test_utils import separation


@pytest.mark.parametrize("seed", [0, 1, 7, 42, 1234])
def test_rooms_keep_buffer_and_stay_inside(seed):
    cfg = DungeonConfig(width=60, height=60, min_rooms=6, max_rooms=10)
    rooms, target, _exhausted = place_rooms(cfg, random.Random(seed))
    assert 1 <= len(rooms) <= target
    for i, a in enumerate(rooms):
        assert a.id == i
        assert a.width > 0 and a.height > 0
        assert a.x >= 1 and a.y >= 1
        assert a.x + a.width <= cfg.width - 1
        assert a.y + a.height <= cfg.height - 1
        for b in rooms[i + 1:]:
            assert separation(a, b) >= cfg.buffer


def test_place_rooms_is_deterministic_for_seeded_rng():
    cfg = DungeonConfig()
    a, _, _ = place_rooms(cfg, random.Random(99))
    b, _, _ = place_rooms(cfg, random.Random(99))
    assert [r.to_dict() for r in a] == [r.to_dict() for r in b]


def test_tiny_grid_exhausts_and_falls_back():
    # Rooms of 4..12 cells never fit a 6x6 grid with the one cell margin
    cfg = DungeonConfig(width=6, height=6, min_rooms=2, max_rooms=2)
    rooms, target, exhausted = place_rooms(cfg, random.Random(3))
    assert exhausted is True
    assert target == 2
    assert len(rooms) == 1
    fb = rooms[0]
    # Shrunk to stay inside the border wall
    assert (fb.x, fb.y, fb.width, fb.height) == (1, 1, 4, 4)


def test_fallback_room_is_centred():
    r = fallback_room(60, 40)
    assert (r.x, r.y, r.width, r.height) == (27, 17, 6, 6)


@pytest.mark.parametrize("size", [1, 2, 3, 4, 5, 7])
def test_fallback_room_stays_on_small_grids(size):
    r = fallback_room(size, size)
    assert r.width >= 1 and r.height >= 1
    assert all(0 <= x < size and 0 <= y < size for x, y in r.cells())


def test_zero_target_places_fallback_room():
    cfg = DungeonConfig(width=30, height=30, min_rooms=0, max_rooms=0)
    rooms, target, exhausted = place_rooms(cfg, random.Random(1))
    assert target == 0 and exhausted is False
    assert len(rooms) == 1 and rooms[0].width == 6


def test_room_geometry_helpers():
    r = Room(2, 3, 4, 5)
    assert r.center == (4, 5)
    assert r.centroid == (4.0, 5.5)
    assert r.area == 20
    assert r.contains(2, 3) and r.contains(5, 7)
    assert not r.contains(6, 3)
    assert len(list(r.cells())) == 20
    # 4x5 rectangle has 2*4 + 2*3 boundary cells
    assert len(r.perimeter()) == 14


def test_overlaps_with_buffer():
    a = Room(0, 0, 4, 4)
    b = Room(6, 0, 4, 4)
    assert not a.overlaps(b)
    assert not a.overlaps(b, buffer=2)
    assert a.overlaps(b, buffer=3)


def test_closest_point_clamps_other_centre():
    a = Room(1, 1, 4, 4)
    b = Room(10, 2, 4, 4)
    # b's centre (12, 4) clamps to a's right column
    assert a.closest_point_to(b) == (4, 4)
    # a's centre (3, 3) clamps to b's left column
    assert b.closest_point_to(a) == (10, 3)


def test_add_connection_ignores_duplicates():
    r = Room(0, 0, 3, 3)
    r.add_connection((1, 1))
    r.add_connection((1, 1))
    assert r.connection_points == [(1, 1)]


def test_random_position_prefers_interior():
    r = Room(5, 5, 6, 6)
    rng = random.Random(4)
    for _ in range(50):
        x, y = r.random_position(rng)
        assert 6 <= x <= 9 and 6 <= y <= 9
    thin = Room(0, 0, 2, 1)
    assert thin.random_position(rng) == thin.center


def test_carve_rooms_sets_floor_and_room_ids():
    g = Grid(10, 10)
    rooms = [Room(1, 1, 3, 3, id=0), Room(6, 6, 2, 2, id=1)]
    carve_rooms(g, rooms)
    assert g.count(FLOOR) == 13
    assert g.get(2, 2).room_id == 0
    assert g.get(7, 7).room_id == 1
