import math
import random
from dataclasses import dataclass, field
from typing import List, Tuple

from .cells import Coord2D
from .config import DungeonConfig
from .grid import Grid
from .tiles import FLOOR

FALLBACK_ROOM_SIZE = 6


class RoomType:
    NORMAL = "normal"
    START = "start"
    END = "end"
    SPECIAL = "special"


@dataclass
class Room:
    x: int
    y: int
    width: int
    height: int
    id: int = 0
    type: str = RoomType.NORMAL
    connection_points: List[Coord2D] = field(default_factory=list)

    def cells(self):
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    def perimeter(self) -> List[Coord2D]:
        """Boundary cells of the room rectangle, each listed once."""
        x0, y0 = self.x, self.y
        x1, y1 = self.x + self.width - 1, self.y + self.height - 1
        return [(ix, iy) for ix, iy in self.cells() if ix in (x0, x1) or iy in (y0, y1)]

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.width // 2, self.y + self.height // 2)

    @property
    def centroid(self) -> Tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def overlaps(self, other: "Room", buffer: int = 0) -> bool:
        return (
            self.x - buffer < other.x + other.width
            and self.x + self.width + buffer > other.x
            and self.y - buffer < other.y + other.height
            and self.y + self.height + buffer > other.y
        )

    def distance_to(self, other: "Room") -> float:
        return math.dist(self.centroid, other.centroid)

    def closest_point_to(self, other: "Room") -> Coord2D:
        """Cell of this room nearest to the other room's centre (centre clamped into our rectangle)."""
        ocx, ocy = other.centroid
        x = max(self.x, min(ocx, self.x + self.width - 1))
        y = max(self.y, min(ocy, self.y + self.height - 1))
        return (int(x), int(y))

    def add_connection(self, point: Coord2D) -> None:
        if point not in self.connection_points:
            self.connection_points.append(point)

    def random_position(self, rng) -> Coord2D:
        # Prefer the interior so markers never sit on a doorway
        if self.width >= 3:
            x = rng.randint(self.x + 1, self.x + self.width - 2)
        else:
            x = self.center[0]
        if self.height >= 3:
            y = rng.randint(self.y + 1, self.y + self.height - 2)
        else:
            y = self.center[1]
        return (x, y)

    def to_dict(self):
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "type": self.type,
            "connection_points": [list(p) for p in self.connection_points],
        }


def place_rooms(config: DungeonConfig, rng=None):
    """Rejection-sample non-overlapping rooms.

    Returns (rooms, target_attempted, exhausted). ``exhausted`` is True when the
    attempt budget ran out before reaching the target; a single fallback room
    is substituted if nothing could be placed at all.
    """
    if rng is None:
        rng = random
    target = rng.randint(config.min_rooms, config.max_rooms)
    attempts = config.max_attempts * target
    rooms: List[Room] = []
    while len(rooms) < target and attempts > 0:
        attempts -= 1
        w = rng.randint(config.min_room_size, config.max_room_size)
        h = rng.randint(config.min_room_size, config.max_room_size)
        max_x = config.width - w - 2
        max_y = config.height - h - 2
        if max_x < 1 or max_y < 1:
            continue
        x = rng.randint(1, max_x)
        y = rng.randint(1, max_y)
        new_room = Room(x, y, w, h, id=len(rooms))
        if _room_overlaps(new_room, rooms, config.buffer):
            continue
        rooms.append(new_room)
    exhausted = len(rooms) < target
    if not rooms:
        rooms.append(fallback_room(config.width, config.height))
    return rooms, target, exhausted


def fallback_room(width: int, height: int) -> Room:
    """Centred room, shrunk to fit inside the border wall (or the grid itself when there is no border)."""
    w = max(1, min(FALLBACK_ROOM_SIZE, width - 2))
    h = max(1, min(FALLBACK_ROOM_SIZE, height - 2))
    return Room(max(0, (width - w) // 2), max(0, (height - h) // 2), w, h, id=0)


def _room_overlaps(room: Room, existing: List[Room], pad: int) -> bool:
    return any(room.overlaps(r, pad) for r in existing)


def carve_rooms(grid: Grid, rooms: List[Room]) -> None:
    for room in rooms:
        for ix, iy in room.cells():
            grid.set_kind(ix, iy, FLOOR, room_id=room.id)
