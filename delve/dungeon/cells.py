from typing import Optional, Tuple

from .tiles import TILE_KINDS, WALKABLE_KINDS


class Cell:
    """Lightweight container for a dungeon grid cell.

    ``walkable`` and ``transparent`` follow from ``kind``; the room id and the
    start/end flags are assigned by the generators.
    """
    __slots__ = ("kind", "room_id", "is_start", "is_end")

    def __init__(self, kind: str, room_id: Optional[int] = None):
        if kind not in TILE_KINDS:
            raise ValueError(f"unknown tile kind {kind!r}")
        self.kind = kind
        self.room_id = room_id
        self.is_start = False
        self.is_end = False

    @property
    def walkable(self) -> bool:
        return self.kind in WALKABLE_KINDS

    @property
    def transparent(self) -> bool:
        # Every non-wall kind is see-through
        return self.kind in WALKABLE_KINDS

    def copy(self) -> "Cell":
        c = Cell(self.kind, self.room_id)
        c.is_start = self.is_start
        c.is_end = self.is_end
        return c

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return (self.kind, self.room_id, self.is_start, self.is_end) == (
            other.kind,
            other.room_id,
            other.is_start,
            other.is_end,
        )

    def __repr__(self):
        return f"Cell({self.kind!r}, room_id={self.room_id})"

    def to_dict(self):
        return {
            "kind": self.kind,
            "walkable": self.walkable,
            "transparent": self.transparent,
            "room_id": self.room_id,
            "is_start": self.is_start,
            "is_end": self.is_end,
        }


Coord2D = Tuple[int, int]
