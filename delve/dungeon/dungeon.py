"""The generated level: grid, rooms or cave regions, start/end markers.

A ``Dungeon`` is produced once by a generator and treated as read-mostly
afterwards. Saves only carry the seed and the generation parameters; loading
a save regenerates the level.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..errors import InvalidConfigError
from .cells import Coord2D
from .config import CaveConfig, DungeonConfig
from .connectivity import Region, has_walkable_tiles
from .grid import Grid
from .rooms import Room
from .tiles import TILE_KINDS, TILE_SIZE, WALKABLE_KINDS

ROOMS = "rooms"
CAVE = "cave"
DUNGEON_KINDS = (ROOMS, CAVE)


@dataclass
class Dungeon:
    grid: Grid
    rooms: List[Room] = field(default_factory=list)
    regions: List[Region] = field(default_factory=list)
    start_position: Optional[Coord2D] = None
    end_position: Optional[Coord2D] = None
    seed: Optional[int] = None
    kind: str = ROOMS
    config: Union[DungeonConfig, CaveConfig, None] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def _check_marker(self, name: str, pos: Optional[Coord2D]) -> None:
        if pos is not None and not self.grid.in_bounds(pos[0], pos[1]):
            raise InvalidConfigError(name, f"{pos} is outside the {self.width}x{self.height} grid")

    def set_start(self, pos: Optional[Coord2D]) -> None:
        self._check_marker("start_position", pos)
        if self.start_position is not None:
            self.grid.cells[self.start_position[0]][self.start_position[1]].is_start = False
        self.start_position = pos
        if pos is not None:
            self.grid.cells[pos[0]][pos[1]].is_start = True

    def set_end(self, pos: Optional[Coord2D]) -> None:
        self._check_marker("end_position", pos)
        if self.end_position is not None:
            self.grid.cells[self.end_position[0]][self.end_position[1]].is_end = False
        self.end_position = pos
        if pos is not None:
            self.grid.cells[pos[0]][pos[1]].is_end = True

    # --- queries -----------------------------------------------------------
    def room_at(self, x: int, y: int) -> Optional[Room]:
        for room in self.rooms:
            if room.contains(x, y):
                return room
        return None

    def room_at_world(self, wx: float, wy: float) -> Optional[Room]:
        return self.room_at(int(wx // TILE_SIZE), int(wy // TILE_SIZE))

    def walkable_positions_in_room(self, room: Room) -> List[Coord2D]:
        return [(x, y) for x, y in room.cells() if self.grid.is_walkable(x, y)]

    def random_walkable_position(self, rng=None) -> Optional[Coord2D]:
        cells = self.grid.walkable_cells()
        if not cells:
            return None
        return (rng or random).choice(cells)

    def has_walkable_tiles(self) -> bool:
        return has_walkable_tiles(self.grid)

    def stats(self) -> Dict[str, Any]:
        tiles = {k: self.grid.count(k) for k in TILE_KINDS}
        open_cells = sum(tiles[k] for k in WALKABLE_KINDS)
        return {
            "kind": self.kind,
            "rooms": len(self.rooms),
            "regions": len(self.regions),
            "tiles": tiles,
            "floor_pct": round(100.0 * open_cells / (self.width * self.height), 2),
        }

    # --- serialization -----------------------------------------------------
    def to_ascii(self) -> str:
        return self.grid.to_ascii()

    def to_json(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "kind": self.kind,
            "width": self.width,
            "height": self.height,
            "rows": self.to_ascii().split("\n"),
            "rooms": [r.to_dict() for r in self.rooms],
            "regions": len(self.regions),
            "start": list(self.start_position) if self.start_position is not None else None,
            "end": list(self.end_position) if self.end_position is not None else None,
            "fingerprint": self.grid.fingerprint(),
            "metrics": self.metrics,
        }

    def to_save(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"seed": self.seed, "width": self.width, "height": self.height, "kind": self.kind}
        if isinstance(self.config, CaveConfig):
            data["wall_probability"] = self.config.wall_probability
            data["iterations"] = self.config.iterations
        elif isinstance(self.config, DungeonConfig):
            data["min_rooms"] = self.config.min_rooms
            data["max_rooms"] = self.config.max_rooms
        return data

    @classmethod
    def from_save(cls, data: Dict[str, Any]) -> "Dungeon":
        """Rebuild a dungeon from :meth:`to_save` output by regenerating it from its seed."""
        from .generator import generate, generate_cave

        for key in ("seed", "width", "height"):
            if data.get(key) is None:
                raise InvalidConfigError(key, "missing from save data")
        kind = data.get("kind", ROOMS)
        if kind == CAVE:
            defaults = CaveConfig()
            return generate_cave(
                int(data["width"]),
                int(data["height"]),
                wall_probability=float(data.get("wall_probability", defaults.wall_probability)),
                iterations=int(data.get("iterations", defaults.iterations)),
                seed=int(data["seed"]),
            )
        if kind != ROOMS:
            raise InvalidConfigError("kind", f"unknown dungeon kind {kind!r}")
        defaults = DungeonConfig()
        return generate(
            int(data["width"]),
            int(data["height"]),
            int(data.get("min_rooms", defaults.min_rooms)),
            int(data.get("max_rooms", defaults.max_rooms)),
            seed=int(data["seed"]),
        )


__all__ = ["Dungeon", "ROOMS", "CAVE", "DUNGEON_KINDS"]
