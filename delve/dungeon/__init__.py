"""Procedural level generation: room-and-corridor dungeons and cellular caves."""

from .cells import Cell
from .config import CaveConfig, DungeonConfig
from .connectivity import (
    closest_pair,
    find_regions,
    has_walkable_tiles,
    reachable_from,
    unreachable_rooms,
    validate_dungeon,
)
from .dungeon import CAVE, ROOMS, Dungeon
from .generator import CaveDungeonGenerator, RoomDungeonGenerator, generate, generate_cave
from .grid import Grid
from .rooms import Room, RoomType, place_rooms
from .tiles import CORRIDOR, DOOR, FLOOR, TILE_SIZE, WALL
from .tunnels import carve_corridor, connect_rooms, place_doors

__all__ = [
    "Cell",
    "Grid",
    "Room",
    "RoomType",
    "Dungeon",
    "DungeonConfig",
    "CaveConfig",
    "RoomDungeonGenerator",
    "CaveDungeonGenerator",
    "generate",
    "generate_cave",
    "place_rooms",
    "connect_rooms",
    "carve_corridor",
    "place_doors",
    "find_regions",
    "closest_pair",
    "has_walkable_tiles",
    "reachable_from",
    "unreachable_rooms",
    "validate_dungeon",
    "ROOMS",
    "CAVE",
    "WALL",
    "FLOOR",
    "DOOR",
    "CORRIDOR",
    "TILE_SIZE",
]
