# Tile kind constants centralized for modular imports
WALL = "wall"
FLOOR = "floor"
DOOR = "door"
CORRIDOR = "corridor"

TILE_KINDS = (WALL, FLOOR, DOOR, CORRIDOR)
WALKABLE_KINDS = frozenset({FLOOR, DOOR, CORRIDOR})

# World units per tile edge; shared by generation and pathfinding
TILE_SIZE = 32

GLYPHS = {WALL: "#", FLOOR: ".", DOOR: "+", CORRIDOR: ","}
START_GLYPH = "S"
END_GLYPH = "E"


def kind_from_glyph(ch: str) -> str:
    for kind, glyph in GLYPHS.items():
        if glyph == ch:
            return kind
    raise ValueError(f"unknown tile glyph {ch!r}")


__all__ = [
    "WALL",
    "FLOOR",
    "DOOR",
    "CORRIDOR",
    "TILE_KINDS",
    "WALKABLE_KINDS",
    "TILE_SIZE",
    "GLYPHS",
    "START_GLYPH",
    "END_GLYPH",
    "kind_from_glyph",
]
