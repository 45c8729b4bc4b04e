"""Grid pathfinding: A* search, waypoint simplification and world/grid helpers."""

from .astar import PathResult, PathStatus, euclidean, find_path, find_path_grid, manhattan, search
from .helpers import find_nearest_walkable_position, grid_to_world, has_line_of_sight, world_to_grid
from .simplify import simplify_path

__all__ = [
    "PathResult",
    "PathStatus",
    "search",
    "find_path",
    "find_path_grid",
    "manhattan",
    "euclidean",
    "simplify_path",
    "world_to_grid",
    "grid_to_world",
    "has_line_of_sight",
    "find_nearest_walkable_position",
]
