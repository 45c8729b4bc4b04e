from collections import deque

from delve.dungeon.grid import Grid
from delve.dungeon.tiles import FLOOR, WALL


def grid_from_rows(rows):
    """Build a Grid from ASCII rows: '#' wall, anything else floor."""
    g = Grid(len(rows[0]), len(rows), fill=WALL)
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch != "#":
                g.set_kind(x, y, FLOOR)
    return g


def open_grid(width, height):
    return Grid(width, height, fill=FLOOR)


def bfs_distance(grid, start, goal):
    """Shortest 4-directional step count from start to goal, or None."""
    if not grid.is_walkable(*start) or not grid.is_walkable(*goal):
        return None
    q = deque([(start, 0)])
    vis = {start}
    while q:
        (x, y), d = q.popleft()
        if (x, y) == goal:
            return d
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nxt = (x + dx, y + dy)
            if nxt not in vis and grid.is_walkable(*nxt):
                vis.add(nxt)
                q.append((nxt, d + 1))
    return None


def is_four_connected_path(path):
    return all(abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1 for a, b in zip(path, path[1:]))


def separation(a, b):
    """Cells of clear space between two room rectangles along the more separated axis."""
    gap_x = max(b.x - (a.x + a.width), a.x - (b.x + b.width))
    gap_y = max(b.y - (a.y + a.height), a.y - (b.y + b.height))
    return max(gap_x, gap_y)
