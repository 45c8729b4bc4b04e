"""Fixed-size 2D cell array shared by every generation phase.

Storage is column-major (``cells[x][y]``) to match the coordinate order used
throughout the generators. Out-of-bounds reads return ``None`` / ``False`` and
out-of-bounds writes are ignored, so carving code never needs its own bounds
checks.
"""
from __future__ import annotations

import hashlib
from typing import Iterator, List, Optional, Tuple

from .cells import Cell, Coord2D
from .tiles import END_GLYPH, GLYPHS, START_GLYPH, WALL

ORTHOGONAL = ((0, -1), (1, 0), (0, 1), (-1, 0))
DIAGONAL = ((1, -1), (1, 1), (-1, 1), (-1, -1))
EIGHT_WAY = ORTHOGONAL + DIAGONAL


class Grid:
    __slots__ = ("_width", "_height", "cells")

    def __init__(self, width: int, height: int, fill: str = WALL):
        if width < 1 or height < 1:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self.cells: List[List[Cell]] = [[Cell(fill) for _ in range(height)] for _ in range(width)]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> Optional[Cell]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[x][y]

    def set(self, x: int, y: int, cell: Cell) -> None:
        if self.in_bounds(x, y):
            self.cells[x][y] = cell

    def set_kind(self, x: int, y: int, kind: str, room_id: Optional[int] = None) -> None:
        if self.in_bounds(x, y):
            self.cells[x][y] = Cell(kind, room_id)

    def kind_at(self, x: int, y: int) -> Optional[str]:
        cell = self.get(x, y)
        return cell.kind if cell is not None else None

    def is_walkable(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.cells[x][y].walkable

    def walkable_neighbors(self, x: int, y: int, diagonal: bool = False) -> List[Coord2D]:
        dirs = EIGHT_WAY if diagonal else ORTHOGONAL
        return [(x + dx, y + dy) for dx, dy in dirs if self.is_walkable(x + dx, y + dy)]

    def iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        for x in range(self._width):
            for y in range(self._height):
                yield x, y, self.cells[x][y]

    def walkable_cells(self) -> List[Coord2D]:
        return [(x, y) for x, y, c in self.iter_cells() if c.walkable]

    def count(self, kind: str) -> int:
        return sum(1 for _x, _y, c in self.iter_cells() if c.kind == kind)

    def snapshot(self) -> "Grid":
        """Deep copy; readers on other threads can hold it while the original changes."""
        clone = Grid.__new__(Grid)
        clone._width = self._width
        clone._height = self._height
        clone.cells = [[c.copy() for c in column] for column in self.cells]
        return clone

    def to_ascii(self, mark_endpoints: bool = True) -> str:
        rows = []
        for y in range(self._height):
            row = []
            for x in range(self._width):
                c = self.cells[x][y]
                if mark_endpoints and c.is_start:
                    row.append(START_GLYPH)
                elif mark_endpoints and c.is_end:
                    row.append(END_GLYPH)
                else:
                    row.append(GLYPHS[c.kind])
            rows.append("".join(row))
        return "\n".join(rows)

    def fingerprint(self) -> str:
        h = hashlib.sha256(f"{self._width}x{self._height}".encode("ascii"))
        for x, y, c in self.iter_cells():
            h.update(f"{c.kind}:{c.room_id}:{int(c.is_start)}{int(c.is_end)};".encode("ascii"))
        return h.hexdigest()

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self.cells == other.cells

    def __repr__(self):
        return f"Grid({self._width}x{self._height})"


__all__ = ["Grid", "ORTHOGONAL", "DIAGONAL", "EIGHT_WAY"]
