from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidConfigError


@dataclass
class DungeonConfig:
    width: int = 60
    height: int = 60
    min_rooms: int = 6
    max_rooms: int = 10
    min_room_size: int = 4
    max_room_size: int = 12
    max_attempts: int = 100
    buffer: int = 2
    extra_connection_distance: float = 20.0
    seed: Optional[int] = None

    def validate(self) -> "DungeonConfig":
        if self.width < 1 or self.height < 1:
            raise InvalidConfigError("size", f"must be positive, got {self.width}x{self.height}")
        if self.min_rooms < 0 or self.max_rooms < 0:
            raise InvalidConfigError("rooms", "room counts cannot be negative")
        if self.min_rooms > self.max_rooms:
            raise InvalidConfigError("rooms", f"min_rooms {self.min_rooms} > max_rooms {self.max_rooms}")
        if self.min_room_size < 1:
            raise InvalidConfigError("min_room_size", "must be at least 1")
        if self.min_room_size > self.max_room_size:
            raise InvalidConfigError(
                "room_size", f"min_room_size {self.min_room_size} > max_room_size {self.max_room_size}"
            )
        if self.max_attempts < 1:
            raise InvalidConfigError("max_attempts", "must be at least 1")
        if self.buffer < 0:
            raise InvalidConfigError("buffer", "cannot be negative")
        return self


@dataclass
class CaveConfig:
    width: int = 60
    height: int = 60
    wall_probability: float = 0.45
    iterations: int = 5
    min_region_size: int = 10
    seed: Optional[int] = None

    def validate(self) -> "CaveConfig":
        if self.width < 1 or self.height < 1:
            raise InvalidConfigError("size", f"must be positive, got {self.width}x{self.height}")
        if not 0.0 <= self.wall_probability <= 1.0:
            raise InvalidConfigError("wall_probability", f"must be within [0, 1], got {self.wall_probability}")
        if self.iterations < 0:
            raise InvalidConfigError("iterations", "cannot be negative")
        if self.min_region_size < 1:
            raise InvalidConfigError("min_region_size", "must be at least 1")
        return self


__all__ = ["DungeonConfig", "CaveConfig"]
