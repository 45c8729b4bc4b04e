"""Pipeline orchestration for dungeon generation.

Two pipelines share the same skeleton: a seeded ``random.Random`` owned by
the run, an ordered list of phases timed into ``metrics['phase_ms']`` and a
finished :class:`~delve.dungeon.dungeon.Dungeon` at the end. Nothing here
raises for valid parameters; shortfalls (too few rooms, no cave regions) are
logged and flagged in the metrics instead.
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .caves import generate_cave_grid
from .config import CaveConfig, DungeonConfig
from .connectivity import unreachable_rooms
from .dungeon import Dungeon
from .grid import Grid
from .metrics import init_metrics
from .rooms import Room, RoomType, carve_rooms, place_rooms
from .tiles import FLOOR, TILE_KINDS
from .tunnels import connect_rooms, place_doors

log = get_logger("delve.dungeon")

MAX_RANDOM_SEED = 1_000_000
_FALSY = {"0", "false", "no", ""}


def resolve_seed(seed: Optional[int]) -> int:
    # 0 is a valid deterministic seed; only None draws a fresh one
    if seed is None:
        return random.randint(1, MAX_RANDOM_SEED)
    return int(seed)


def metrics_enabled(default: bool = True) -> bool:
    """Metrics switch: env var first, then the Flask app config when one is active."""
    enabled = default
    if "DUNGEON_ENABLE_GENERATION_METRICS" in os.environ:
        enabled = os.environ["DUNGEON_ENABLE_GENERATION_METRICS"].lower() not in _FALSY
    from flask import current_app, has_app_context

    if has_app_context() and "DUNGEON_ENABLE_GENERATION_METRICS" in current_app.config:
        enabled = bool(current_app.config["DUNGEON_ENABLE_GENERATION_METRICS"])
    return enabled


class _Pipeline:
    kind = ""

    def __init__(self, seed: Optional[int], enable_metrics: Optional[bool] = None):
        self.seed = resolve_seed(seed)
        self.rng = random.Random(self.seed)
        self.log = log.bind(seed=self.seed, kind=self.kind)
        self.enable_metrics = metrics_enabled() if enable_metrics is None else enable_metrics
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self._phase_times: Dict[str, int] = {}

    def _phase(self, label, fn, *a, **k):
        if not self.enable_metrics:
            return fn(*a, **k)
        ps = time.perf_counter()
        r = fn(*a, **k)
        self._phase_times[label] = int((time.perf_counter() - ps) * 1000)
        return r

    def _record(self, key: str, value) -> None:
        if self.enable_metrics:
            self.metrics[key] = value

    def _finish(self, dungeon: Dungeon, started: float) -> Dungeon:
        if self.enable_metrics:
            self.metrics["tiles"] = {k: dungeon.grid.count(k) for k in TILE_KINDS}
            self.metrics["phase_ms"] = self._phase_times
            self.metrics["runtime_ms"] = int((time.perf_counter() - started) * 1000)
        self.log.debug(
            event="dungeon_generated",
            width=dungeon.width,
            height=dungeon.height,
            runtime_ms=self.metrics.get("runtime_ms"),
        )
        return dungeon


class RoomDungeonGenerator(_Pipeline):
    """Rooms joined by L-shaped corridors.

    Phases: place rooms, carve them, connect them (spanning structure plus a
    few short extra edges), doors, then start/end/special designation. The
    first room is always the start room; the end room is the room whose
    centre lies farthest from it.
    """

    kind = "rooms"

    def __init__(self, config: DungeonConfig, enable_metrics: Optional[bool] = None):
        config.validate()
        super().__init__(config.seed, enable_metrics)
        self.config = config

    def run(self) -> Dungeon:
        started = time.perf_counter()
        cfg = self.config
        grid = Grid(cfg.width, cfg.height)
        rooms, target, exhausted = self._phase("place_rooms", place_rooms, cfg, self.rng)
        self._record("rooms_attempted", target)
        self._record("rooms_placed", len(rooms))
        self._record("generation_exhausted", exhausted)
        if exhausted:
            self.log.warn(event="generation_exhausted", placed=len(rooms), target=target)
        else:
            self.log.debug(event="rooms_placed", placed=len(rooms), target=target)

        self._phase("carve_rooms", carve_rooms, grid, rooms)
        floor_before = grid.count(FLOOR)
        edges = self._phase("connect_rooms", connect_rooms, grid, rooms, self.rng, cfg)
        self._record("corridors_carved", len(edges))
        self._record("extra_connections", sum(1 for e in edges if e[2]))
        self._record("cells_carved", grid.count(FLOOR) - floor_before)
        doors = self._phase("place_doors", place_doors, grid, rooms)
        self._record("doors_created", doors)

        dungeon = Dungeon(grid=grid, rooms=rooms, seed=self.seed, kind=self.kind, config=cfg, metrics=self.metrics)
        self._phase("assign_room_types", self._assign_room_types, dungeon)
        missing = self._phase("connectivity_check", unreachable_rooms, dungeon)
        self._record("unreachable_rooms", len(missing))
        if missing:
            self.log.warn(event="unreachable_rooms", rooms=[r.id for r in missing])
        return self._finish(dungeon, started)

    def _assign_room_types(self, dungeon: Dungeon) -> None:
        rooms = dungeon.rooms
        start_room = rooms[0]
        start_room.type = RoomType.START
        end_room = _farthest_room(start_room, rooms)
        if end_room is not start_room:
            end_room.type = RoomType.END
        # Largest of the remaining rooms becomes the special room
        rest = [r for r in rooms if r is not start_room and r is not end_room]
        if rest:
            max(rest, key=lambda r: r.area).type = RoomType.SPECIAL
        dungeon.set_start(start_room.random_position(self.rng))
        dungeon.set_end(end_room.random_position(self.rng))


def _farthest_room(origin: Room, rooms: List[Room]) -> Room:
    best = origin
    best_dist = 0.0
    for r in rooms:
        d = origin.distance_to(r)
        if d > best_dist:
            best_dist = d
            best = r
    return best


class CaveDungeonGenerator(_Pipeline):
    """Cellular-automata caves; start in the largest region, end in the smallest."""

    kind = "cave"

    def __init__(self, config: CaveConfig, enable_metrics: Optional[bool] = None):
        config.validate()
        super().__init__(config.seed, enable_metrics)
        self.config = config

    def run(self) -> Dungeon:
        started = time.perf_counter()
        grid, regions, found = self._phase("cave_automaton", generate_cave_grid, self.config, self.rng)
        self._record("regions_found", found)
        self._record("regions_retained", len(regions))
        self._record("corridors_carved", max(0, len(regions) - 1))
        dungeon = Dungeon(
            grid=grid, rooms=[], regions=regions, seed=self.seed, kind=self.kind, config=self.config, metrics=self.metrics
        )
        if not regions:
            self._record("no_connectable_regions", True)
            self.log.warn(event="no_connectable_regions", regions_found=found)
            return self._finish(dungeon, started)
        dungeon.set_start(self.rng.choice(regions[0]))
        dungeon.set_end(self.rng.choice(regions[-1]))
        self.log.debug(event="cave_regions", found=found, retained=len(regions))
        return self._finish(dungeon, started)


def generate(
    width: Optional[int] = None,
    height: Optional[int] = None,
    min_rooms: Optional[int] = None,
    max_rooms: Optional[int] = None,
    seed: Optional[int] = None,
    config: Optional[DungeonConfig] = None,
    enable_metrics: Optional[bool] = None,
) -> Dungeon:
    """Generate a room-and-corridor dungeon. A fixed seed always gives the same dungeon.

    ``config`` supplies every tunable (60x60 with 6-10 rooms by default); size,
    room-count and seed arguments that are not None override its values.
    """
    base = config if config is not None else DungeonConfig()
    passed = dict(width=width, height=height, min_rooms=min_rooms, max_rooms=max_rooms, seed=seed)
    cfg = replace(base, **{k: v for k, v in passed.items() if v is not None})
    return RoomDungeonGenerator(cfg, enable_metrics=enable_metrics).run()


def generate_cave(
    width: int = 60,
    height: int = 60,
    wall_probability: float = 0.45,
    iterations: int = 5,
    seed: Optional[int] = None,
    min_region_size: int = 10,
    enable_metrics: Optional[bool] = None,
) -> Dungeon:
    cfg = CaveConfig(
        width=width,
        height=height,
        wall_probability=wall_probability,
        iterations=iterations,
        min_region_size=min_region_size,
        seed=seed,
    )
    return CaveDungeonGenerator(cfg, enable_metrics=enable_metrics).run()


__all__ = [
    "RoomDungeonGenerator",
    "CaveDungeonGenerator",
    "generate",
    "generate_cave",
    "resolve_seed",
    "metrics_enabled",
]
